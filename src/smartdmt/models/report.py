"""Diagnostic report models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ReportMode(str, Enum):
    """Which smartctl report to show."""

    TABLE = "table"
    FULL = "full"

    def toggled(self) -> ReportMode:
        return ReportMode.FULL if self is ReportMode.TABLE else ReportMode.TABLE

    @property
    def label(self) -> str:
        return "Table View" if self is ReportMode.TABLE else "Full View"


class CommandResult(BaseModel):
    """Outcome of one external command invocation."""

    model_config = {"frozen": True}

    args: tuple[str, ...]
    returncode: int | None
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class DiagnosticReport(BaseModel):
    """Text produced by smartctl for one device and mode."""

    model_config = {"frozen": True, "extra": "forbid"}

    device_path: str
    mode: ReportMode
    text: str = ""
    failed: bool = False
    returncode: int | None = None
