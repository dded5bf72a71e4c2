"""Data models for smartdmt."""

from smartdmt.models.device import Device
from smartdmt.models.report import CommandResult, DiagnosticReport, ReportMode

__all__ = [
    "CommandResult",
    "Device",
    "DiagnosticReport",
    "ReportMode",
]
