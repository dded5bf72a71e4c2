"""Device models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, field_validator, model_validator

DEV_PREFIX = "/dev/"
VIRTUAL_MARKERS = ("loop", "ram")


class Device(BaseModel):
    """Block device as reported by lsblk."""

    model_config = {"frozen": True, "extra": "ignore"}

    name: str = ""
    path: str = ""
    model: str = ""
    serial: str = ""

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        # lsblk -P emits upper-case column names
        data = {str(key).lower(): value for key, value in data.items()}
        path, name = data.get("path"), data.get("name")
        if not isinstance(path, str) or not path.strip():
            # left to field validation
            return data
        if name is None or (isinstance(name, str) and not name.strip()):
            data["name"] = path.strip().removeprefix(DEV_PREFIX)
        return data

    @field_validator("name", "path", "model", "serial", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value

    @property
    def is_virtual(self) -> bool:
        return any(marker in self.path for marker in VIRTUAL_MARKERS)

    @property
    def filter_value(self) -> str:
        return f"{self.name} {self.serial}"
