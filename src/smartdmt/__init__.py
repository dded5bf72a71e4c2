"""smartdmt - SMART Device Monitoring Terminal."""

from __future__ import annotations

from importlib.metadata import version

from .config import CommandsConfig, DisplayConfig, Settings, get_settings
from .models import Device, DiagnosticReport, ReportMode

__all__ = [
    "CommandsConfig",
    "Device",
    "DiagnosticReport",
    "DisplayConfig",
    "ReportMode",
    "Settings",
    "__version__",
    "get_settings",
]

__version__ = version("smartdmt")
