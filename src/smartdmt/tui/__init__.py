from __future__ import annotations

from .app import SmartApp
from .widgets import DeviceList, ReportView

__all__ = ["DeviceList", "ReportView", "SmartApp"]
