from __future__ import annotations

from .controller import Controller
from .devices import PARSERS, list_devices, parse_lsblk_json, parse_lsblk_pairs
from .diagnostics import fetch_report
from .preflight import PreflightError, check_dependencies
from .process import run_command

__all__ = [
    "PARSERS",
    "Controller",
    "PreflightError",
    "check_dependencies",
    "fetch_report",
    "list_devices",
    "parse_lsblk_json",
    "parse_lsblk_pairs",
    "run_command",
]
