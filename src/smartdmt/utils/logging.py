from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

import coloredlogs  # type: ignore[import]

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
DEFAULT_DATE_FORMAT = "%H:%M:%S"


def _install_file_handler(log_file: Path, level: str) -> None:
    root = logging.getLogger()
    # at most one log file is open at a time
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(
        coloredlogs.BasicFormatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    )
    root.addHandler(handler)
    root.setLevel(level)


def setup_logging(level: LogLevel | None = None, log_file: Path | None = None) -> None:
    """Setup logging with coloredlogs.

    With ``log_file`` set, records go to that file without colours so that
    the dashboard owns the terminal.
    """
    resolved = (level or os.environ.get("LOGLEVEL", "INFO")).upper()

    if log_file is None:
        coloredlogs.install(
            level=resolved,
            fmt=DEFAULT_FORMAT,
            datefmt=DEFAULT_DATE_FORMAT,
        )
    else:
        _install_file_handler(log_file, resolved)

    # textual and asyncio are chatty at DEBUG
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("textual").setLevel(logging.WARNING)
