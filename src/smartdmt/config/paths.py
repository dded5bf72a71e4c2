from __future__ import annotations

import os
from pathlib import Path

import platformdirs

APP_NAME = "smartdmt"
CONFIG_FILENAME = "config.toml"
LOG_FILENAME = "smartdmt.log"


def default_config_path() -> Path:
    return Path(platformdirs.user_config_dir(APP_NAME)) / CONFIG_FILENAME


def default_log_path() -> Path:
    return Path(platformdirs.user_log_dir(APP_NAME)) / LOG_FILENAME


def expand_path(value: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(value)))
