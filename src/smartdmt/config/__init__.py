from __future__ import annotations

from .paths import (
    APP_NAME,
    CONFIG_FILENAME,
    default_config_path,
    default_log_path,
    expand_path,
)
from .settings import (
    CONFIG_ENV_VAR,
    CommandsConfig,
    DisplayConfig,
    LoggingConfig,
    Settings,
    get_settings,
    load_settings,
    render_settings_toml,
    resolve_config_path,
    with_overrides,
    write_settings,
)

__all__ = [
    "APP_NAME",
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "CommandsConfig",
    "DisplayConfig",
    "LoggingConfig",
    "Settings",
    "default_config_path",
    "default_log_path",
    "expand_path",
    "get_settings",
    "load_settings",
    "render_settings_toml",
    "resolve_config_path",
    "with_overrides",
    "write_settings",
]
