from __future__ import annotations

import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from smartdmt.models import ReportMode

from .paths import default_config_path, expand_path

CONFIG_ENV_VAR = "SMARTDMT_CONFIG"

ParserName = Literal["json", "pairs"]
LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class CommandsConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    lsblk: str = "lsblk"
    smartctl: str = "smartctl"
    parser: ParserName = "json"
    timeout: float = Field(default=30.0, gt=0)


class DisplayConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    mode: ReportMode = ReportMode.TABLE
    refresh_interval: float = Field(default=60.0, gt=0)


class LoggingConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    level: LogLevel | None = None
    file: str | None = None


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    commands: CommandsConfig = Field(default_factory=CommandsConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return Settings()


def with_overrides(
    settings: Settings,
    *,
    mode: ReportMode | None = None,
    refresh_interval: float | None = None,
    parser: str | None = None,
) -> Settings:
    """Return a validated copy of ``settings`` with command line overrides."""
    display = settings.display.model_dump()
    commands = settings.commands.model_dump()
    if mode is not None:
        display["mode"] = mode
    if refresh_interval is not None:
        display["refresh_interval"] = refresh_interval
    if parser is not None:
        commands["parser"] = parser

    try:
        return Settings(
            commands=CommandsConfig.model_validate(commands),
            display=DisplayConfig.model_validate(display),
            logging=settings.logging,
        )
    except ValidationError as exc:
        raise ValueError(f"Invalid option: {exc}") from exc


def _toml_string(value: str) -> str:
    return json.dumps(value)


def render_settings_toml(settings: Settings) -> str:
    lines = [
        "# smartdmt configuration",
        "",
        "[commands]",
        f"lsblk = {_toml_string(settings.commands.lsblk)}",
        f"smartctl = {_toml_string(settings.commands.smartctl)}",
        f"parser = {_toml_string(settings.commands.parser)}",
        f"timeout = {settings.commands.timeout}",
        "",
        "[display]",
        f"mode = {_toml_string(settings.display.mode.value)}",
        f"refresh_interval = {settings.display.refresh_interval}",
        "",
        "[logging]",
    ]
    # TOML has no null; unset keys are left out
    if settings.logging.level is not None:
        lines.append(f"level = {_toml_string(settings.logging.level)}")
    if settings.logging.file is not None:
        lines.append(f"file = {_toml_string(settings.logging.file)}")
    lines.append("")
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
