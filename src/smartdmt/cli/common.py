from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from smartdmt.config import Settings, get_settings, resolve_config_path
from smartdmt.config.settings import CONFIG_ENV_VAR

MISSING_CONFIG_HINT = (
    f"Unset ${CONFIG_ENV_VAR} or create the file with 'smartdmt config init'."
)


def _config_error(exc: Exception) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    if isinstance(exc, FileNotFoundError):
        typer.echo(MISSING_CONFIG_HINT, err=True)
    raise typer.Exit(1) from exc


def load_settings_or_exit() -> Settings:
    """Load the cached settings; configuration problems end the command."""
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        _config_error(exc)


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        _config_error(exc)
