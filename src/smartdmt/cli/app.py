from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from smartdmt.config import default_log_path, expand_path, with_overrides
from smartdmt.models import ReportMode
from smartdmt.utils.logging import LogLevel, setup_logging

from . import config as config_cmd
from .commands.dashboard import run_dashboard
from .commands.devices import register as register_devices
from .commands.report import register as register_report
from .common import load_settings_or_exit

app = typer.Typer(help="smartdmt - SMART Device Monitoring Terminal")

app.add_typer(config_cmd.app, name="config")

register_devices(app)
register_report(app)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="CRITICAL, ERROR, WARNING, INFO or DEBUG"),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Write log records to this file"),
    ] = None,
    mode: Annotated[
        ReportMode | None,
        typer.Option("--mode", "-m", help="Initial report view"),
    ] = None,
    interval: Annotated[
        float | None,
        typer.Option("--interval", "-i", help="Refresh interval in seconds"),
    ] = None,
    parser: Annotated[
        str | None,
        typer.Option("--parser", help="lsblk output format: json or pairs"),
    ] = None,
) -> None:
    """Interactive dashboard of block devices and their SMART data."""
    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"smartdmt version {get_version('smartdmt')}")
        raise typer.Exit()

    level: LogLevel | None = _parse_level(log_level)

    if ctx.invoked_subcommand is not None:
        setup_logging(level, log_file)
        return

    settings = load_settings_or_exit()
    try:
        settings = with_overrides(
            settings, mode=mode, refresh_interval=interval, parser=parser
        )
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    # the dashboard owns the terminal, so records always go to a file
    if log_file is None:
        log_file = (
            expand_path(settings.logging.file)
            if settings.logging.file
            else default_log_path()
        )
    setup_logging(level or settings.logging.level, log_file)

    run_dashboard(settings)


def _parse_level(value: str | None) -> LogLevel | None:
    if value is None:
        return None
    level = value.upper()
    if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
        typer.echo(f"Invalid log level: {value}", err=True)
        raise typer.Exit(1)
    return level  # type: ignore[return-value]
