from __future__ import annotations

import asyncio

import typer

from smartdmt.core.diagnostics import fetch_report
from smartdmt.models import ReportMode

from ..common import load_settings_or_exit


def report(
    path: str = typer.Argument(..., help="Device path, e.g. /dev/sda"),
    full: bool = typer.Option(
        False, "--full", "-f", help="Show the full report instead of the table"
    ),
) -> None:
    """Print the SMART report for one device."""
    settings = load_settings_or_exit()
    mode = ReportMode.FULL if full else ReportMode.TABLE
    result = asyncio.run(fetch_report(path, mode, settings.commands))

    typer.echo(result.text, nl=not result.text.endswith("\n"))
    if result.failed:
        status = result.returncode if result.returncode is not None else "n/a"
        typer.echo(f"smartctl failed (exit status {status})", err=True)
        raise typer.Exit(1)


def register(app: typer.Typer) -> None:
    app.command()(report)
