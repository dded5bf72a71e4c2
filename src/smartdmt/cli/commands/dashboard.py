from __future__ import annotations

import asyncio
import logging

import typer
from rich.console import Console

from smartdmt import __version__
from smartdmt.config import Settings
from smartdmt.core.preflight import PreflightError, check_dependencies
from smartdmt.tui import SmartApp

logger = logging.getLogger(__name__)


def run_dashboard(settings: Settings) -> None:
    """Check the external commands, then hand the terminal to the dashboard."""
    console = Console(stderr=True)
    console.print(f"smartdmt {__version__} - SMART Device Monitoring Terminal")

    try:
        asyncio.run(check_dependencies(settings.commands))
    except PreflightError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    app = SmartApp(settings)
    try:
        app.run()
    except Exception as exc:
        logger.exception("Dashboard crashed")
        console.print_exception()
        raise typer.Exit(1) from exc

    if app.return_code:
        raise typer.Exit(app.return_code)
