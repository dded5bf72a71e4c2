from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from smartdmt.core.devices import list_devices
from smartdmt.utils.text import placeholder

from ..common import load_settings_or_exit


def devices() -> None:
    """List block devices once and exit."""
    settings = load_settings_or_exit()
    found = asyncio.run(list_devices(settings.commands))

    console = Console()
    if not found:
        console.print("No devices found.")
        return

    table = Table()
    table.add_column("Name", style="cyan")
    table.add_column("Path", style="green")
    table.add_column("Model")
    table.add_column("Serial")

    for device in found:
        table.add_row(
            device.name,
            device.path,
            placeholder(device.model),
            placeholder(device.serial),
        )

    console.print(table)
    console.print(f"\n[green]Found {len(found)} device(s)[/green]")


def register(app: typer.Typer) -> None:
    app.command()(devices)
