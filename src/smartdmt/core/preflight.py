from __future__ import annotations

import logging

from smartdmt.config import CommandsConfig

from .devices import lsblk_arguments
from .process import run_command

logger = logging.getLogger(__name__)


class PreflightError(Exception):
    """A required external command is missing or unusable."""

    def __init__(self, command: str, detail: str = "") -> None:
        super().__init__(f"{command} not available: {detail}" if detail else command)
        self.command = command
        self.detail = detail


async def check_dependencies(commands: CommandsConfig) -> None:
    """Probe lsblk and smartctl once before the dashboard starts."""
    probes = [
        (commands.lsblk, lsblk_arguments(commands)),
        (commands.smartctl, [commands.smartctl, "--version"]),
    ]
    for name, args in probes:
        result = await run_command(args, commands.timeout)
        if not result.ok:
            detail = result.output.strip() or f"exit status {result.returncode}"
            raise PreflightError(name, detail)
        logger.debug("%s is available", name)
