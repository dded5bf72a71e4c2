from __future__ import annotations

import logging

from smartdmt.config import CommandsConfig
from smartdmt.models import DiagnosticReport, ReportMode

from .process import run_command

logger = logging.getLogger(__name__)

MODE_FLAGS = {
    ReportMode.TABLE: "-A",
    ReportMode.FULL: "-x",
}


def mode_arguments(mode: ReportMode) -> list[str]:
    return [MODE_FLAGS[mode]]


async def fetch_report(
    path: str, mode: ReportMode, commands: CommandsConfig
) -> DiagnosticReport:
    """Run smartctl for one device. Failures are returned as data, never raised."""
    args = [commands.smartctl, *mode_arguments(mode), path]
    result = await run_command(args, commands.timeout)
    if not result.ok:
        logger.debug(
            "smartctl %s %s failed with status %s",
            mode.value,
            path,
            result.returncode,
        )

    return DiagnosticReport(
        device_path=path,
        mode=mode,
        text=result.output,
        failed=not result.ok,
        returncode=result.returncode,
    )
