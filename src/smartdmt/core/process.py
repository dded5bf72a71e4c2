from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from smartdmt.models import CommandResult

logger = logging.getLogger(__name__)


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is not None:
        return
    try:
        proc.kill()
    except ProcessLookupError:
        return
    await proc.wait()


async def run_command(args: Sequence[str], timeout: float) -> CommandResult:
    """Run ``args`` and capture stdout and stderr as one text.

    Spawn errors and timeouts are reported with ``returncode=None``. The child
    is killed when the calling task is cancelled.
    """
    argv = tuple(args)
    logger.debug("Running %s", " ".join(argv))
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except OSError as exc:
        logger.debug("Could not start %s: %s", argv[0], exc)
        return CommandResult(args=argv, returncode=None, output=str(exc))

    try:
        stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except (asyncio.TimeoutError, TimeoutError):
        await _kill(proc)
        logger.warning("%s timed out after %.1fs", argv[0], timeout)
        return CommandResult(
            args=argv,
            returncode=None,
            output=f"{argv[0]} timed out after {timeout:g}s",
        )
    except asyncio.CancelledError:
        await _kill(proc)
        raise

    output = stdout.decode("utf-8", errors="replace") if stdout else ""
    logger.debug("%s exited with status %s", argv[0], proc.returncode)
    return CommandResult(args=argv, returncode=proc.returncode, output=output)
