from __future__ import annotations

import json
import logging
import re
import shlex
from collections.abc import Callable, Iterable

from pydantic import ValidationError

from smartdmt.config import CommandsConfig
from smartdmt.models import Device

from .process import run_command

logger = logging.getLogger(__name__)

LSBLK_COLUMNS = "NAME,PATH,MODEL,SERIAL"

Parser = Callable[[str], list[Device]]

# lsblk -P writes unsafe bytes as \xNN
_HEX_ESCAPE = re.compile(r"(?:\\x[0-9a-fA-F]{2})+")


def lsblk_arguments(commands: CommandsConfig) -> list[str]:
    output_flag = "--json" if commands.parser == "json" else "-P"
    return [commands.lsblk, "-d", "-o", LSBLK_COLUMNS, "-n", output_flag]


def _physical(devices: Iterable[Device]) -> list[Device]:
    return [device for device in devices if not device.is_virtual]


def parse_lsblk_json(text: str) -> list[Device]:
    """Parse ``lsblk --json`` output.

    Raises ``ValueError`` when the document is not what lsblk emits.
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("lsblk output is not a JSON object")
    entries = data.get("blockdevices") or []
    if not isinstance(entries, list):
        raise ValueError("blockdevices is not a list")
    try:
        return _physical(Device.model_validate(entry) for entry in entries)
    except ValidationError as exc:
        raise ValueError(f"Unexpected lsblk entry: {exc}") from exc


def _unescape(value: str) -> str:
    def _decode(match: re.Match[str]) -> str:
        raw = bytes.fromhex(match.group(0).replace("\\x", ""))
        return raw.decode("utf-8", errors="replace")

    return _HEX_ESCAPE.sub(_decode, value)


def _parse_pairs_line(line: str) -> dict[str, str]:
    fields: dict[str, str] = {}
    for token in shlex.split(line):
        key, sep, value = token.partition("=")
        if not sep:
            raise ValueError(f"Malformed lsblk field: {token!r}")
        fields[key] = _unescape(value)
    return fields


def parse_lsblk_pairs(text: str) -> list[Device]:
    """Parse ``lsblk -P`` output (``KEY="value"`` pairs, one device per line)."""
    devices = []
    for line in text.splitlines():
        if not line.strip():
            continue
        devices.append(Device.model_validate(_parse_pairs_line(line)))
    return _physical(devices)


PARSERS: dict[str, Parser] = {
    "json": parse_lsblk_json,
    "pairs": parse_lsblk_pairs,
}


async def list_devices(commands: CommandsConfig) -> list[Device]:
    """Enumerate attached block devices; any failure yields an empty list."""
    result = await run_command(lsblk_arguments(commands), commands.timeout)
    if not result.ok:
        logger.warning(
            "Device enumeration failed (status %s): %s",
            result.returncode,
            result.output.strip(),
        )
        return []

    parse = PARSERS[commands.parser]
    try:
        devices = parse(result.output)
    except ValueError as exc:
        # json.JSONDecodeError is a ValueError
        logger.warning("Could not parse lsblk output: %s", exc)
        return []

    logger.debug("Enumerated %d device(s)", len(devices))
    return devices
