from __future__ import annotations

PLACEHOLDER = "-"
ELLIPSIS = "..."


def truncate(value: str, max_len: int) -> str:
    """Shorten ``value`` to ``max_len`` characters; empty values become a dash."""
    if not value:
        return PLACEHOLDER
    if len(value) <= max_len:
        return value
    if max_len <= len(ELLIPSIS):
        return value[:max_len]
    return value[: max_len - len(ELLIPSIS)] + ELLIPSIS


def placeholder(value: str) -> str:
    return value or PLACEHOLDER
