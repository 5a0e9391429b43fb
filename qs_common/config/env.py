"""Environment variable parsing utilities."""

from __future__ import annotations

import re

_LIST_SPLIT_RE = re.compile(r"[\s,]+")


def parse_bool_env(value: str | None) -> bool | None:
    """Parse a boolean from an environment variable string.

    Returns True for "1", "true", "yes", "on" (case-insensitive).
    Returns None if value is None.
    """
    if value is None:
        return None
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_int_env(value: str | None) -> int | None:
    """Parse an integer from an environment variable string.

    Returns None if value is None or cannot be parsed.
    """
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_list_env(value: str | None) -> list[str] | None:
    """Parse a whitespace- or comma-separated list.

    Example: "5 10" -> ["5", "10"]; "" -> [] (an explicitly empty list).
    Returns None if value is None.
    """
    if value is None:
        return None
    return [token for token in _LIST_SPLIT_RE.split(value.strip()) if token]
