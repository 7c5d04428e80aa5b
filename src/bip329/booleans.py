"""Lenient decoder for boolean fields that some producers emit as strings."""

from __future__ import annotations

from typing import Any

from .errors import InvalidBooleanError


_BOOLEAN_STRINGS: dict[str, bool] = {"true": True, "false": False}


def decode_flexible_bool(value: Any) -> bool:
    """Decode a JSON boolean, or the string "true"/"false" in any ASCII case.

    Numbers, null and every other string are rejected.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        decoded = _BOOLEAN_STRINGS.get(value.lower() if value.isascii() else value)
        if decoded is not None:
            return decoded
    raise InvalidBooleanError(value)
