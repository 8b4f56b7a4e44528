"""Dot-path field access on arbitrarily shaped records."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_MISSING = object()


def _step(value: Any, key: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(key, _MISSING)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        # only non-negative indexes; "-1" is not a path into a list
        if not key.isdigit():
            return _MISSING
        try:
            return value[int(key)]
        except (ValueError, IndexError):
            return _MISSING
    return getattr(value, key, _MISSING)


def stringify(value: Any) -> str:
    if value is None or value is _MISSING:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def extract_field(item: Any, field_path: str) -> str:
    """Resolve ``field_path`` (e.g. ``"address.city"``) on ``item`` as a string.

    Any missing or ``None`` segment yields ``""`` instead of raising.
    """
    value = item
    for key in field_path.split("."):
        if value is None or value is _MISSING:
            return ""
        value = _step(value, key)
    return stringify(value)
