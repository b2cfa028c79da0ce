"""Value coercion helpers shared by validation and legacy migration."""

from __future__ import annotations

import math
from typing import Any


def is_empty(value: Any) -> bool:
    """None, the empty string and empty lists count as "not filled"."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, set)):
        return len(value) == 0
    return False


def parse_number(value: Any) -> int | float | None:
    """Parse ``value`` as an int, else a float.

    Returns None for booleans, non-finite numbers and unparseable input.

    Examples:
        >>> parse_number("100")
        100
        >>> parse_number(" 2.5 ")
        2.5
        >>> parse_number("16A") is None
        True
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None

    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_boolean(value: Any) -> bool | None:
    """Accept real booleans and the strings "true"/"false" (any case)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return None
