import math
from typing import Any


def is_number(value: Any) -> bool:
    """True for finite ints and floats; bools are not numbers here."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def ensure_number(value: Any, field: str) -> float:
    if not is_number(value):
        raise ValueError(f"{field} must be a number")
    return value

