"""Lenient numeric extraction shared by the text and JSON parsers."""

import math
import re
from typing import Any, List

NUMBER_PATTERN = re.compile(r"\d+(?:\.\d+)?")


def to_number(value: Any, default: float) -> float:
    """
    Coerce ``value`` to a non-negative float.

    Accepts ints, floats and ``.``-decimal strings. Anything else, including
    booleans and NaN, yields ``default``. Negative numbers clamp to 0.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return max(number, 0.0)


def find_numbers(text: str) -> List[float]:
    """All unsigned decimal numbers in ``text``, in order."""
    return [float(match) for match in NUMBER_PATTERN.findall(text)]


__all__ = ["NUMBER_PATTERN", "find_numbers", "to_number"]
