"""Display helpers for grades: rounding mode, decimals, pass/fail."""

import enum
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import Any

from .rules import to_decimal


class RoundingMode(str, enum.Enum):
    """How a grade is rounded for display."""

    UP = "up"
    DOWN = "down"
    NEAREST = "nearest"  # nearest half point


def round_grade(value: Any, mode: Any = RoundingMode.NEAREST) -> Decimal:
    """Round a grade for display according to ``mode``."""
    number = to_decimal(value)
    mode = RoundingMode(mode)
    if mode == RoundingMode.UP:
        return number.to_integral_value(rounding=ROUND_CEILING)
    if mode == RoundingMode.DOWN:
        return number.to_integral_value(rounding=ROUND_FLOOR)
    return (number * 2).to_integral_value(rounding=ROUND_HALF_UP) / 2


def format_grade(value: Any, show_decimals: bool = True) -> str:
    """One decimal when ``show_decimals``, otherwise a whole number."""
    number = to_decimal(value)
    if show_decimals:
        return str(number.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
    return str(number.to_integral_value(rounding=ROUND_HALF_UP))


def is_passing(value: Any, passing_grade: Any) -> bool:
    return to_decimal(value) >= to_decimal(passing_grade)
