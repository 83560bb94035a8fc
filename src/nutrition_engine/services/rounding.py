"""Boundary rounding helpers for nutrition values."""

import math
from decimal import ROUND_HALF_UP, Decimal

_WHOLE_FLOAT_LIMIT = 2.0**53


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to ``digits`` decimals with halves rounded away from zero.

    Works on the shortest decimal representation of the float, so label
    values such as ``1.45`` round to ``1.5`` rather than ``1.4``.
    """
    value = float(value)
    # Floats past 2**53 are already whole; inf and nan pass through.
    if not math.isfinite(value) or abs(value) >= _WHOLE_FLOAT_LIMIT:
        return value + 0.0
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    # "+ 0.0" folds -0.0 into 0.0
    return float(rounded) + 0.0


def round_int(value: float) -> int:
    """Round to the nearest integer."""
    return int(round_half_up(value))


def round_tenth(value: float) -> float:
    """Round to one decimal place."""
    return round_half_up(value, 1)


def round_hundredth(value: float) -> float:
    """Round to two decimal places."""
    return round_half_up(value, 2)


def round_to_int_grams(grams: float) -> int:
    """Grams are entered and displayed as whole numbers."""
    return round_int(grams)


def round_to_tenth_servings(servings: float) -> float:
    """Servings are entered and displayed with 0.1 precision."""
    return round_tenth(servings)
