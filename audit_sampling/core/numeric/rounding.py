"""
Rounding helpers for monetary units.

All rounding is half-to-even (Python's ``round``), matching conventional
statistical rounding rather than truncation.
"""
from __future__ import annotations

import math


def round_units(value: float) -> int:
    """Round to the nearest whole monetary unit, clamped at zero."""
    if not math.isfinite(value):
        return 0
    rounded = round(value)
    return rounded if rounded > 0 else 0


def round_cents(value: float) -> float:
    """Round a monetary amount to two decimal places."""
    return round(value, 2)


def ceil_non_negative(value: float) -> int:
    if value <= 0:
        return 0
    return math.ceil(value)


def eligible_value(value: float) -> float:
    """Contribution of a book value to the total (non-finite and negatives count as 0)."""
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value
