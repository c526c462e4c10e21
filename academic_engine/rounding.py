"""Decimal rounding helpers shared by every aggregation step."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round to ``places`` decimals, halves away from zero.

    Uses the shortest repr of the float so 2.675 rounds to 2.68
    instead of the binary-float result 2.67.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def round_optional(value: Optional[float], places: int = 2) -> Optional[float]:
    if value is None:
        return None
    return round_half_up(value, places)
