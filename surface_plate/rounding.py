"""Deterministic decimal rounding matching the precision of the hand worksheet."""

import math


def round_to(value: float, decimal_places: int) -> float:
    """Round value to a fixed number of decimal places.

    The scaled value is first fixed to 11 decimals so binary representation
    artifacts (e.g. 1.005 * 100 == 100.49999999999999) do not flip the final
    rounding. Halves round toward positive infinity.
    """
    multiplier = 10 ** decimal_places
    fixed = float(f"{value * multiplier:.11f}")
    return math.floor(fixed + 0.5) / multiplier
