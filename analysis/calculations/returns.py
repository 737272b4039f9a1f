"""
Returns calculation utilities.
Pure functions for percent changes between two closing prices.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional


class UndefinedRatioError(ArithmeticError):
    """Raised when a percent change has a zero (or non-finite) base."""
    pass


def percent_change(start: float, end: float) -> float:
    """
    Calculate percent change from start to end.

    Formula: (end - start) / start × 100

    Args:
        start: Base price
        end: Later price

    Returns:
        Percent change (5.0 = +5%)

    Raises:
        UndefinedRatioError: If start is zero or the result is not finite
    """
    if start == 0:
        raise UndefinedRatioError(f"Percent change undefined for zero base (end={end})")

    result = (end - start) / start * 100

    if not math.isfinite(result):
        raise UndefinedRatioError(f"Percent change not finite: start={start}, end={end}")

    return result


def safe_percent_change(start: float, end: float) -> Optional[float]:
    """
    Percent change, or None when undefined.

    Args:
        start: Base price
        end: Later price

    Returns:
        Percent change, or None for a zero base
    """
    try:
        return percent_change(start, end)
    except UndefinedRatioError:
        return None


def period_return(closes: List[float]) -> Optional[float]:
    """
    Multi-day return from the first to the last close of a series.

    Example:
        closes = [100, 110, 90] → (90 - 100) / 100 × 100 = -10.0

    Args:
        closes: Closing prices in chronological order

    Returns:
        Percent return, or None for an empty series or zero first close
    """
    if not closes:
        return None

    return safe_percent_change(closes[0], closes[-1])


def to_fixed(value: float, places: int = 2) -> str:
    """
    Render a value with a fixed number of decimals.

    Ties on the exact binary value round away from zero, so 10.125 gives
    "10.13" and 1.25 gives "1.3" (Python's round() and format() give
    "10.12" and "1.2").

    Args:
        value: Finite number
        places: Decimal places

    Returns:
        Decimal string, e.g. "-3.10"
    """
    exponent = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP))


def round_fixed(value: float, places: int = 2) -> float:
    """Round with ties away from zero (see to_fixed)."""
    return float(to_fixed(value, places))


def round_optional(value: Optional[float], places: int = 2) -> Optional[float]:
    """Round a value for display, passing None through."""
    if value is None:
        return None
    return round_fixed(value, places)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return int(math.floor(value + 0.5))
