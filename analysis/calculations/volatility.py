"""
Volatility calculation utilities.
Pure functions for population standard deviation of daily percent changes.
"""

import numpy as np
from typing import Iterable, List, Optional

from analysis.models import DailyRecord


class VolatilityError(Exception):
    """Raised when volatility calculation fails."""
    pass


def population_std(values: Iterable[float]) -> Optional[float]:
    """
    Population standard deviation (divide by N, not N-1).

    Args:
        values: Numeric values

    Returns:
        Standard deviation, or None for an empty input

    Raises:
        VolatilityError: If values contain NaN or infinity
    """
    array = np.asarray(list(values), dtype=np.float64)

    if array.size == 0:
        return None

    if np.any(np.isnan(array)):
        raise VolatilityError("NaN values not allowed in volatility input")

    if np.any(np.isinf(array)):
        raise VolatilityError("Infinite values not allowed in volatility input")

    return float(np.std(array, ddof=0))


def defined_percent_changes(records: Iterable[DailyRecord]) -> List[float]:
    """Daily percent changes, skipping records where it is undefined."""
    return [r.percent_change for r in records if r.percent_change is not None]


def absolute_change_volatility(records: Iterable[DailyRecord]) -> Optional[float]:
    """
    Volatility as the spread of absolute daily moves.

    Formula: σ = std(|percent_change|), population

    Args:
        records: Daily records (any order)

    Returns:
        Volatility in percent points, or None if no record has a defined
        percent change
    """
    changes = defined_percent_changes(records)
    return population_std(abs(c) for c in changes)


def signed_change_volatility(records: Iterable[DailyRecord]) -> Optional[float]:
    """
    Volatility as the spread of signed daily moves.

    Args:
        records: Daily records (any order)

    Returns:
        Volatility in percent points, or None if no record has a defined
        percent change
    """
    return population_std(defined_percent_changes(records))
