"""
Time-window filter for record sequences.
Keeps records within N calendar years of the latest trading date.
"""

from typing import Dict, List, Optional, Sequence

import pandas as pd

from analysis.models import DailyRecord


PERIOD_YEARS: Dict[str, Optional[int]] = {
    'all': None,
    '1y': 1,
    '3y': 3,
    '5y': 5,
}


class TimeWindowError(ValueError):
    """Raised for an unknown period selector."""
    pass


def filter_by_period(records: Sequence[DailyRecord], period: str = 'all') -> List[DailyRecord]:
    """
    Filter records to the selected trailing period.

    The cutoff is the latest trading date minus N years; records on or
    after the cutoff are kept in their original order. A Feb 29 latest
    date maps to Mar 1 in non-leap years.

    Args:
        records: Daily records
        period: One of 'all', '1y', '3y', '5y'

    Returns:
        New list of records inside the window

    Raises:
        TimeWindowError: If period is not recognized
    """
    if period not in PERIOD_YEARS:
        raise TimeWindowError(
            f"Unknown period '{period}', expected one of {sorted(PERIOD_YEARS)}"
        )

    years = PERIOD_YEARS[period]
    if years is None or not records:
        return list(records)

    cutoff = period_cutoff(max(r.trading_date for r in records), years)
    return [r for r in records if r.trading_date >= cutoff]


def period_cutoff(latest, years: int):
    """
    Calendar date `years` years before `latest`.

    Only the year changes. A Feb 29 anchor whose target year has no Feb 29
    rolls over to Mar 1, as a calendar date with an out-of-range day does.
    """
    anchor = pd.Timestamp(latest)
    cutoff = anchor - pd.DateOffset(years=years)

    # DateOffset clamps Feb 29 to Feb 28
    if (anchor.month, anchor.day) == (2, 29) and cutoff.day == 28:
        cutoff += pd.Timedelta(days=1)

    return cutoff.date()
