"""
Metrics engine - aggregate statistics over a record sequence.
Pure function, recomputed in full on every call.
"""

from typing import Sequence

from analysis.models import DailyRecord, MetricsSummary
from analysis.calculations.returns import period_return, round_fixed, round_optional, round_half_up
from analysis.calculations.volatility import absolute_change_volatility
from reports.formatters import format_large_number


class EmptyInputError(Exception):
    """Raised when metrics are requested for an empty record sequence."""
    pass


def compute_metrics(records: Sequence[DailyRecord]) -> MetricsSummary:
    """
    Compute summary statistics for a record sequence.

    - max/min price from daily high/low
    - average daily volume (plus its M/K display form)
    - return from the first close to the last close
    - volatility of absolute daily percent changes

    Args:
        records: Daily records in chronological order

    Returns:
        MetricsSummary with display rounding applied

    Raises:
        EmptyInputError: If records is empty
    """
    if not records:
        raise EmptyInputError("Cannot compute metrics for zero records")

    max_price = records[0].high
    min_price = records[0].low
    total_volume = 0

    for record in records:
        if record.high > max_price:
            max_price = record.high
        if record.low < min_price:
            min_price = record.low
        total_volume += record.volume

    average_volume = round_half_up(total_volume / len(records))
    price_increase = period_return([records[0].close, records[-1].close])

    return MetricsSummary(
        max_price=round_fixed(max_price),
        min_price=round_fixed(min_price),
        average_volume=average_volume,
        average_volume_display=format_large_number(average_volume),
        price_increase_percent=round_optional(price_increase),
        volatility=round_optional(absolute_change_volatility(records)),
        record_count=len(records),
    )
