"""
Insight generator - threshold-based narrative observations.
Deterministic text built from volume, daily moves, streaks and overall return.
"""

from typing import List, Optional, Sequence

from analysis.models import DailyRecord, Insight, InsightKind
from analysis.calculations.returns import period_return, round_fixed, round_half_up, to_fixed
from analysis.calculations.streaks import longest_streaks
from reports.formatters import format_large_number, format_price


MIN_RECORDS_FOR_INSIGHTS = 30
UNUSUAL_VOLUME_MULTIPLE = 3
SIGNIFICANT_DAY_MOVE_PERCENT = 5
MIN_STREAK_DAYS = 5

TITLES = {
    InsightKind.UNUSUAL_VOLUME: 'Unusual Trading Volume',
    InsightKind.SIGNIFICANT_MOVEMENT: 'Significant Price Movement',
    InsightKind.BULLISH_TREND: 'Bullish Trend Detected',
    InsightKind.BEARISH_TREND: 'Bearish Trend Detected',
    InsightKind.OVERALL_PERFORMANCE: 'Overall Performance',
}


def generate_insights(
    records: Sequence[DailyRecord],
    symbol: Optional[str] = None
) -> List[Insight]:
    """
    Generate insights for a record sequence.

    Emits, in order and at most once each: unusual volume, significant
    price movement, bullish streak, bearish streak, overall performance.

    Args:
        records: Daily records in chronological order
        symbol: Ticker used in the overall performance text (optional)

    Returns:
        List of insights; empty when fewer than 30 records
    """
    if len(records) < MIN_RECORDS_FOR_INSIGHTS:
        return []

    candidates = [
        _unusual_volume(records),
        _significant_movement(records),
    ]

    longest_up, longest_down = longest_streaks(records)
    if longest_up > MIN_STREAK_DAYS:
        candidates.append(_insight(
            InsightKind.BULLISH_TREND,
            f"Detected a bullish trend of {longest_up} consecutive days of price increases."
        ))
    if longest_down > MIN_STREAK_DAYS:
        candidates.append(_insight(
            InsightKind.BEARISH_TREND,
            f"Detected a bearish trend of {longest_down} consecutive days of price decreases."
        ))

    candidates.append(_overall_performance(records, symbol))

    return [insight for insight in candidates if insight is not None]


def _insight(kind: InsightKind, text: str) -> Insight:
    return Insight(kind=kind, title=TITLES[kind], text=text)


def _unusual_volume(records: Sequence[DailyRecord]) -> Optional[Insight]:
    average_volume = sum(r.volume for r in records) / len(records)

    highest = records[0]
    for record in records:
        if record.volume > highest.volume:
            highest = record

    if highest.volume <= average_volume * UNUSUAL_VOLUME_MULTIPLE:
        return None

    multiple = round_half_up(highest.volume / average_volume)
    return _insight(
        InsightKind.UNUSUAL_VOLUME,
        f"Unusually high trading volume detected on {highest.date} with "
        f"{format_large_number(highest.volume)} shares traded, which is "
        f"{multiple} times the average daily volume."
    )


def _significant_movement(records: Sequence[DailyRecord]) -> Optional[Insight]:
    significant = [
        r for r in records
        if r.percent_change is not None and abs(r.percent_change) > SIGNIFICANT_DAY_MOVE_PERCENT
    ]

    if not significant:
        return None

    most_significant = significant[0]
    for record in significant:
        if abs(record.percent_change) > abs(most_significant.percent_change):
            most_significant = record

    return _insight(
        InsightKind.SIGNIFICANT_MOVEMENT,
        f"{len(significant)} day(s) had price movements exceeding 5%. "
        f"Most significant was on {most_significant.date} with a "
        f"{to_fixed(most_significant.percent_change)}% change."
    )


def _overall_performance(records: Sequence[DailyRecord], symbol: Optional[str]) -> Insight:
    first_price = records[0].close
    last_price = records[-1].close
    subject = f"{symbol}'s stock price" if symbol else "the stock price"
    performance = period_return([first_price, last_price])

    if performance is None:
        text = (
            f"Over the selected period, {subject} moved from {format_price(first_price)} "
            f"to {format_price(last_price)}; the percent change is undefined for a zero "
            f"starting price."
        )
    else:
        performance = round_fixed(performance)
        direction = 'increased' if performance > 0 else 'decreased'
        text = (
            f"Over the selected period, {subject} {direction} by {to_fixed(abs(performance))}%, "
            f"from {format_price(first_price)} to {format_price(last_price)}."
        )

    return _insight(InsightKind.OVERALL_PERFORMANCE, text)
