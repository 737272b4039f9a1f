"""
Trend analyzer - yearly performance, longest runs and significant moves.
Pure function over a copy of the input sorted by trading date.
"""

from itertools import groupby
from typing import List, Optional, Sequence

from analysis.models import (
    DailyRecord,
    TrendAnalysis,
    TrendEvent,
    TrendKind,
    YearlyPerformance,
)
from analysis.calculations.returns import period_return, round_optional, to_fixed
from analysis.calculations.streaks import longest_runs
from analysis.calculations.movements import significant_moves, MOVE_WINDOW_DAYS
from analysis.calculations.volatility import signed_change_volatility


# A run must outlast roughly one trading month to be reported
MIN_REPORTED_RUN_DAYS = 20


def analyze_trends(
    records: Sequence[DailyRecord],
    symbol: Optional[str] = None
) -> TrendAnalysis:
    """
    Analyze yearly performance, trends and key events.

    Trends are emitted in order: overall trend (always), longest bullish
    run, longest bearish run (each only when longer than 20 trading days).

    Args:
        records: Daily records in any order
        symbol: Ticker used in descriptions (optional)

    Returns:
        TrendAnalysis; all collections empty for empty input
    """
    if not records:
        return TrendAnalysis()

    ordered = sort_by_date(records)
    subject = _subject(symbol)

    trends = [_overall_trend(ordered, subject)]

    bullish, bearish = longest_runs(ordered)
    if len(bullish) > MIN_REPORTED_RUN_DAYS:
        trends.append(_run_trend(bullish, TrendKind.BULLISH_RUN))
    if len(bearish) > MIN_REPORTED_RUN_DAYS:
        trends.append(_run_trend(bearish, TrendKind.BEARISH_RUN))

    return TrendAnalysis(
        yearly_performance=yearly_performance(ordered),
        trends=trends,
        key_events=_key_events(ordered),
    )


def sort_by_date(records: Sequence[DailyRecord]) -> List[DailyRecord]:
    """Stable sort of a copy by trading date."""
    return sorted(records, key=lambda r: r.trading_date)


def yearly_performance(records: Sequence[DailyRecord]) -> List[YearlyPerformance]:
    """
    Per-calendar-year performance.

    Args:
        records: Daily records sorted by trading date

    Returns:
        One entry per year present, in ascending year order
    """
    results = []

    for year, group in groupby(records, key=lambda r: r.trading_date.year):
        items = list(group)
        closes = [r.close for r in items]
        average_volume = sum(r.volume for r in items) / len(items)

        results.append(YearlyPerformance(
            year=year,
            start_price=closes[0],
            end_price=closes[-1],
            performance_percent=round_optional(period_return(closes)),
            average_volume=average_volume,
            volatility=round_optional(signed_change_volatility(items)),
            trading_days=len(items),
        ))

    return results


def _subject(symbol: Optional[str]) -> str:
    if symbol:
        return f"{symbol} stock"
    return "The stock"


def _overall_trend(records: List[DailyRecord], subject: str) -> TrendEvent:
    """Trend spanning the full sequence."""
    performance = period_return([r.close for r in records])
    first, last = records[0], records[-1]

    if performance is None:
        direction = None
        description = (
            f"{subject} performance over the entire period is undefined "
            f"(starting close is zero)"
        )
    else:
        direction = 'bullish' if performance >= 0 else 'bearish'
        verb = 'increased' if performance >= 0 else 'decreased'
        description = f"{subject} {verb} by {to_fixed(abs(performance))}% over the entire period"

    return TrendEvent(
        kind=TrendKind.OVERALL,
        direction=direction,
        period_start=first.date,
        period_end=last.date,
        magnitude_percent=round_optional(performance),
        description=description,
        trading_days=len(records),
    )


def _run_trend(run: List[DailyRecord], kind: TrendKind) -> TrendEvent:
    """Trend entry for a longest bullish or bearish run."""
    performance = period_return([r.close for r in run])
    direction = 'bullish' if kind == TrendKind.BULLISH_RUN else 'bearish'

    if performance is None:
        outcome = "an undefined return"
    elif kind == TrendKind.BULLISH_RUN:
        outcome = f"{to_fixed(performance)}% gain"
    else:
        outcome = f"{to_fixed(abs(performance))}% loss"

    return TrendEvent(
        kind=kind,
        direction=direction,
        period_start=run[0].date,
        period_end=run[-1].date,
        magnitude_percent=round_optional(performance),
        description=f"Longest {direction} trend lasted {len(run)} trading days with {outcome}",
        trading_days=len(run),
    )


def _key_events(records: List[DailyRecord]) -> List[TrendEvent]:
    """Significant moves as trend events."""
    events = []

    for move in significant_moves(records):
        change = move.change_percent
        verb = 'increase' if change >= 0 else 'decrease'

        events.append(TrendEvent(
            kind=TrendKind.SIGNIFICANT_MOVE,
            direction='bullish' if change >= 0 else 'bearish',
            period_start=move.previous_date,
            period_end=move.date,
            magnitude_percent=round_optional(change),
            description=f"{to_fixed(abs(change))}% {verb} in stock price",
            trading_days=MOVE_WINDOW_DAYS,
        ))

    return events
