"""
Value types for the historical price analysis core.
Frozen dataclasses - built fresh per request, never mutated.
"""

import math
from dataclasses import dataclass, field, asdict
from datetime import date
from enum import Enum
from typing import Dict, Any, List, Optional

import pandas as pd


def parse_trading_date(value: str) -> date:
    """
    Parse a source date string into a calendar date.

    Args:
        value: Date text as found in the source (e.g. '1980-12-12')

    Returns:
        Calendar date

    Raises:
        ValueError: If the text is not a recognizable date
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid date: {value!r}")

    timestamp = pd.to_datetime(value.strip())
    if pd.isna(timestamp):
        raise ValueError(f"Invalid date: {value!r}")

    return timestamp.date()


@dataclass(frozen=True)
class DailyRecord:
    """One trading day of OHLCV data plus derived change fields."""
    date: str
    open: float
    high: float
    low: float
    close: float
    volume: int
    adj_close: Optional[float] = None
    change: float = field(init=False)
    percent_change: Optional[float] = field(init=False)
    trading_date: date = field(init=False, repr=False)

    def __post_init__(self):
        change = self.close - self.open

        # Zero open leaves the daily percent change undefined
        if self.open == 0:
            percent_change = None
        else:
            percent_change = change / self.open * 100
            if not math.isfinite(percent_change):
                percent_change = None

        object.__setattr__(self, 'change', change)
        object.__setattr__(self, 'percent_change', percent_change)
        object.__setattr__(self, 'trading_date', parse_trading_date(self.date))

    @property
    def has_percent_change(self) -> bool:
        return self.percent_change is not None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['trading_date'] = self.trading_date.isoformat()
        return data


@dataclass(frozen=True)
class MetricsSummary:
    """Aggregate statistics over a record sequence."""
    max_price: float
    min_price: float
    average_volume: int
    average_volume_display: str
    price_increase_percent: Optional[float]
    volatility: Optional[float]
    record_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class YearlyPerformance:
    """Performance of one calendar year."""
    year: int
    start_price: float
    end_price: float
    performance_percent: Optional[float]
    average_volume: float
    volatility: Optional[float]
    trading_days: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class TrendKind(str, Enum):
    """Kinds of detected trend entries."""
    OVERALL = 'overall'
    BULLISH_RUN = 'bullish-run'
    BEARISH_RUN = 'bearish-run'
    SIGNIFICANT_MOVE = 'significant-move'


@dataclass(frozen=True)
class TrendEvent:
    """
    A detected streak, overall trend or significant move.

    For significant moves period_start is the reference date 20 trading
    days before the event and period_end is the event date.
    """
    kind: TrendKind
    direction: Optional[str]
    period_start: str
    period_end: str
    magnitude_percent: Optional[float]
    description: str
    trading_days: int

    @property
    def date(self) -> str:
        return self.period_end

    @property
    def period(self) -> str:
        return f"{self.period_start} to {self.period_end}"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['kind'] = self.kind.value
        data['period'] = self.period
        return data


@dataclass(frozen=True)
class TrendAnalysis:
    """Output of the trend analyzer."""
    yearly_performance: List[YearlyPerformance] = field(default_factory=list)
    trends: List[TrendEvent] = field(default_factory=list)
    key_events: List[TrendEvent] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.yearly_performance or self.trends or self.key_events)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'yearly_performance': [y.to_dict() for y in self.yearly_performance],
            'trends': [t.to_dict() for t in self.trends],
            'key_events': [e.to_dict() for e in self.key_events],
        }


class InsightKind(str, Enum):
    """Kinds of generated insights, in emission order."""
    UNUSUAL_VOLUME = 'unusual_volume'
    SIGNIFICANT_MOVEMENT = 'significant_movement'
    BULLISH_TREND = 'bullish_trend'
    BEARISH_TREND = 'bearish_trend'
    OVERALL_PERFORMANCE = 'overall_performance'


@dataclass(frozen=True)
class Insight:
    """A human-readable observation about a record sequence."""
    kind: InsightKind
    title: str
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind.value, 'title': self.title, 'text': self.text}
