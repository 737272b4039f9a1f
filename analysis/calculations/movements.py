"""
Significant price movement detection.
Non-overlapping greedy scan over a trailing trading-day window.
"""

from dataclasses import dataclass
from typing import List, Sequence

from analysis.models import DailyRecord
from analysis.calculations.returns import safe_percent_change


MOVE_WINDOW_DAYS = 20
MOVE_THRESHOLD_PERCENT = 10.0


@dataclass(frozen=True)
class PriceMove:
    """A close-to-close move over the scan window."""
    index: int
    date: str
    previous_date: str
    change_percent: float


def significant_moves(
    records: Sequence[DailyRecord],
    window: int = MOVE_WINDOW_DAYS,
    threshold: float = MOVE_THRESHOLD_PERCENT
) -> List[PriceMove]:
    """
    Find closes that moved at least `threshold` percent from `window` days earlier.

    After a hit at index i the scan resumes at i + window + 1, so no two
    reported windows overlap.

    Example:
        close[0]=50, close[20]=56 → 12% move at index 20; next check at 41

    Args:
        records: Daily records in chronological order
        window: Look-back distance in trading days
        threshold: Minimum absolute percent change to report

    Returns:
        Moves in chronological order
    """
    if window < 1:
        raise ValueError("window must be positive")

    moves = []
    i = window

    while i < len(records):
        previous = records[i - window]
        current = records[i]
        change = safe_percent_change(previous.close, current.close)

        if change is not None and abs(change) >= threshold:
            moves.append(PriceMove(
                index=i,
                date=current.date,
                previous_date=previous.date,
                change_percent=change,
            ))
            i += window + 1
        else:
            i += 1

    return moves
