"""
Streak detection over closing prices.

Two deliberately different definitions:
- longest_runs: a neutral day (unchanged close) extends the active run
- longest_streaks: a neutral day resets both counters
"""

from typing import List, Sequence, Tuple

from analysis.models import DailyRecord


def longest_runs(
    records: Sequence[DailyRecord]
) -> Tuple[List[DailyRecord], List[DailyRecord]]:
    """
    Find the longest bullish and bearish runs.

    An up day (close above the previous close) extends the bullish run and
    clears the bearish one; a down day does the opposite. A neutral day
    extends whichever run is active, and nothing when neither is. The best
    run is only captured on a directional day that makes the current run
    strictly longer than the best so far.

    Runs hold the records of the qualifying days, so the reference day
    before the first move is not included and a run's length is a count
    of day pairs.

    Example:
        closes [10, 11, 11, 12, 9] →
        bullish run = days with closes [11, 11, 12] (length 3),
        bearish run = [9] (length 1)

    Args:
        records: Daily records in chronological order

    Returns:
        Tuple of (longest bullish run, longest bearish run)
    """
    current_bullish: List[DailyRecord] = []
    current_bearish: List[DailyRecord] = []
    longest_bullish: List[DailyRecord] = []
    longest_bearish: List[DailyRecord] = []

    for i in range(1, len(records)):
        today = records[i]
        previous_close = records[i - 1].close

        if today.close > previous_close:
            current_bullish.append(today)
            current_bearish = []
            if len(current_bullish) > len(longest_bullish):
                longest_bullish = list(current_bullish)

        elif today.close < previous_close:
            current_bearish.append(today)
            current_bullish = []
            if len(current_bearish) > len(longest_bearish):
                longest_bearish = list(current_bearish)

        else:
            if current_bullish:
                current_bullish.append(today)
            elif current_bearish:
                current_bearish.append(today)

    return longest_bullish, longest_bearish


def longest_streaks(records: Sequence[DailyRecord]) -> Tuple[int, int]:
    """
    Count the longest strictly rising and strictly falling close streaks.

    Any day that does not continue a streak resets it, including a day
    with an unchanged close.

    Example:
        closes [10, 11, 12, 12, 13] → (2, 0)

    Args:
        records: Daily records in sequence order

    Returns:
        Tuple of (longest up streak, longest down streak) in days
    """
    longest_up = 0
    longest_down = 0
    current_up = 0
    current_down = 0

    for i in range(1, len(records)):
        close = records[i].close
        previous_close = records[i - 1].close

        if close > previous_close:
            current_up += 1
            current_down = 0
            longest_up = max(longest_up, current_up)
        elif close < previous_close:
            current_down += 1
            current_up = 0
            longest_down = max(longest_down, current_down)
        else:
            current_up = 0
            current_down = 0

    return longest_up, longest_down
