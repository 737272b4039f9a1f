"""
Tests for streak detection.
Covers the neutral-day carry in longest_runs and the reset in longest_streaks.
"""

import pytest
from datetime import date, timedelta

from analysis.models import DailyRecord
from analysis.calculations.streaks import longest_runs, longest_streaks


def make_records(closes):
    """Records on consecutive calendar days with open == close."""
    start = date(2020, 1, 1)
    return [
        DailyRecord(
            date=(start + timedelta(days=i)).isoformat(),
            open=close, high=close, low=close, close=close, volume=100,
        )
        for i, close in enumerate(closes)
    ]


def closes_of(run):
    return [r.close for r in run]


class TestLongestRuns:
    """Tests for longest_runs (neutral days extend the active run)."""

    def test_neutral_day_extends_active_run(self):
        """Test [10, 11, 11, 12, 9]: the flat day stays inside the bullish run."""
        bullish, bearish = longest_runs(make_records([10, 11, 11, 12, 9]))

        assert closes_of(bullish) == [11, 11, 12]
        assert closes_of(bearish) == [9]

    def test_neutral_day_without_active_run_extends_nothing(self):
        """Test leading flat days do not start a run."""
        bullish, bearish = longest_runs(make_records([10, 10, 10, 11]))

        assert closes_of(bullish) == [11]
        assert bearish == []

    def test_best_run_captured_only_on_directional_day(self):
        """Test trailing flat days are not counted when the run ends on them."""
        bullish, bearish = longest_runs(make_records([10, 11, 12, 12, 12, 11, 10]))

        assert closes_of(bullish) == [11, 12]
        assert closes_of(bearish) == [11, 10]

    def test_strictly_increasing_sequence(self):
        """Test 25 rising closes give a run of 24 day pairs."""
        bullish, bearish = longest_runs(make_records(list(range(100, 125))))

        assert len(bullish) == 24
        assert bearish == []

    def test_empty_and_single(self):
        assert longest_runs([]) == ([], [])
        assert longest_runs(make_records([5])) == ([], [])

    @pytest.mark.parametrize('closes', [
        [1, 2, 3, 2, 1, 1, 0.5, 2, 3, 4, 5],
        [5, 5, 5, 5],
        [3, 2, 1, 2, 3, 3, 4, 1],
        [10, 9, 9, 9, 8, 8, 12, 13, 13, 14, 14, 11],
    ])
    def test_lengths_bounded_and_runs_disjoint(self, closes):
        """Test run lengths never exceed n - 1 and the two runs share no days."""
        records = make_records(closes)

        bullish, bearish = longest_runs(records)

        assert len(bullish) <= len(records) - 1
        assert len(bearish) <= len(records) - 1
        assert not {r.date for r in bullish} & {r.date for r in bearish}

    def test_returns_copies(self):
        """Test the captured run is not aliased to later growth."""
        bullish, _ = longest_runs(make_records([1, 2, 3, 3, 3]))

        assert closes_of(bullish) == [2, 3]


class TestLongestStreaks:
    """Tests for longest_streaks (any non-continuing day resets)."""

    def test_flat_day_resets(self):
        """Test [10, 11, 12, 12, 13]: the flat day breaks the streak."""
        assert longest_streaks(make_records([10, 11, 12, 12, 13])) == (2, 0)

    def test_down_streak(self):
        assert longest_streaks(make_records([5, 4, 3, 2, 1, 0.5])) == (0, 5)

    def test_mixed(self):
        assert longest_streaks(make_records([1, 2, 3, 4, 3, 2, 3])) == (3, 2)

    def test_differs_from_runs_on_neutral_days(self):
        """Test the two definitions disagree when a flat day sits inside a rise."""
        records = make_records([1, 2, 3, 3, 4, 5])

        bullish, _ = longest_runs(records)
        longest_up, _ = longest_streaks(records)

        assert len(bullish) == 5
        assert longest_up == 2

    def test_short_inputs(self):
        assert longest_streaks([]) == (0, 0)
        assert longest_streaks(make_records([1])) == (0, 0)
