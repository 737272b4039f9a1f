"""
Tests for volatility calculation utilities.
Synthetic data where the standard deviation is known.
"""

import pytest
import numpy as np

from analysis.models import DailyRecord
from analysis.calculations.volatility import (
    population_std,
    defined_percent_changes,
    absolute_change_volatility,
    signed_change_volatility,
    VolatilityError
)


def _record(open_price, close, day=1):
    return DailyRecord(
        date=f'2020-01-{day:02d}',
        open=open_price,
        high=max(open_price, close),
        low=min(open_price, close),
        close=close,
        volume=100,
    )


class TestPopulationStd:
    """Tests for population standard deviation."""

    def test_known_values(self):
        """Test [1, 3]: mean 2, population std 1 (sample std would be ~1.414)."""
        assert abs(population_std([1.0, 3.0]) - 1.0) < 1e-12

    def test_constant_series(self):
        assert population_std([5.0, 5.0, 5.0]) == 0.0

    def test_matches_numpy_ddof_zero(self):
        values = [0.5, -1.2, 3.3, 2.0, -0.7]
        assert abs(population_std(values) - np.std(values, ddof=0)) < 1e-12

    def test_empty_returns_none(self):
        assert population_std([]) is None

    def test_nan_rejected(self):
        with pytest.raises(VolatilityError, match="NaN"):
            population_std([1.0, float('nan')])

    def test_infinity_rejected(self):
        with pytest.raises(VolatilityError, match="Infinite"):
            population_std([1.0, float('inf')])


class TestRecordVolatility:
    """Tests for record-based volatility helpers."""

    def test_absolute_vs_signed(self):
        """Test +2% and -2% days: absolute spread 0, signed spread 2."""
        records = [_record(100.0, 102.0, 1), _record(100.0, 98.0, 2)]

        assert abs(absolute_change_volatility(records)) < 1e-9
        assert abs(signed_change_volatility(records) - 2.0) < 1e-9

    def test_undefined_changes_excluded(self):
        """Test zero-open records are skipped, not propagated."""
        records = [_record(100.0, 102.0, 1), _record(0.0, 5.0, 2), _record(100.0, 98.0, 3)]

        assert len(defined_percent_changes(records)) == 2
        assert abs(signed_change_volatility(records) - 2.0) < 1e-9

    def test_all_undefined_returns_none(self):
        """Test all-zero-open input yields None instead of NaN."""
        records = [_record(0.0, 5.0, 1), _record(0.0, 6.0, 2)]

        assert absolute_change_volatility(records) is None
        assert signed_change_volatility(records) is None

    def test_volatility_non_negative(self):
        closes = [101.0, 97.0, 104.0, 99.5, 100.0, 93.0]
        records = [_record(100.0, c, i + 1) for i, c in enumerate(closes)]

        assert absolute_change_volatility(records) >= 0
        assert signed_change_volatility(records) >= 0
