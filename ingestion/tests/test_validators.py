"""
Tests for core validators - pure functions, no IO.
"""

import pytest

from ingestion.transforms.validators import (
    validate_price,
    validate_volume,
    validate_price_fields,
    ValidationError
)


def valid_row(**overrides):
    row = {'open': 10.0, 'high': 11.0, 'low': 9.0, 'close': 10.5, 'volume': 1000}
    row.update(overrides)
    return row


class TestValidatePrice:
    """Tests for validate_price."""

    @pytest.mark.parametrize('value', [0, 0.0, 10, 185.25])
    def test_valid(self, value):
        validate_price('close', value)

    def test_negative(self):
        with pytest.raises(ValidationError, match="non-negative") as exc_info:
            validate_price('low', -0.01)

        assert exc_info.value.field == 'low'

    @pytest.mark.parametrize('value', [float('nan'), float('inf'), float('-inf')])
    def test_non_finite(self, value):
        with pytest.raises(ValidationError, match="finite"):
            validate_price('open', value)

    @pytest.mark.parametrize('value', ['10.0', None, True])
    def test_non_numeric(self, value):
        with pytest.raises(ValidationError, match="numeric"):
            validate_price('high', value)


class TestValidateVolume:
    """Tests for validate_volume."""

    def test_valid(self):
        validate_volume(0)
        validate_volume(117258400)

    def test_float_rejected(self):
        with pytest.raises(ValidationError, match="integer"):
            validate_volume(100.0)

    def test_negative(self):
        with pytest.raises(ValidationError, match="non-negative"):
            validate_volume(-1)


class TestValidatePriceFields:
    """Tests for validate_price_fields."""

    def test_valid_row(self):
        validate_price_fields(valid_row())
        validate_price_fields(valid_row(adj_close=10.2))
        validate_price_fields(valid_row(adj_close=None))

    def test_missing_key(self):
        row = valid_row()
        del row['close']

        with pytest.raises(ValidationError, match="Missing required keys") as exc_info:
            validate_price_fields(row)

        assert exc_info.value.field == 'close'

    def test_invalid_adj_close(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_price_fields(valid_row(adj_close=-5.0))

        assert exc_info.value.field == 'adj_close'

    def test_invalid_volume(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_price_fields(valid_row(volume=-10))

        assert exc_info.value.field == 'volume'
