"""
Tests for yfinance adapter - mocked network calls, no live API hits in CI.
"""

import pytest
from unittest.mock import patch
from datetime import date, timedelta
import pandas as pd

from ingestion.providers.yfinance_adapter import (
    fetch_history_csv,
    history_to_csv,
    YFinanceError,
    _validate_date_range
)
from ingestion.transforms.csv_parser import parse


def sample_history():
    return pd.DataFrame({
        'Open': [185.25, 186.10],
        'High': [186.80, 187.45],
        'Low': [184.50, 185.80],
        'Close': [185.92, 187.11],
        'Adj Close': [185.75, 186.94],
        'Volume': [65284300.0, 58414500.0]
    }, index=pd.DatetimeIndex(['2024-01-15', '2024-01-16'], name='Date'))


class TestFetchHistoryCsv:
    """Tests for fetch_history_csv."""

    @patch('ingestion.providers.yfinance_adapter.yf.download')
    def test_success(self, mock_download):
        """Test fetched history renders as parseable CSV."""
        mock_download.return_value = sample_history()

        text = fetch_history_csv('AAPL', date(2024, 1, 15), date(2024, 1, 16))

        mock_download.assert_called_once_with(
            'AAPL',
            start='2024-01-15',
            end='2024-01-17',  # yfinance end is exclusive
            auto_adjust=False,
            progress=False
        )

        records = parse(text)
        assert len(records) == 2
        assert records[0].date == '2024-01-15'
        assert records[0].open == 185.25
        assert records[0].adj_close == 185.75
        assert records[1].volume == 58414500

    @patch('ingestion.providers.yfinance_adapter.yf.download')
    def test_empty_response_gives_header_only(self, mock_download):
        mock_download.return_value = pd.DataFrame()

        text = fetch_history_csv('AAPL', date(2024, 1, 15), date(2024, 1, 16))

        assert text.strip() == "Date,Open,High,Low,Close,Adj Close,Volume"
        assert parse(text) == []

    @patch('ingestion.providers.yfinance_adapter.yf.download')
    def test_download_failure(self, mock_download):
        mock_download.side_effect = Exception("Network error")

        with pytest.raises(YFinanceError, match="Failed to fetch prices for AAPL"):
            fetch_history_csv('AAPL', date(2024, 1, 15), date(2024, 1, 16))

    def test_invalid_ticker(self):
        with pytest.raises(YFinanceError, match="non-empty"):
            fetch_history_csv('', date(2024, 1, 15), date(2024, 1, 16))

        with pytest.raises(YFinanceError, match="too long"):
            fetch_history_csv('ABCDEFGHIJK', date(2024, 1, 15), date(2024, 1, 16))


class TestHistoryToCsv:
    """Tests for history_to_csv."""

    def test_multiindex_columns_flattened(self):
        data = sample_history()
        data.columns = pd.MultiIndex.from_product([data.columns, ['AAPL']])

        records = parse(history_to_csv(data))

        assert records[1].close == 187.11

    def test_rows_with_missing_values_dropped(self):
        data = sample_history()
        data.loc[data.index[0], 'Close'] = float('nan')

        records = parse(history_to_csv(data))

        assert [r.date for r in records] == ['2024-01-16']

    def test_missing_columns(self):
        data = sample_history().drop(columns=['Volume'])

        with pytest.raises(YFinanceError, match="missing columns"):
            history_to_csv(data)


class TestValidateDateRange:
    """Tests for date range validation."""

    def test_valid_range(self):
        _validate_date_range(date(2024, 1, 1), date(2024, 1, 31))

    def test_start_after_end(self):
        with pytest.raises(YFinanceError, match="must be <="):
            _validate_date_range(date(2024, 1, 31), date(2024, 1, 1))

    def test_future_dates(self):
        future = date.today() + timedelta(days=30)

        with pytest.raises(YFinanceError, match="Future dates"):
            _validate_date_range(date(2024, 1, 1), future)
