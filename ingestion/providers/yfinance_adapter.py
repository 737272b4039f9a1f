"""
yfinance adapter - fetch daily history from Yahoo Finance as CSV text.
Network IO allowed here; output uses the standard daily price header so
it feeds straight into the CSV parser.
"""

import logging
from datetime import date, timedelta

import pandas as pd
import yfinance as yf

logger = logging.getLogger(__name__)

CSV_COLUMNS = ['Date', 'Open', 'High', 'Low', 'Close', 'Adj Close', 'Volume']


class YFinanceError(Exception):
    """Raised when yfinance operations fail."""
    pass


def fetch_history_csv(ticker: str, start: date, end: date) -> str:
    """
    Download daily OHLCV history for a ticker and render it as CSV.

    Args:
        ticker: Stock ticker symbol (e.g., 'AAPL')
        start: Start date (inclusive)
        end: End date (inclusive)

    Returns:
        CSV text with a Date,Open,High,Low,Close,Adj Close,Volume header;
        header only when Yahoo returns no rows

    Raises:
        YFinanceError: If inputs are invalid or the download fails
    """
    _validate_date_range(start, end)
    _validate_ticker(ticker)

    try:
        # yfinance uses exclusive end dates, so add 1 day
        data = yf.download(
            ticker,
            start=start.isoformat(),
            end=(end + timedelta(days=1)).isoformat(),
            auto_adjust=False,
            progress=False
        )
    except Exception as e:
        raise YFinanceError(f"Failed to fetch prices for {ticker}: {e}") from e

    if data is None or len(data) == 0:
        logger.warning(f"No price data returned for {ticker} ({start} to {end})")
        return ','.join(CSV_COLUMNS) + '\n'

    return history_to_csv(data)


def history_to_csv(data: pd.DataFrame) -> str:
    """
    Render a yfinance history frame as CSV text.

    Args:
        data: DataFrame indexed by timestamp with OHLCV columns

    Returns:
        CSV text with ISO dates and integer volumes
    """
    # Multi-level columns appear when yfinance keys fields by ticker
    if isinstance(data.columns, pd.MultiIndex):
        data = data.copy()
        data.columns = data.columns.get_level_values(0)

    missing = [c for c in CSV_COLUMNS[1:] if c not in data.columns and c != 'Adj Close']
    if missing:
        raise YFinanceError(f"yfinance response missing columns: {missing}")

    frame = data.dropna(subset=['Open', 'High', 'Low', 'Close', 'Volume']).copy()
    frame.insert(0, 'Date', [idx.strftime('%Y-%m-%d') for idx in frame.index])
    frame['Volume'] = frame['Volume'].astype('int64')

    columns = [c for c in CSV_COLUMNS if c in frame.columns]
    return frame[columns].to_csv(index=False)


def _validate_date_range(start: date, end: date) -> None:
    """
    Validate date range parameters.

    Raises:
        YFinanceError: If validation fails
    """
    if start > end:
        raise YFinanceError(f"start date ({start}) must be <= end date ({end})")

    # Don't allow future dates
    today = date.today()
    if start > today or end > today:
        raise YFinanceError("Future dates not allowed for historical data")


def _validate_ticker(ticker: str) -> None:
    """
    Basic ticker validation.

    Raises:
        YFinanceError: If ticker is invalid
    """
    if not ticker or not isinstance(ticker, str):
        raise YFinanceError("Ticker must be non-empty string")

    if len(ticker) > 10:  # Reasonable limit
        raise YFinanceError("Ticker too long (max 10 characters)")
