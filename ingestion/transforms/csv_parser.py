"""
CSV parser - raw daily price text to DailyRecord sequence.
Pure function - no IO. Rows keep source order; any bad row fails the parse.
"""

import io
import logging
import re
from typing import Any, Dict, List, Optional

import pandas as pd

from analysis.models import DailyRecord
from ingestion.transforms.validators import validate_price_fields, ValidationError

logger = logging.getLogger(__name__)


# Source column name → record field
COLUMN_MAP = {
    'Date': 'date',
    'Open': 'open',
    'High': 'high',
    'Low': 'low',
    'Close': 'close',
    'Adj Close': 'adj_close',
    'Volume': 'volume',
}

REQUIRED_COLUMNS = ('Date', 'Open', 'High', 'Low', 'Close', 'Volume')
PRICE_COLUMNS = ('Open', 'High', 'Low', 'Close', 'Adj Close')


class CSVParseError(ValueError):
    """Raised when CSV text cannot be parsed into records."""
    pass


class MalformedRowError(CSVParseError):
    """Raised when a data row has an unparseable required field."""

    def __init__(self, row_index: Optional[int], column: Optional[str], reason: str):
        self.row_index = row_index
        self.column = column
        self.reason = reason

        location = f"row {row_index}" if row_index is not None else "unknown row"
        if column:
            location += f", column '{column}'"
        super().__init__(f"Malformed data at {location}: {reason}")


def parse(text: str) -> List[DailyRecord]:
    """
    Parse comma-delimited daily price text.

    The first line must be a header naming the columns (Date, Open, High,
    Low, Close, Adj Close, Volume; any order). Unknown columns are ignored
    and Adj Close is optional.

    Args:
        text: Raw CSV text

    Returns:
        Records in source row order; empty for header-only input

    Raises:
        CSVParseError: If there is no header or a required column is missing
        MalformedRowError: If any data row has an invalid required field
            (row_index is 0-based among data rows)
    """
    if text is None or not text.strip():
        raise CSVParseError("CSV text is empty - a header row is required")

    try:
        frame = pd.read_csv(
            io.StringIO(text.strip()),
            dtype=str,
            keep_default_na=False,
        )
    except pd.errors.ParserError as e:
        raise MalformedRowError(_row_index_from_error(e), None, str(e)) from e

    # pandas turns the first column into an index when the first data row
    # has exactly one field more than the header
    if not isinstance(frame.index, pd.RangeIndex):
        expected = len(frame.columns)
        raise MalformedRowError(0, None, f"expected {expected} fields, saw {expected + 1}")

    if frame.empty:
        return []

    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise CSVParseError(f"Missing required columns: {missing}")

    columns = [c for c in COLUMN_MAP if c in frame.columns]
    records = []

    for row_index, raw in enumerate(frame[columns].to_dict('records')):
        records.append(_build_record(row_index, raw))

    logger.debug(f"Parsed {len(records)} daily records")
    return records


def _build_record(row_index: int, raw: Dict[str, Any]) -> DailyRecord:
    """Convert one raw text row to a DailyRecord."""
    fields: Dict[str, Any] = {}

    for column, value in raw.items():
        try:
            if column == 'Date':
                fields['date'] = _require_text(value)
            elif column == 'Volume':
                fields['volume'] = _parse_volume(value)
            elif column == 'Adj Close' and _is_blank(value):
                fields['adj_close'] = None
            else:
                fields[COLUMN_MAP[column]] = _parse_decimal(value)
        except ValueError as e:
            raise MalformedRowError(row_index, column, str(e)) from e

    try:
        validate_price_fields(fields)
    except ValidationError as e:
        raise MalformedRowError(row_index, _column_for_field(e.field), str(e)) from e

    try:
        return DailyRecord(**fields)
    except ValueError as e:
        raise MalformedRowError(row_index, 'Date', str(e)) from e


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _require_text(value: Any) -> str:
    if _is_blank(value):
        raise ValueError("value is missing")
    return value


def _parse_decimal(value: Any) -> float:
    return float(_require_text(value))


def _parse_volume(value: Any) -> int:
    text = _require_text(value).strip()
    try:
        return int(text)
    except ValueError:
        number = float(text)
        if not number.is_integer():
            raise ValueError(f"volume must be a whole number, got {text!r}")
        return int(number)


def _column_for_field(field: Optional[str]) -> Optional[str]:
    for column, name in COLUMN_MAP.items():
        if name == field:
            return column
    return None


def _row_index_from_error(error: Exception) -> Optional[int]:
    """Map a pandas tokenizer 'line N' (1-based, header included) to a data row index."""
    match = re.search(r'line (\d+)', str(error))
    if not match:
        return None
    return max(int(match.group(1)) - 2, 0)
