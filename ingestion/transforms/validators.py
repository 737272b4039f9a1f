"""
Core validators for parsed daily price fields.
Pure functions - no IO, network, or side effects.
"""

import math
from typing import Any, Dict, Optional


PRICE_FIELDS = ('open', 'high', 'low', 'close')


class ValidationError(ValueError):
    """Raised when data validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


def validate_price(field: str, value: Any) -> None:
    """
    Validate a single price value.

    Args:
        field: Field name (for error reporting)
        value: Parsed value

    Raises:
        ValidationError: If the value is not a finite, non-negative number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field} must be numeric, got {type(value)}", field)

    if not math.isfinite(value):
        raise ValidationError(f"{field} must be finite, got {value}", field)

    if value < 0:
        raise ValidationError(f"{field} must be non-negative, got {value}", field)


def validate_volume(value: Any) -> None:
    """
    Validate a volume value.

    Raises:
        ValidationError: If volume is not a non-negative integer
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"volume must be integer, got {type(value)}", 'volume')

    if value < 0:
        raise ValidationError(f"volume must be non-negative, got {value}", 'volume')


def validate_price_fields(row: Dict[str, Any]) -> None:
    """
    Validate the numeric fields of a parsed daily row.

    Args:
        row: Dictionary with open/high/low/close/volume and optional adj_close

    Raises:
        ValidationError: If a field is missing or invalid
    """
    required_keys = set(PRICE_FIELDS) | {'volume'}

    missing = required_keys - set(row.keys())
    if missing:
        raise ValidationError(f"Missing required keys: {sorted(missing)}", sorted(missing)[0])

    for field in PRICE_FIELDS:
        validate_price(field, row[field])

    if row.get('adj_close') is not None:
        validate_price('adj_close', row['adj_close'])

    validate_volume(row['volume'])
