"""
Display formatters for analysis output.
Deterministic string formatting for volumes, prices and percentages.
"""

import math
from typing import Optional, Union

from analysis.calculations.returns import to_fixed


UNDEFINED_TEXT = "Not available"


class FormatterError(Exception):
    """Raised when formatter input validation fails."""
    pass


def format_large_number(value: Union[int, float]) -> str:
    """
    Format a large count (such as volume) with an M/K suffix.

    Thresholds:
    - >= 1,000,000: "X.YM"
    - >= 1,000: "X.YK"
    - otherwise the plain number

    The scaled value is rounded with ties away from zero, so 1,250,000
    gives "1.3M".

    Args:
        value: Non-negative count

    Returns:
        Formatted string (e.g., "12.3M", "4.5K", "950")
    """
    if value is None:
        return UNDEFINED_TEXT

    _require_number(value, "Value")

    if value >= 1_000_000:
        return f"{to_fixed(value / 1_000_000, 1)}M"
    if value >= 1_000:
        return f"{to_fixed(value / 1_000, 1)}K"

    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_price(value: Optional[float]) -> str:
    """
    Format a price as dollars with two decimals.

    Args:
        value: Price

    Returns:
        Formatted price (e.g., "$25.51")
    """
    if value is None:
        return UNDEFINED_TEXT

    _require_number(value, "Price")
    return f"${to_fixed(value)}"


def format_percent(value: Optional[float], show_direction: bool = False) -> str:
    """
    Format a value already expressed in percent points.

    Args:
        value: Percent value (12.5 = 12.5%)
        show_direction: Prefix a '+' for non-negative values

    Returns:
        Formatted percentage (e.g., "12.50%", "+3.10%")
    """
    if value is None:
        return UNDEFINED_TEXT

    _require_number(value, "Percent")
    text = to_fixed(value)

    if show_direction and not text.startswith('-'):
        return f"+{text}%"
    return f"{text}%"


def _require_number(value, label: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FormatterError(f"{label} must be numeric, got {type(value)}")

    if not math.isfinite(value):
        raise FormatterError(f"{label} must be finite, got {value}")
