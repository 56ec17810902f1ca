"""
Formatting utilities for currency and numbers.

Pure functions extracted from State for reusability.
"""
from decimal import Decimal, ROUND_HALF_UP

CURRENCY_SYMBOL = "$"


def round_currency(value: float) -> float:
    """
    Round a value to 2 decimal places using ROUND_HALF_UP.

    Args:
        value: The value to round

    Returns:
        The rounded value as a float with 2 decimal precision
    """
    return float(
        Decimal(str(value or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    )


def format_currency(value: float, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format a value as currency, e.g. "$1,250.00"."""
    return f"{symbol}{round_currency(value):,.2f}"


def parse_float_safe(value: str, default: float = 0.0) -> float:
    """
    Safely parse a string to float, returning default on error.

    Args:
        value: The string to parse
        default: Value to return if parsing fails

    Returns:
        Parsed float or default value
    """
    try:
        return float(value) if value not in (None, "") else default
    except (ValueError, TypeError):
        return default


def parse_int_safe(value: str, default: int = 0) -> int:
    try:
        return int(float(value)) if value not in (None, "") else default
    except (ValueError, TypeError):
        return default
