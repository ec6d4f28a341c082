"""
Numeric Utilities - Centralized numeric value handling.

Provides standardized functions for:
1. Cleaning numeric values (handling NaN/Inf/None)
2. Safe formatting for prompts and console reports
3. Directional rounding for price levels and P/L helpers
"""

import math
from typing import Any, Optional


def clean_numeric(value: Any) -> Optional[float]:
    """
    Clean a numeric value, returning None for invalid values.

    Args:
        value: Raw value (can be float, int, string number, or None/NaN)

    Returns:
        Float value if valid, None if value is missing/invalid

    Examples:
        >>> clean_numeric("42.5")
        42.5
        >>> clean_numeric(float('nan')) is None
        True
    """
    if value is None:
        return None

    try:
        float_value = float(value)
        if math.isnan(float_value) or math.isinf(float_value):
            return None
        return float_value
    except (ValueError, TypeError):
        return None


def safe_format(
    value: Any,
    format_spec: str = ".2f",
    default: str = "N/A",
) -> str:
    """
    Safely format a numeric value for display.

    Examples:
        >>> safe_format(1234.5, ",.0f")
        '1,235'
        >>> safe_format(None)
        'N/A'
    """
    cleaned = clean_numeric(value)
    if cleaned is None:
        return default
    return format(cleaned, format_spec)


def safe_divide(
    numerator: Any,
    denominator: Any,
    default: Optional[float] = None
) -> Optional[float]:
    """
    Safely perform division, handling None/NaN/zero denominators.

    Examples:
        >>> safe_divide(10, 0) is None
        True
    """
    clean_num = clean_numeric(numerator)
    clean_den = clean_numeric(denominator)

    if clean_num is None or clean_den is None or clean_den == 0:
        return default

    return clean_num / clean_den


def pnl_percent(current_price: float, buy_price: float) -> float:
    """Unrealized P/L in percent; 0.0 when the cost basis is unknown."""
    ratio = safe_divide(current_price - buy_price, buy_price, default=0.0)
    return ratio * 100


def round_optional(value: Optional[float], digits: int = 2) -> Optional[float]:
    return None if value is None else round(value, digits)


def floor_cents(value: float) -> float:
    """Largest two-decimal float not above `value`, so an upper bound still holds after rounding."""
    cents = math.floor(value * 100)
    # value * 100 can round up onto the next integer
    while cents / 100 > value:
        cents -= 1
    return cents / 100


def ceil_cents(value: float) -> float:
    """Smallest two-decimal float not below `value`, so a lower bound still holds after rounding."""
    cents = math.ceil(value * 100)
    while cents / 100 < value:
        cents += 1
    return cents / 100
