"""
Common helper utilities for the application.
"""

from datetime import datetime, timezone
from typing import Any, Optional
import pandas as pd


def safe_float(value: Any, default: float = 0.0) -> float:
    """
    Safely convert value to float.

    Args:
        value: Value to convert (pandas NaN/NaT count as missing)
        default: Default value if conversion fails

    Returns:
        Float value or default
    """
    try:
        if value is None or pd.isna(value):
            return default
        return float(value)
    except (ValueError, TypeError):
        return default


def safe_int(value: Any, default: int = 0) -> int:
    """Safely convert value to integer."""
    try:
        if value is None or pd.isna(value):
            return default
        return int(value)
    except (ValueError, TypeError):
        return default


def format_large_number(value: float, decimals: int = 2) -> str:
    """
    Format large numbers with appropriate suffix (K, M, B, T).

    Args:
        value: Number to format
        decimals: Number of decimal places

    Returns:
        Formatted string (e.g., '1.23B')
    """
    if abs(value) >= 1e12:
        return f"{value / 1e12:.{decimals}f}T"
    elif abs(value) >= 1e9:
        return f"{value / 1e9:.{decimals}f}B"
    elif abs(value) >= 1e6:
        return f"{value / 1e6:.{decimals}f}M"
    elif abs(value) >= 1e3:
        return f"{value / 1e3:.{decimals}f}K"
    else:
        return f"{value:.{decimals}f}"


def epoch_to_iso(epoch_seconds: Optional[float]) -> str:
    """Epoch seconds -> ISO-8601 UTC string ('' when missing)."""
    if not epoch_seconds:
        return ""
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).isoformat()


def normalize_symbol(symbol: str) -> str:
    return (symbol or "").strip().upper()
