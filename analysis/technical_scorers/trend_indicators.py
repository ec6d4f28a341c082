"""
Trend Indicators.
Implements simple moving averages, their history, and the MA trend label.
"""

import pandas as pd
from typing import List, Optional, Sequence


class TrendIndicators:
    """Calculator for moving-average based trend indicators."""

    def __init__(self, closes: Sequence[float]):
        """
        Initialize with closing prices.

        Args:
            closes: Daily closes, oldest first
        """
        self.closes = pd.Series(list(closes), dtype=float)

    def calculate_sma(self, period: int) -> Optional[float]:
        """Mean of the last `period` closes, or None when history is shorter."""
        if period <= 0 or len(self.closes) < period:
            return None
        return float(self.closes.iloc[-period:].mean())

    def calculate_sma_history(self, period: int) -> List[float]:
        """
        SMA at every index from period-1 onward.

        Returns:
            len(closes) - period + 1 values (empty when history is shorter)
        """
        if period <= 0 or len(self.closes) < period:
            return []
        rolling = self.closes.rolling(window=period).mean()
        return [float(v) for v in rolling.iloc[period - 1:]]

    @staticmethod
    def get_trend(price: Optional[float], sma50: Optional[float], sma200: Optional[float]) -> str:
        """
        Classify the MA stack.

        Returns:
            'uptrend' (price > SMA50 > SMA200), 'downtrend' (price < SMA50 < SMA200),
            'consolidating' otherwise, 'unknown' when any input is missing
        """
        if price is None or sma50 is None or sma200 is None:
            return 'unknown'
        if price > sma50 > sma200:
            return 'uptrend'
        if price < sma50 < sma200:
            return 'downtrend'
        return 'consolidating'
