"""
Volatility Indicators.
Implements Bollinger Bands and close-price volatility (population std-dev).
"""

import pandas as pd
from typing import Optional, Sequence
from utils.unified_schema import BollingerBands
from .scoring_config import BOLLINGER_CONFIG, VOLATILITY_CONFIG


class VolatilityIndicators:
    """Calculator for volatility indicators."""

    def __init__(self, closes: Sequence[float]):
        """
        Initialize with closing prices.

        Args:
            closes: Daily closes, oldest first
        """
        self.closes = pd.Series(list(closes), dtype=float)

    def calculate_bollinger_bands(
        self,
        period: int = BOLLINGER_CONFIG['period'],
        std_dev: float = BOLLINGER_CONFIG['std_dev']
    ) -> Optional[BollingerBands]:
        """
        Bands around the SMA of the last `period` closes.
        Uses the population standard deviation (ddof=0).
        """
        if period <= 0 or len(self.closes) < period:
            return None

        window = self.closes.iloc[-period:]
        middle = float(window.mean())
        width = std_dev * float(window.std(ddof=0))
        return BollingerBands.around(middle, width)

    def calculate_volatility(self, period: int = VOLATILITY_CONFIG['period']) -> Optional[float]:
        """Population std-dev of the last `period` closes (price units, not returns)."""
        if period <= 0 or len(self.closes) < period:
            return None
        return float(self.closes.iloc[-period:].std(ddof=0))
