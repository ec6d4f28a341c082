"""
Momentum Indicators.
Implements RSI (Wilder smoothing), SMA-seeded EMA and the MACD history.
"""

import numpy as np
from typing import List, Optional, Sequence
from utils.unified_schema import MacdPoint
from .scoring_config import RSI_CONFIG, MACD_CONFIG


def ema_series(values: np.ndarray, period: int) -> np.ndarray:
    """
    Running EMA seeded with the SMA of the first `period` values.

    Entries before index period-1 are NaN. Entry i only depends on values[:i+1].
    """
    result = np.full(len(values), np.nan)
    if period <= 0 or len(values) < period:
        return result

    multiplier = 2 / (period + 1)
    ema = float(np.mean(values[:period]))
    result[period - 1] = ema
    for i in range(period, len(values)):
        ema = (values[i] - ema) * multiplier + ema
        result[i] = ema
    return result


class MomentumIndicators:
    """Calculator for momentum indicators."""

    def __init__(self, closes: Sequence[float]):
        """
        Initialize with closing prices.

        Args:
            closes: Daily closes, oldest first
        """
        self.closes = np.asarray(list(closes), dtype=float)

    def calculate_rsi(self, period: int = RSI_CONFIG['period']) -> Optional[float]:
        """
        RSI with Wilder smoothing.

        The first averages are plain means of the first `period` gains and
        losses; later ones are avg = (avg * (period - 1) + x) / period.

        Returns:
            RSI in [0, 100]; 100 when there were no losses; None with fewer
            than period + 1 closes
        """
        if period <= 0 or len(self.closes) < period + 1:
            return None

        deltas = np.diff(self.closes)
        gains = np.where(deltas > 0, deltas, 0.0)
        losses = np.where(deltas < 0, -deltas, 0.0)

        avg_gain = float(gains[:period].mean())
        avg_loss = float(losses[:period].mean())
        for gain, loss in zip(gains[period:], losses[period:]):
            avg_gain = (avg_gain * (period - 1) + gain) / period
            avg_loss = (avg_loss * (period - 1) + loss) / period

        if avg_loss == 0:
            return 100.0
        rs = avg_gain / avg_loss
        return float(100 - 100 / (1 + rs))

    def calculate_ema(self, period: int) -> Optional[float]:
        """EMA of the whole series, or None when history is shorter than period."""
        series = ema_series(self.closes, period)
        if len(series) == 0 or np.isnan(series[-1]):
            return None
        return float(series[-1])

    def calculate_ema_at_index(self, period: int, index: int) -> Optional[float]:
        """EMA using only closes[0..index]; None for index < period - 1."""
        if index < period - 1 or index >= len(self.closes):
            return None
        return float(ema_series(self.closes[:index + 1], period)[-1])

    def calculate_macd_history(
        self,
        fast: int = MACD_CONFIG['fast'],
        slow: int = MACD_CONFIG['slow'],
        signal: int = MACD_CONFIG['signal']
    ) -> List[MacdPoint]:
        """
        MACD, signal and histogram for every index from slow-1 onward.

        While fewer than `signal` MACD values exist the signal line is 0 and
        the histogram equals the MACD value.

        Returns:
            len(closes) - slow + 1 points, or [] with fewer than slow + signal closes
        """
        if len(self.closes) < slow + signal:
            return []

        fast_ema = ema_series(self.closes, fast)
        slow_ema = ema_series(self.closes, slow)
        macd_line = fast_ema[slow - 1:] - slow_ema[slow - 1:]
        signal_line = ema_series(macd_line, signal)

        points = []
        for k, macd_value in enumerate(macd_line):
            macd_value = float(macd_value)
            if k < signal - 1:
                signal_value = 0.0
                histogram = macd_value
            else:
                signal_value = float(signal_line[k])
                histogram = macd_value - signal_value
            points.append(MacdPoint(macd=macd_value, signal=signal_value, histogram=histogram))
        return points

    def calculate_macd(
        self,
        fast: int = MACD_CONFIG['fast'],
        slow: int = MACD_CONFIG['slow'],
        signal: int = MACD_CONFIG['signal']
    ) -> Optional[MacdPoint]:
        """Latest MACD point (same value as the last history entry)."""
        history = self.calculate_macd_history(fast, slow, signal)
        return history[-1] if history else None
