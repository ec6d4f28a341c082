"""
Main Technical Scorer.
Orchestrates the indicator calculators over a PriceSeries and assembles the
IndicatorSet (latest values) and the aligned indicator histories used by charts.
"""

from typing import Dict

from utils.logger import setup_logger
from utils.numeric_utils import round_optional
from utils.unified_schema import (
    PriceSeries, IndicatorSet, IndicatorHistory, MacdPoint, BollingerBands
)
from .trend_indicators import TrendIndicators
from .momentum_indicators import MomentumIndicators
from .volatility_indicators import VolatilityIndicators
from .signal_detector import get_rsi_level, detect_signals
from .scoring_config import MIN_DATA_POINTS, MA_CONFIG

logger = setup_logger('technical_scorer')


class TechnicalScorer:
    """
    Main technical analysis calculator.
    Coordinates all indicator calculations for one price series.
    """

    def __init__(self, series: PriceSeries, min_data_points: int = MIN_DATA_POINTS):
        """
        Args:
            series: Daily bars, oldest first
            min_data_points: Closes required before any indicator is reported
        """
        self.series = series
        self.closes = list(series.close)
        self.min_data_points = min_data_points

    def calculate(self) -> IndicatorSet:
        """
        Compute the full indicator snapshot.

        Returns:
            IndicatorSet; with too little history every value is unknown and
            `error` explains why. Never raises for short input.
        """
        symbol = self.series.symbol
        available = len(self.closes)

        if available < self.min_data_points:
            message = (
                f"Insufficient data for technical analysis. "
                f"Need at least {self.min_data_points} days, got {available}"
            )
            logger.info(f"{symbol}: {message}")
            return IndicatorSet(symbol=symbol, data_points=available, error=message)

        trend_calc = TrendIndicators(self.closes)
        momentum_calc = MomentumIndicators(self.closes)
        volatility_calc = VolatilityIndicators(self.closes)

        current_price = self.closes[-1]
        rsi = momentum_calc.calculate_rsi()
        sma50 = trend_calc.calculate_sma(MA_CONFIG['short_period'])
        sma200 = trend_calc.calculate_sma(MA_CONFIG['long_period'])
        macd = momentum_calc.calculate_macd()
        bollinger = volatility_calc.calculate_bollinger_bands()
        volatility = volatility_calc.calculate_volatility()

        rsi_level, rsi_hint = get_rsi_level(rsi)
        signals = detect_signals(self.closes, rsi, macd)

        return IndicatorSet(
            symbol=symbol,
            rsi=round_optional(rsi),
            rsi_level=rsi_level,
            rsi_hint=rsi_hint,
            sma50=round_optional(sma50),
            sma200=round_optional(sma200),
            macd=MacdPoint(
                macd=round(macd.macd, 4),
                signal=round(macd.signal, 4),
                histogram=round(macd.histogram, 4),
            ) if macd else None,
            bollinger=BollingerBands.around(
                bollinger.middle, bollinger.upper - bollinger.middle, digits=2
            ) if bollinger else None,
            volatility=round_optional(volatility),
            trend=TrendIndicators.get_trend(current_price, sma50, sma200),
            current_price=round(current_price, 2),
            data_points=available,
            signals=signals,
        )

    def calculate_histories(self) -> Dict[str, IndicatorHistory]:
        """
        SMA50, SMA200 and MACD histories aligned to the series tail.
        Short series give empty histories rather than errors.
        """
        n = len(self.closes)
        trend_calc = TrendIndicators(self.closes)
        momentum_calc = MomentumIndicators(self.closes)

        return {
            'sma50': IndicatorHistory.aligned(
                'sma50', trend_calc.calculate_sma_history(MA_CONFIG['short_period']), n
            ),
            'sma200': IndicatorHistory.aligned(
                'sma200', trend_calc.calculate_sma_history(MA_CONFIG['long_period']), n
            ),
            'macd': IndicatorHistory.aligned(
                'macd', momentum_calc.calculate_macd_history(), n
            ),
        }
