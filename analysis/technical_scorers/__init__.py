"""
Technical Scorers Module.
Indicator engine, chart assembly and rule-based signal scoring.

- Trend: SMA50 / SMA200, SMA history, MA trend label
- Momentum: RSI (Wilder), EMA, MACD history
- Volatility: Bollinger Bands, close-price volatility
- Signals: RSI / MACD / MA-cross trade signals
- Scoring: 0-2.5 per indicator (0-10 total), bias, base confidence, price levels
"""

from .technical_scorer import TechnicalScorer
from .trend_indicators import TrendIndicators
from .momentum_indicators import MomentumIndicators
from .volatility_indicators import VolatilityIndicators
from .signal_detector import detect_signals, get_rsi_level
from .chart_assembler import ChartAssembler
from .signal_scorer import SignalScorer
from .price_levels import calculate_price_levels

__all__ = [
    'TechnicalScorer',
    'TrendIndicators',
    'MomentumIndicators',
    'VolatilityIndicators',
    'detect_signals',
    'get_rsi_level',
    'ChartAssembler',
    'SignalScorer',
    'calculate_price_levels',
]
