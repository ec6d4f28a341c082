"""
Signal Detector.
Turns RSI, the MACD histogram and the SMA50/SMA200 stack into trade signals.
Signals are independent: conflicting buy and sell signals may coexist.
"""

from typing import List, Optional, Sequence, Tuple
from utils.unified_schema import MacdPoint, TradeSignal
from .trend_indicators import TrendIndicators
from .scoring_config import RSI_CONFIG, MA_CONFIG, MACD_CONFIG


def get_rsi_level(rsi: Optional[float]) -> Tuple[str, str]:
    """
    Classify an RSI reading.

    Returns:
        (level, hint) where level is overbought (>=70), oversold (<=30),
        strong (>=50), weak, or unknown for a missing value
    """
    levels = RSI_CONFIG['levels']
    if rsi is None:
        level = 'unknown'
    elif rsi >= levels['overbought']:
        level = 'overbought'
    elif rsi <= levels['oversold']:
        level = 'oversold'
    elif rsi >= levels['strong']:
        level = 'strong'
    else:
        level = 'weak'
    return level, RSI_CONFIG['hints'][level]


def detect_signals(
    closes: Sequence[float],
    rsi: Optional[float],
    macd: Optional[MacdPoint]
) -> List[TradeSignal]:
    signals: List[TradeSignal] = []
    levels = RSI_CONFIG['levels']

    if rsi is not None:
        if rsi <= levels['oversold']:
            signals.append(TradeSignal(
                type='buy', indicator='RSI', strength='strong',
                reason=f"RSI oversold (<={levels['oversold']})", value=f"{rsi:.2f}",
            ))
        elif rsi >= levels['overbought']:
            signals.append(TradeSignal(
                type='sell', indicator='RSI', strength='strong',
                reason=f"RSI overbought (>={levels['overbought']})", value=f"{rsi:.2f}",
            ))

    threshold = MACD_CONFIG['histogram_signal_threshold']
    if macd is not None and abs(macd.histogram) > threshold:
        bullish = macd.histogram > 0
        signals.append(TradeSignal(
            type='buy' if bullish else 'sell',
            indicator='MACD',
            strength='medium',
            reason=f"MACD histogram {'positive' if bullish else 'negative'} (|h| > {threshold})",
            value=f"{macd.histogram:.4f}",
        ))

    if len(closes) > 0:
        trend = TrendIndicators(closes)
        sma50 = trend.calculate_sma(MA_CONFIG['short_period'])
        sma200 = trend.calculate_sma(MA_CONFIG['long_period'])
        price = closes[-1]
        if sma50 is not None and sma200 is not None:
            value = f"MA50: {sma50:.2f}, MA200: {sma200:.2f}"
            if sma50 > sma200 and price > sma50:
                signals.append(TradeSignal(
                    type='buy', indicator='MA', strength='strong',
                    reason="Golden Cross: MA50 above MA200, price above MA50", value=value,
                ))
            elif sma50 < sma200 and price < sma50:
                signals.append(TradeSignal(
                    type='sell', indicator='MA', strength='strong',
                    reason="Death Cross: MA50 below MA200, price below MA50", value=value,
                ))

    return signals
