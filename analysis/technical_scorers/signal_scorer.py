"""
Signal Scorer.
Scores MACD, RSI, moving averages and Bollinger position on a 0-2.5 scale each,
keeps a bullish/bearish tally, and turns the tally into an overall bias and a
base confidence number for holding advice.
"""

import random
from typing import Optional

from utils.logger import setup_logger
from utils.unified_schema import (
    IndicatorSet, TechnicalSignals, IndicatorScore, PriceLevels
)
from .price_levels import calculate_price_levels
from .scoring_config import (
    MAX_INDICATOR_SCORE, MACD_SCORING, RSI_SCORING, MA_SCORING,
    BOLLINGER_SCORING, OVERALL_BIAS, CONFIDENCE_CONFIG
)

logger = setup_logger('signal_scorer')


def _clamp_score(score: float) -> float:
    return round(min(MAX_INDICATOR_SCORE, max(0.0, score)), 2)


class SignalScorer:
    """
    Rule-based scorer for one holding or stock.

    The random source only feeds the confidence jitter; inject a seeded
    `random.Random` for reproducible output.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def calculate_signals(
        self,
        indicators: IndicatorSet,
        price: Optional[float] = None
    ) -> TechnicalSignals:
        """
        Args:
            indicators: Latest IndicatorSet
            price: Price to compare against MAs and bands (defaults to the last close)

        Returns:
            TechnicalSignals; indicators that are unknown keep the 'N/A' score
        """
        price = price if price is not None else indicators.current_price
        result = TechnicalSignals()
        bullish = 0
        bearish = 0

        # MACD
        if indicators.macd is not None:
            macd = indicators.macd
            magnitude = abs(macd.histogram)
            if macd.macd > macd.signal and macd.histogram > 0:
                result.macd = IndicatorScore(
                    text=f"Golden cross (histogram {macd.histogram:+.4f})",
                    score=_clamp_score(min(MAX_INDICATOR_SCORE, magnitude * MACD_SCORING['golden_multiplier'])),
                )
                result.macd_state = 'golden'
                bullish += MACD_SCORING['cross_weight']
            elif macd.macd < macd.signal and macd.histogram < 0:
                result.macd = IndicatorScore(
                    text=f"Death cross (histogram {macd.histogram:+.4f})",
                    score=_clamp_score(max(
                        MACD_SCORING['death_floor'],
                        MAX_INDICATOR_SCORE - magnitude * MACD_SCORING['golden_multiplier'],
                    )),
                )
                result.macd_state = 'death'
                bearish += MACD_SCORING['cross_weight']
            else:
                result.macd = IndicatorScore(text="Neutral", score=MACD_SCORING['neutral'])
                result.macd_state = 'neutral'

        # RSI
        rsi = indicators.rsi
        if rsi is not None:
            cfg = RSI_SCORING
            if rsi > cfg['overbought']:
                result.rsi = IndicatorScore(
                    text=f"{rsi:.1f} overbought", score=_clamp_score(0.5 + (80 - rsi) / 10)
                )
                bearish += cfg['extreme_weight']
            elif rsi < cfg['oversold']:
                result.rsi = IndicatorScore(text=f"{rsi:.1f} oversold", score=cfg['oversold_score'])
                bullish += cfg['extreme_weight']
            elif rsi >= cfg['midline']:
                result.rsi = IndicatorScore(
                    text=f"{rsi:.1f} strong", score=_clamp_score(1.5 + (rsi - 50) / 20)
                )
                bullish += cfg['strong_weight']
            else:
                result.rsi = IndicatorScore(
                    text=f"{rsi:.1f} weak", score=_clamp_score(1.0 + rsi / 50)
                )

        # Moving averages
        sma50, sma200 = indicators.sma50, indicators.sma200
        if sma50 is not None and sma200 is not None and price is not None:
            if sma50 > sma200:
                bands = MA_SCORING['golden']
                if price > sma50:
                    text, score = "Bullish stack, price above both MAs", bands['above_both']
                elif price > sma200:
                    # scored above "below both" (1.8 vs 1.2); the dip stays above the long-term average
                    text, score = "Bullish stack, price between MA200 and MA50", bands['above_long']
                else:
                    text, score = "Bullish stack, price below both MAs", bands['below']
                result.ma_state = 'golden'
                bullish += MA_SCORING['cross_weight']
            else:
                bands = MA_SCORING['death']
                if price < sma50 and price < sma200:
                    text, score = "Bearish stack, price below both MAs", bands['below_both']
                elif price > sma200:
                    text, score = "Bearish stack, price above MA200", bands['above_long']
                else:
                    text, score = "Bearish stack, price between the MAs", bands['between']
                result.ma_state = 'death'
                bearish += MA_SCORING['cross_weight']
            result.ma = IndicatorScore(text=text, score=score)

        # Bollinger position
        bb = indicators.bollinger
        if bb is not None and price is not None and bb.middle:
            bandwidth = (bb.upper - bb.lower) / bb.middle * 100
            if price > bb.upper:
                score, weight = BOLLINGER_SCORING['above_upper']
                text = f"Above upper band (bandwidth {bandwidth:.1f}%)"
                bearish += weight
            elif price < bb.lower:
                score, weight = BOLLINGER_SCORING['below_lower']
                text = f"Below lower band (bandwidth {bandwidth:.1f}%)"
                bullish += weight
            elif price > bb.middle:
                score = BOLLINGER_SCORING['above_middle']
                text = f"Upper half of the bands (bandwidth {bandwidth:.1f}%)"
            else:
                score = BOLLINGER_SCORING['below_middle']
                text = f"Lower half of the bands (bandwidth {bandwidth:.1f}%)"
            result.bollinger = IndicatorScore(text=text, score=score)

        result.bullish_score = bullish
        result.bearish_score = bearish
        self._apply_overall(result)
        return result

    @staticmethod
    def _apply_overall(result: TechnicalSignals) -> None:
        share = result.bullish_share
        if share is None:
            result.overall = 'N/A'
            result.bias = None
        elif share > OVERALL_BIAS['bullish_above']:
            result.overall = f"bullish {share:.0f}%"
            result.bias = 'bullish'
        elif share < OVERALL_BIAS['bearish_below']:
            result.overall = f"bearish {100 - share:.0f}%"
            result.bias = 'bearish'
        else:
            result.overall = "neutral"
            result.bias = 'neutral'

    def base_confidence(
        self,
        signals: TechnicalSignals,
        rsi: Optional[float],
        pnl_percent: float
    ) -> int:
        """
        Rule-based confidence before any model adjustment.

        Returns:
            Integer in [15, 95]
        """
        cfg = CONFIDENCE_CONFIG
        confidence = cfg['start']

        share = signals.bullish_share
        if share is not None:
            confidence += self._band_adjustment(share, cfg['share_above'], cfg['share_below'])

        if rsi is not None:
            overbought, ob_adjust = cfg['rsi_overbought']
            oversold, os_adjust = cfg['rsi_oversold']
            low, high, neutral_adjust = cfg['rsi_neutral_band']
            if rsi > overbought:
                confidence += ob_adjust
            elif rsi < oversold:
                confidence += os_adjust
            elif low <= rsi <= high:
                confidence += neutral_adjust

        confidence += self._band_adjustment(pnl_percent, cfg['pnl_above'], cfg['pnl_below'])

        if signals.macd_state == 'golden':
            confidence += cfg['macd_cross']
        elif signals.macd_state == 'death':
            confidence -= cfg['macd_cross']

        if signals.ma_state == 'golden':
            confidence += cfg['ma_cross']
        elif signals.ma_state == 'death':
            confidence -= cfg['ma_cross']

        confidence += self.rng.randint(*cfg['jitter'])

        low, high = cfg['bounds']
        return int(max(low, min(high, round(confidence))))

    @staticmethod
    def _band_adjustment(value: float, above, below) -> int:
        for threshold, adjustment in above:
            if value > threshold:
                return adjustment
        for threshold, adjustment in below:
            if value < threshold:
                return adjustment
        return 0

    def calculate_price_levels(
        self,
        current_price: float,
        buy_price: float,
        indicators: Optional[IndicatorSet],
        signals: Optional[TechnicalSignals]
    ) -> PriceLevels:
        levels = calculate_price_levels(current_price, buy_price, indicators, signals)
        logger.debug(
            f"Levels for {current_price:.2f} (cost {buy_price:.2f}): stop {levels.stop_loss}, "
            f"add {levels.add_more_price}, target {levels.target_price}"
        )
        return levels
