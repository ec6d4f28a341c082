"""SignalScorer per-indicator scores, bias, base confidence and price levels."""

import itertools
import random

import pytest

from analysis.technical_scorers.signal_scorer import SignalScorer
from analysis.technical_scorers.price_levels import calculate_price_levels
from analysis.technical_scorers.technical_scorer import TechnicalScorer
from utils.unified_schema import (
    BollingerBands, IndicatorSet, MacdPoint, TechnicalSignals
)

from conftest import ZeroJitterRandom


def bullish_indicators() -> IndicatorSet:
    return IndicatorSet(
        symbol="BULL",
        rsi=25.0,
        sma50=110.0,
        sma200=100.0,
        macd=MacdPoint(macd=1.0, signal=0.5, histogram=0.5),
        bollinger=BollingerBands(upper=130.0, middle=120.0, lower=110.0),
        current_price=120.0,
    )


# ==================== SCORES ====================

def test_unknown_indicators_score_na():
    signals = SignalScorer(random.Random(0)).calculate_signals(IndicatorSet(symbol="X"))
    assert signals.overall == 'N/A'
    assert signals.bias is None
    assert signals.total_score == 0
    assert signals.macd.text == 'N/A'


def test_all_bullish_readings():
    signals = SignalScorer(random.Random(0)).calculate_signals(bullish_indicators(), price=105.0)

    assert signals.macd_state == 'golden'
    assert signals.macd.score == 0.25
    assert signals.rsi.score == 2.5
    assert signals.ma_state == 'golden'
    # price 105 sits between MA200 and MA50 of a bullish stack
    assert signals.ma.score == 1.8
    assert signals.bollinger.score == 2.5
    assert signals.bullish_score == 30
    assert signals.bearish_score == 0
    assert signals.overall == 'bullish 100%'
    assert signals.bias == 'bullish'


@pytest.mark.parametrize("rsi,score", [(75.0, 1.0), (60.0, 2.0), (40.0, 1.8), (95.0, 0.0)])
def test_rsi_scores(rsi, score):
    signals = SignalScorer().calculate_signals(IndicatorSet(symbol="X", rsi=rsi))
    assert signals.rsi.score == pytest.approx(score)


@pytest.mark.parametrize("price,score", [(120.0, 2.5), (105.0, 1.8), (95.0, 1.2)])
def test_bullish_ma_stack_scores(price, score):
    indicators = IndicatorSet(symbol="X", sma50=110.0, sma200=100.0)
    assert SignalScorer().calculate_signals(indicators, price).ma.score == score


def test_bearish_tally_gives_bearish_bias():
    indicators = IndicatorSet(
        symbol="BEAR",
        rsi=75.0,
        sma50=90.0,
        sma200=100.0,
        macd=MacdPoint(macd=-1.0, signal=-0.5, histogram=-0.5),
        bollinger=BollingerBands(upper=90.0, middle=85.0, lower=80.0),
    )
    signals = SignalScorer().calculate_signals(indicators, price=95.0)
    assert signals.macd_state == 'death'
    assert signals.ma_state == 'death'
    # 8 (MACD) + 7 (RSI) + 8 (MA) + 5 (above upper band)
    assert signals.bearish_score == 28
    assert signals.overall == 'bearish 100%'


def test_every_score_within_bounds(rising_series):
    tech = TechnicalScorer(rising_series).calculate()
    signals = SignalScorer().calculate_signals(tech)
    for item in (signals.macd, signals.rsi, signals.ma, signals.bollinger):
        assert 0 <= item.score <= 2.5
    assert 0 <= signals.total_score <= 10


# ==================== CONFIDENCE ====================

def test_neutral_confidence_is_start_value():
    scorer = SignalScorer(ZeroJitterRandom())
    assert scorer.base_confidence(TechnicalSignals(), None, 0.0) == 50


def test_confidence_clamped_high():
    scorer = SignalScorer(ZeroJitterRandom())
    signals = scorer.calculate_signals(bullish_indicators(), price=105.0)
    # 50 + 25 + 8 + 10 + 6 + 6
    assert scorer.base_confidence(signals, 25.0, 25.0) == 95


def test_confidence_clamped_low():
    scorer = SignalScorer(ZeroJitterRandom())
    signals = TechnicalSignals(bearish_score=20, macd_state='death', ma_state='death')
    assert scorer.base_confidence(signals, 80.0, -25.0) == 15


def test_confidence_jitter_is_reproducible():
    signals = TechnicalSignals()
    first = SignalScorer(random.Random(7)).base_confidence(signals, None, 0.0)
    second = SignalScorer(random.Random(7)).base_confidence(signals, None, 0.0)
    assert first == second
    assert 47 <= first <= 53


def test_confidence_is_always_bounded_integer():
    scorer = SignalScorer(random.Random(1))
    states = ['golden', 'death', 'neutral', None]
    for bull, bear, macd, ma, rsi, pnl in itertools.product(
        [0, 8, 30], [0, 7, 28], states, states, [None, 5.0, 50.0, 95.0], [-80.0, -12.0, 0.0, 15.0, 300.0]
    ):
        signals = TechnicalSignals(bullish_score=bull, bearish_score=bear, macd_state=macd, ma_state=ma)
        value = scorer.base_confidence(signals, rsi, pnl)
        assert isinstance(value, int)
        assert 15 <= value <= 95


# ==================== PRICE LEVELS ====================

def test_large_profit_levels():
    levels = calculate_price_levels(130.0, 100.0)
    assert levels.stop_loss == pytest.approx(117.0, abs=0.01)
    assert levels.add_more_price == pytest.approx(123.5, abs=0.01)
    assert levels.target_price == pytest.approx(140.4, abs=0.01)
    assert "20%" in levels.stop_loss_reason


def test_deep_loss_targets_break_even():
    levels = calculate_price_levels(60.0, 100.0)
    assert levels.stop_loss == pytest.approx(54.0, abs=0.01)
    assert levels.add_more_price == pytest.approx(58.8, abs=0.01)
    assert levels.target_price == pytest.approx(100.0, abs=0.01)
    assert "break-even" in levels.target_reason


def test_bullish_profit_target():
    signals = TechnicalSignals(bullish_score=30, bias='bullish')
    levels = calculate_price_levels(110.0, 100.0, None, signals)
    assert levels.target_price == pytest.approx(126.5, abs=0.01)


def test_sma200_support_lifts_stop():
    indicators = IndicatorSet(symbol="X", sma200=100.0)
    levels = calculate_price_levels(90.0, 110.0, indicators, None)
    # Loss-band stop 79.2 is raised to 95 by MA200, then clamped to 85.5
    assert levels.stop_loss == pytest.approx(85.5, abs=0.01)


def test_unknown_buy_price_uses_current_price():
    levels = calculate_price_levels(50.0, 0.0)
    assert levels.stop_loss <= 50.0 * 0.95


def test_level_clamps_hold_everywhere():
    prices = [1.37, 9.99, 50.0, 123.45, 999.0]
    pnl_factors = [0.5, 0.75, 0.85, 0.95, 1.0, 1.05, 1.15, 1.3]
    rsis = [None, 20.0, 50.0, 80.0]
    biases = [None, 'bullish', 'bearish']
    for cur, factor, rsi, bias in itertools.product(prices, pnl_factors, rsis, biases):
        buy = cur / factor
        indicators = IndicatorSet(
            symbol="X",
            rsi=rsi,
            sma50=cur * 1.1,
            sma200=cur * 1.2,
            bollinger=BollingerBands(upper=cur * 1.3, middle=cur, lower=cur * 0.97),
        )
        signals = TechnicalSignals(bias=bias)
        for ind in (None, indicators):
            levels = calculate_price_levels(cur, buy, ind, signals)
            assert levels.stop_loss <= cur * 0.95
            assert levels.add_more_price <= cur * 0.98
            if (cur - buy) / buy * 100 <= 50:
                assert levels.target_price >= cur * 1.02
            assert levels.stop_loss_reason and levels.add_more_reason and levels.target_reason


def test_scorer_delegates_price_levels():
    scorer = SignalScorer()
    assert scorer.calculate_price_levels(60.0, 100.0, None, None) == calculate_price_levels(60.0, 100.0)


@pytest.mark.parametrize("cur,buy", [(1626.2, 1596.99), (1544.89, 1500.0), (0.07, 0.05), (333.33, 250.0)])
def test_cent_rounding_never_crosses_clamp(cur, buy):
    levels = calculate_price_levels(cur, buy)
    assert levels.stop_loss <= cur * 0.95
    assert levels.add_more_price <= cur * 0.98
    assert levels.target_price >= cur * 1.02
