"""
Price Level Ladder.
Derives stop-loss, add-more and target prices for a holding from its P/L band,
then nudges them toward SMA50 / SMA200 / Bollinger references.

Final guarantees (after rounding):
    stop_loss      <= 0.95 * current
    add_more_price <= 0.98 * current
    target_price   >= 1.02 * current, unless the holding is up 50% or more
"""

from typing import Optional

from utils.numeric_utils import pnl_percent, floor_cents, ceil_cents
from utils.unified_schema import IndicatorSet, TechnicalSignals, PriceLevels
from .scoring_config import PRICE_LEVEL_CONFIG, RSI_CONFIG


def calculate_price_levels(
    current_price: float,
    buy_price: float,
    indicators: Optional[IndicatorSet] = None,
    signals: Optional[TechnicalSignals] = None
) -> PriceLevels:
    """
    Args:
        current_price: Latest price
        buy_price: Cost basis per share (current price is used when unknown)
        indicators: Latest IndicatorSet, for RSI / SMA / Bollinger references
        signals: Scored signals, for the overall bias

    Returns:
        PriceLevels with a human-readable reason per level
    """
    cfg = PRICE_LEVEL_CONFIG
    cur = current_price
    buy = buy_price if buy_price and buy_price > 0 else current_price
    pnl = pnl_percent(cur, buy)
    is_profit = pnl > 0

    rsi = indicators.rsi if indicators else None
    overbought = RSI_CONFIG['levels']['overbought']
    bullish = signals is not None and signals.bias == 'bullish'

    # --- 1. Stop loss ---
    stops = cfg['stop_loss']
    if is_profit:
        if pnl > 20:
            stop = max(buy * stops['profit_20']['buy'], cur * stops['profit_20']['cur'])
            stop_reason = "Up more than 20%: stop 10% above cost to lock in gains"
        elif pnl > 10:
            stop = max(buy * stops['profit_10']['buy'], cur * stops['profit_10']['cur'])
            stop_reason = "Up more than 10%: stop 5% above cost"
        else:
            stop = max(buy * stops['profit']['buy'], cur * stops['profit']['cur'])
            stop_reason = "Small gain: stop near cost"
    else:
        if pnl < -20:
            stop = cur * stops['loss_20']['cur']
            stop_reason = f"Down {abs(pnl):.1f}%: stop 10% below current price"
        elif pnl < -10:
            stop = cur * stops['loss_10']['cur']
            stop_reason = f"Down {abs(pnl):.1f}%: stop 12% below current price"
        else:
            stop = min(buy * stops['loss']['buy'], cur * stops['loss']['cur'])
            stop_reason = "Small loss: stop 10% below cost"

    # --- 2. Add-more price ---
    adds = cfg['add_more']
    if is_profit:
        if rsi is not None and rsi > overbought:
            add_more = cur * adds['profit_overbought']
            add_reason = f"RSI overbought ({rsi:.1f}): wait for a 7% pullback"
        else:
            add_more = cur * adds['profit']
            add_reason = "In profit: wait for a 5% pullback"
    else:
        if pnl < -30:
            add_more = cur * adds['loss_30']
            add_reason = f"Down {abs(pnl):.1f}%: averaging down possible, with care"
        elif pnl < -20:
            add_more = cur * adds['loss_20']
            add_reason = f"Down {abs(pnl):.1f}%: consider adding after another 5% drop"
        else:
            add_more = cur * adds['loss']
            add_reason = "Small loss: consider adding after an 8% pullback"

    # --- 3. Target ---
    targets = cfg['target']
    if is_profit:
        if bullish:
            target = cur * targets['profit_bullish']
            target_reason = "Technicals bullish: target another 15%"
        else:
            target = cur * targets['profit']
            target_reason = "Technicals neutral: target 8% higher"
    else:
        if pnl < -30:
            target = buy
            target_reason = f"Down {abs(pnl):.1f}%: first target is break-even at {buy:.2f}"
        elif pnl < -20:
            target = buy * targets['loss_20']
            target_reason = f"Down {abs(pnl):.1f}%: target break-even plus 5%"
        else:
            target = max(buy * targets['loss']['buy'], cur * targets['loss']['cur'])
            target_reason = "Small loss: higher of break-even plus 5% or current plus 10%"

        if bullish and rsi is not None and rsi < RSI_CONFIG['levels']['strong']:
            target = max(target, buy * targets['loss_bullish_recovery'])
            target_reason += " (technicals improving, 10% above cost in reach)"

    # --- 4. Technical references ---
    refs = cfg['references']
    sma50 = indicators.sma50 if indicators else None
    sma200 = indicators.sma200 if indicators else None
    bands = indicators.bollinger if indicators else None

    if sma50:
        if cur < sma50 and add_more > sma50:
            add_more = sma50 * refs['sma50_add_more']
            add_reason = f"MA50 support at {sma50:.2f}"
        if cur < sma50 and target < sma50 * refs['sma50_target']:
            target = max(target, sma50 * refs['sma50_target'])
            target_reason += f" (5% above MA50 {sma50:.2f} once reclaimed)"

    if sma200:
        if cur < sma200 and stop < sma200 * refs['sma200_stop']:
            stop = max(stop, sma200 * refs['sma200_stop'])
            stop_reason = f"MA200 support at {sma200:.2f}"

    if bands:
        if bands.lower and cur < bands.lower * refs['lower_band_zone']:
            add_more = min(add_more, bands.lower * refs['lower_band_add_more'])
            add_reason = f"Price near lower Bollinger band {bands.lower:.2f}: adding possible"
        if bands.upper and target < bands.upper:
            target = max(target, bands.upper * refs['upper_band_target'])
            target_reason += f" (upper Bollinger band {bands.upper:.2f})"

    # --- 5. Final clamps ---
    clamps = cfg['clamps']
    stop = min(stop, cur * clamps['stop_max'])
    add_more = min(add_more, cur * clamps['add_more_max'])
    target_is_clamped = not is_profit or pnl < clamps['target_clamp_profit_exempt']
    if target_is_clamped:
        target = max(target, cur * clamps['target_min'])

    # Round toward the clamp so two-decimal output still satisfies it
    return PriceLevels(
        stop_loss=floor_cents(stop),
        add_more_price=floor_cents(add_more),
        target_price=ceil_cents(target) if target_is_clamped else round(target, 2),
        stop_loss_reason=stop_reason,
        add_more_reason=add_reason,
        target_reason=target_reason,
    )
