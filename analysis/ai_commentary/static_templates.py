"""
Static narrative templates.
Deterministic reports used when no language model is reachable. Same section
layout as the model prompts, so callers cannot tell the shapes apart.
"""

from typing import List

from config.analysis_config import (
    PORTFOLIO_HEALTH_BANDS, PORTFOLIO_HEALTH_FLOOR_LABEL,
    DIVERSIFICATION_COUNTS, MAX_SINGLE_WEIGHT_PERCENT
)
from utils.numeric_utils import safe_format, pnl_percent
from utils.unified_schema import StockContext, PortfolioPosition

DISCLAIMER = (
    "---\n"
    "**Disclaimer**: generated automatically from market data for reference only. "
    "Investing involves risk; decide based on your own circumstances."
)


def build_static_stock_analysis(context: StockContext) -> str:
    quote, tech, holding = context.quote, context.indicators, context.holding
    symbol = context.symbol
    name = context.name or (context.profile.name if context.profile else None) or symbol
    price = quote.current_price
    rsi = tech.rsi

    parts = [f"{symbol} - {name} technical report\n"]

    # Status
    parts.append("## Where you stand")
    if holding:
        invested = holding.quantity * holding.buy_price
        pnl = holding.quantity * price - invested
        pct = pnl_percent(price, holding.buy_price)
        parts.append(f"Holding {holding.quantity:g} shares at {holding.buy_price:.2f}, now {price:.2f}")
        parts.append(f"P/L: {'+' if pnl >= 0 else ''}{pnl:.2f} ({'+' if pct >= 0 else ''}{pct:.2f}%)\n")
    else:
        parts.append(f"You are looking at {symbol}; no position held.\n")

    # Key observations
    direction = "up" if quote.change_percent >= 0 else "down"
    parts.append("## Key observations")
    parts.append(f"- {direction} {abs(quote.change_percent):.2f}% today")
    parts.append(f"- RSI {safe_format(rsi)} ({tech.rsi_level})")
    parts.append(f"- Trend: {tech.trend}\n")

    # Technical read
    parts.append("## Technical read")
    if rsi is not None and rsi > 70:
        parts.append("RSI is overbought; a pullback is likely, avoid chasing the move.")
    elif rsi is not None and rsi < 30:
        parts.append("RSI is oversold; a rebound is possible if other indicators confirm.")
    else:
        parts.append("RSI is neutral; wait for other signals before acting.")

    if tech.sma50 is not None and tech.sma200 is not None:
        ma_text = f"MA50 ({tech.sma50:.2f}) and MA200 ({tech.sma200:.2f})"
        if price > tech.sma50 and price > tech.sma200:
            parts.append(f"Price is above {ma_text}: strength, the trend favours the upside.\n")
        elif price < tech.sma50 and price < tech.sma200:
            parts.append(f"Price is below {ma_text}: weakness, watch for further downside.\n")
        else:
            parts.append(f"Price sits between {ma_text}: consolidation, wait for a breakout.\n")
    else:
        parts.append("Not enough history for the 50/200-day averages.\n")

    # Scenarios
    resistance = price * 1.05
    support = price * 0.95
    parts.append("## Three scenarios")
    parts.append(f"1. **Bullish**: a break above resistance {resistance:.2f} opens a target of {price * 1.1:.2f}")
    parts.append(f"2. **Bearish**: a break below support {support:.2f} calls for a stop at {price * 0.92:.2f}")
    parts.append(f"3. **Range-bound**: between {support:.2f} and {resistance:.2f}, wait for a better entry\n")

    # Action plan
    parts.append("## Action plan")
    if rsi is not None and rsi < 30 and quote.change_percent < -2:
        parts.append("**Could consider buying in stages**")
        parts.append("- First 30% near the current price")
        parts.append("- Another 40% after a further 3-5% drop")
        parts.append("- Keep 30% in cash")
        parts.append(f"- Stop at {support:.2f}\n")
    elif rsi is not None and rsi > 70 and quote.change_percent > 2:
        parts.append("**Could consider trimming or taking profit**")
        parts.append("- Take 30-50% of any gain off the table")
        parts.append(f"- Trailing stop: exit below {support:.2f}")
        parts.append("- Do not chase the top\n")
    else:
        parts.append("**Hold and watch**")
        parts.append("- Wait for a clearer buy or sell signal")
        parts.append(f"- Watch support {support:.2f} and resistance {resistance:.2f}")
        parts.append("- If not yet in, wait for a dip\n")

    # One-liner
    if rsi is not None and rsi < 30:
        tail = "watch for a rebound!"
    elif rsi is not None and rsi > 70:
        tail = "beware of a pullback!"
    else:
        tail = "wait for a signal."
    hint = f", {tech.rsi_hint}" if tech.rsi_hint else ""
    parts.append("## One-line summary")
    parts.append(f"{symbol} is in a {tech.trend} phase{hint}; {tail}\n")

    parts.append(DISCLAIMER)
    return "\n".join(parts)


def _health_label(total_pnl_pct: float) -> str:
    for minimum, label in PORTFOLIO_HEALTH_BANDS:
        if total_pnl_pct > minimum:
            return label
    return PORTFOLIO_HEALTH_FLOOR_LABEL


def build_static_portfolio_analysis(portfolio_name: str, positions: List[PortfolioPosition]) -> str:
    parts = [f"{portfolio_name} - portfolio review\n"]

    if not positions:
        parts.append("The portfolio has no holdings yet.\n")
        parts.append(DISCLAIMER)
        return "\n".join(parts)

    total_cost = sum(p.cost for p in positions)
    total_value = sum(p.value for p in positions)
    total_pnl = total_value - total_cost
    total_pnl_pct = (total_pnl / total_cost * 100) if total_cost else 0.0

    parts.append("## Portfolio health")
    parts.append(f"Invested: {total_cost:.2f}")
    parts.append(f"Market value: {total_value:.2f}")
    parts.append(f"P/L: {'+' if total_pnl >= 0 else ''}{total_pnl:.2f} ({'+' if total_pnl_pct >= 0 else ''}{total_pnl_pct:.2f}%)")
    parts.append(f"Health: {_health_label(total_pnl_pct)}\n")

    best = max(positions, key=lambda p: p.pnl_percent)
    worst = min(positions, key=lambda p: p.pnl_percent)
    parts.append("## Holdings review")
    parts.append(f"**Best performer**: {best.symbol} ({best.pnl_percent:+.2f}%)")
    parts.append(f"**Needs attention**: {worst.symbol} ({worst.pnl_percent:+.2f}%)\n")

    count = len(positions)
    if count >= DIVERSIFICATION_COUNTS['well']:
        spread = "good"
    elif count >= DIVERSIFICATION_COUNTS['moderate']:
        spread = "moderate, could add more names"
    else:
        spread = "thin, consider growing to 5-8 names"
    parts.append("## Allocation")
    parts.append(f"{count} holdings, diversification {spread}.")

    max_weight = max((p.value / total_value * 100) for p in positions) if total_value else 0.0
    if max_weight > MAX_SINGLE_WEIGHT_PERCENT:
        parts.append(f"Largest position is {max_weight:.1f}% of the portfolio; keep single names under 30%.\n")
    else:
        parts.append("Position sizes are balanced; single-stock risk is contained.\n")

    parts.append("## Action plan")
    parts.append("**Priority 1**: review the weakest holding and decide whether to cut it")
    parts.append("**Priority 2**: consider taking partial profit on the strongest names")
    parts.append("**Priority 3**: follow the market and rebalance periodically\n")

    parts.append("## One-line summary")
    if total_pnl_pct > 0:
        parts.append(f"The portfolio is up {total_pnl_pct:.2f}%; keep monitoring.\n")
    else:
        parts.append(f"The portfolio is down {abs(total_pnl_pct):.2f}%; time to review.\n")

    parts.append(DISCLAIMER)
    return "\n".join(parts)
