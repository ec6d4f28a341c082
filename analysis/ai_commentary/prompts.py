"""
AI Prompt Templates
Separated from the generator logic for easier maintenance.
"""
from typing import List, Optional

from config.analysis_config import ADVICE_CONFIG, BATCH_LIMITS
from utils.numeric_utils import safe_format, pnl_percent
from utils.unified_schema import (
    StockContext, PortfolioPosition, Holding, Quote, IndicatorSet,
    TechnicalSignals, PriceLevels, NewsItem
)

STOCK_SYSTEM_PROMPT = (
    "You are a senior equity analyst who explains stocks in plain, practical "
    "language for retail investors. Only use the figures you are given."
)

ADVICE_SYSTEM_PROMPT = (
    "You are a professional investment adviser. Reply with a single JSON object "
    "and nothing else."
)


def _signed(value: float, spec: str = ".2f") -> str:
    return f"{'+' if value >= 0 else ''}{value:{spec}}"


def _above_below(price: float, level: Optional[float]) -> str:
    if level is None:
        return "N/A"
    return f"{level:.2f} (price {'above' if price > level else 'below'})"


def build_stock_prompt(context: StockContext) -> str:
    """Single-stock analysis prompt with a fixed section layout."""
    quote, tech, profile, holding = context.quote, context.indicators, context.profile, context.holding
    name = context.name or (profile.name if profile else None) or context.symbol

    if holding:
        invested = holding.quantity * holding.buy_price
        value = holding.quantity * quote.current_price
        pnl = value - invested
        holding_block = (
            "Position:\n"
            f"- Cost per share: {holding.buy_price:.2f}\n"
            f"- Shares: {holding.quantity:g}\n"
            f"- Invested: {invested:.2f}\n"
            f"- Market value: {value:.2f}\n"
            f"- P/L: {_signed(pnl)} ({_signed(pnl_percent(quote.current_price, holding.buy_price))}%)\n"
        )
    else:
        holding_block = "The user does not hold this stock.\n"

    profile_block = ""
    if profile:
        profile_block = (
            "Company:\n"
            f"- Market cap: {safe_format(profile.market_cap_billions)}B {profile.currency or ''}\n"
            f"- Industry: {profile.industry or 'N/A'}\n"
            f"- Exchange: {profile.exchange or 'N/A'}\n"
        )

    news_items = context.news[:BATCH_LIMITS['NEWS_PER_STOCK']]
    if news_items:
        news_block = "Recent news:\n" + "\n".join(
            f"{i}. {n.headline}\n   Source: {n.source}\n   Summary: {n.summary or 'no summary'}"
            for i, n in enumerate(news_items, 1)
        )
    else:
        news_block = "No recent news."

    return f"""Analyse the following stock.

Stock: {context.symbol} - {name}

{holding_block}
Market data:
- Price: {quote.current_price:.2f}
- Change today: {_signed(quote.change)} ({_signed(quote.change_percent)}%)
- High / Low: {quote.high:.2f} / {quote.low:.2f}

Technical indicators:
- RSI: {safe_format(tech.rsi)} ({tech.rsi_level})
- Trend: {tech.trend}
- 50-day MA: {_above_below(quote.current_price, tech.sma50)}
- 200-day MA: {_above_below(quote.current_price, tech.sma200)}
- MACD histogram: {safe_format(tech.macd.histogram if tech.macd else None, '.4f')}

{profile_block}
{news_block}

Structure the answer with these sections:

## Where you stand
## Key observations (2-3 points)
## Technicals, fundamentals and sentiment
## Three scenarios (bullish above $X, bearish below $X, range-bound)
## Action plan (concrete steps)
## One-line summary

Use wording such as "could consider" or "watch for"; do not tell the reader to buy or sell outright."""


def build_portfolio_prompt(portfolio_name: str, positions: List[PortfolioPosition]) -> str:
    total_cost = sum(p.cost for p in positions)
    total_value = sum(p.value for p in positions)
    total_pnl = total_value - total_cost
    total_pnl_pct = (total_pnl / total_cost * 100) if total_cost else 0.0

    lines = []
    for p in positions:
        weight = (p.value / total_value * 100) if total_value else 0.0
        lines.append(
            f"{p.symbol}: cost {p.buy_price:.2f} price {p.current_price:.2f} | "
            f"P/L {_signed(p.pnl_percent)}% | weight {weight:.1f}% | "
            f"RSI {safe_format(p.rsi, '.1f')} trend {p.trend or 'unknown'}"
        )

    return f"""Analyse the following portfolio.

Portfolio: {portfolio_name}
Invested: {total_cost:.2f}
Market value: {total_value:.2f}
P/L: {_signed(total_pnl)} ({_signed(total_pnl_pct)}%)
Positions: {len(positions)}

Holdings:
{chr(10).join(lines)}

Structure the answer with these sections:

## Portfolio health
## Holdings review (best performer, holdings to watch)
## Allocation (diversification, position sizing)
## Action plan (by priority)
## One-line summary"""


def build_holding_advice_prompt(
    holding: Holding,
    quote: Quote,
    indicators: IndicatorSet,
    signals: TechnicalSignals,
    levels: PriceLevels,
    base_confidence: int,
    news: List[NewsItem]
) -> str:
    """Holding advice prompt; the model must answer with one JSON object."""
    price = quote.current_price
    buy_price = holding.buy_price or price
    pnl = pnl_percent(price, buy_price)
    band = ADVICE_CONFIG['CONFIDENCE_BAND']

    def pct_from_price(level: float) -> str:
        return f"{(level / price - 1) * 100:.1f}%" if price else "N/A"

    ma_lines = []
    if indicators.sma50 is not None:
        ma_lines.append(f"- MA50: {_above_below(price, indicators.sma50)}")
    if indicators.sma200 is not None:
        ma_lines.append(f"- MA200: {_above_below(price, indicators.sma200)}")

    news_block = ""
    headlines = news[:BATCH_LIMITS['NEWS_PER_HOLDING']]
    if headlines:
        news_block = f"Latest news ({len(headlines)}):\n" + "\n".join(
            f"{i}. {n.headline}" for i, n in enumerate(headlines, 1)
        )

    return f"""Review this holding and give advice.

Stock: {holding.symbol}
Buy price: {buy_price:.2f}
Current price: {price:.2f}
P/L: {_signed(pnl)}%

Technical signals (system scored):
- MACD: {signals.macd.text} (score {signals.macd.score:.1f}/2.5)
- RSI: {signals.rsi.text} (score {signals.rsi.score:.1f}/2.5)
- Moving averages: {signals.ma.text} (score {signals.ma.score:.1f}/2.5)
- Bollinger: {signals.bollinger.text} (score {signals.bollinger.score:.1f}/2.5)
- Overall: {signals.overall}
- Tally: bullish {signals.bullish_score} vs bearish {signals.bearish_score}
{chr(10).join(ma_lines)}

{news_block}

System price levels (you may adjust by 3-5%):
- Stop loss: {levels.stop_loss:.2f} ({pct_from_price(levels.stop_loss)}) - {levels.stop_loss_reason}
- Add more: {levels.add_more_price:.2f} ({pct_from_price(levels.add_more_price)}) - {levels.add_more_reason}
- Target: {levels.target_price:.2f} ({pct_from_price(levels.target_price)}) - {levels.target_reason}

Provide:
1. action: one of HOLD, BUY_MORE, REDUCE, SELL
2. confidence: a specific number between {base_confidence - band} and {base_confidence + band} (system base is {base_confidence})
3. the three price levels, confirmed or adjusted
4. reasoning: 40-80 words

Return JSON only, for example:
{{
  "action": "HOLD",
  "confidence": {base_confidence},
  "targetPrice": {levels.target_price:.2f},
  "stopLoss": {levels.stop_loss:.2f},
  "addMorePrice": {levels.add_more_price:.2f},
  "reasoning": "MACD scores {signals.macd.score:.1f}/2.5 and the trend is intact; keep holding."
}}"""
