"""
Report Formatting Utilities
Centralized logic for formatting console reports of overviews, charts and advice.
"""

from typing import List

from utils.helpers import format_large_number
from utils.numeric_utils import safe_format
from utils.unified_schema import (
    AdviceRecord, ChartData, IndicatorSet, PortfolioSummary, StockOverview
)


def format_overview_report(overview: StockOverview) -> str:
    """Quote, profile and headline indicators for one stock."""
    quote, profile = overview.quote, overview.profile

    lines = []
    lines.append("-" * 70)
    lines.append(f"STOCK OVERVIEW - {overview.symbol} ({overview.name})")
    lines.append("-" * 70)
    lines.append(f"Price: {quote.current_price:.2f} {profile.currency}  "
                 f"({'+' if quote.change >= 0 else ''}{quote.change:.2f}, "
                 f"{'+' if quote.change_percent >= 0 else ''}{quote.change_percent:.2f}%)")
    lines.append(f"Open / High / Low: {quote.open:.2f} / {quote.high:.2f} / {quote.low:.2f}")
    lines.append(f"Previous Close: {quote.previous_close:.2f}")
    lines.append("")
    lines.append(f"Exchange: {profile.exchange}  Industry: {profile.industry}  Country: {profile.country}")
    market_cap = profile.market_cap_billions or 0.0
    lines.append(f"Market Cap: {format_large_number(market_cap * 1e9)}")
    lines.append("")
    lines.append(format_indicator_report(overview.indicators))
    return "\n".join(lines)


def format_indicator_report(tech: IndicatorSet) -> str:
    """Format the indicator snapshot as a clean report string."""
    lines = []
    lines.append("-" * 70)
    lines.append("TECHNICAL INDICATORS")
    lines.append("-" * 70)

    if tech.error:
        lines.append(f"[NOTE] {tech.error}")
        lines.append("-" * 70)
        return "\n".join(lines)

    lines.append(f"  {'RSI (14)':<20} : {safe_format(tech.rsi):>10} ({tech.rsi_level})")
    lines.append(f"  {'MA50':<20} : {safe_format(tech.sma50):>10}")
    lines.append(f"  {'MA200':<20} : {safe_format(tech.sma200):>10}")
    if tech.macd:
        lines.append(f"  {'MACD':<20} : {tech.macd.macd:>10.4f} "
                     f"(signal {tech.macd.signal:.4f}, hist {tech.macd.histogram:.4f})")
    if tech.bollinger:
        lines.append(f"  {'Bollinger':<20} : {tech.bollinger.lower:.2f} / "
                     f"{tech.bollinger.middle:.2f} / {tech.bollinger.upper:.2f}")
    lines.append(f"  {'Volatility':<20} : {safe_format(tech.volatility):>10}")
    lines.append(f"  {'Trend':<20} : {tech.trend:>10}")

    if tech.signals:
        lines.append("")
        lines.append("Signals:")
        for s in tech.signals:
            lines.append(f"      - {s.type.upper():<5} {s.indicator:<10} [{s.strength}] {s.reason} ({s.value})")

    lines.append("-" * 70)
    return "\n".join(lines)


def format_chart_report(chart: ChartData, tail: int = 10) -> str:
    """Chart summary plus the last `tail` rows."""
    summary = chart.summary
    lines = []
    lines.append("-" * 70)
    lines.append(f"CHART DATA - {chart.symbol} ({chart.period})")
    lines.append("-" * 70)
    lines.append(f"Rows: {chart.data_points}  ({summary.first_date} -> {summary.last_date})")
    lines.append(f"Highest / Lowest: {safe_format(summary.highest_price)} / {safe_format(summary.lowest_price)}")
    lines.append(f"Average Volume: {format_large_number(summary.average_volume)}")
    lines.append(f"Indicator points: MA50 {summary.sma50_points}, MA200 {summary.sma200_points}, "
                 f"MACD {summary.macd_points}")
    lines.append("")
    lines.append(f"{'Date':<12}{'Close':>10}{'MA50':>10}{'MA200':>10}{'MACD':>10}{'Hist':>10}")
    for row in chart.rows[-tail:]:
        lines.append(
            f"{row.date:<12}{row.close:>10.2f}{safe_format(row.sma50):>10}"
            f"{safe_format(row.sma200):>10}{safe_format(row.macd, '.4f'):>10}"
            f"{safe_format(row.histogram, '.4f'):>10}"
        )
    lines.append("-" * 70)
    return "\n".join(lines)


def format_advice_report(advice: List[AdviceRecord], summary: PortfolioSummary) -> str:
    """Holding advice table plus the portfolio summary."""
    lines = []
    lines.append("-" * 70)
    lines.append("HOLDING ADVICE")
    lines.append("-" * 70)

    for record in advice:
        sig = record.technical_signals
        lines.append(f"{record.symbol:<8} {record.action:<9} confidence {record.confidence:>3}%  [{record.model}]")
        lines.append(f"      Target {record.target_price:.2f} | Stop {record.stop_loss:.2f} | "
                     f"Add more {record.add_more_price:.2f}")
        lines.append(f"      MACD {sig.macd.score:.1f} | RSI {sig.rsi.score:.1f} | "
                     f"MA {sig.ma.score:.1f} | Bollinger {sig.bollinger.score:.1f} | {sig.overall}")
        if record.reasoning:
            lines.append(f"      {record.reasoning}")
        lines.append("")

    lines.append("Summary:")
    counts = ", ".join(f"{action} {count}" for action, count in summary.actions_count.items())
    lines.append(f"  Holdings: {summary.total_holdings} ({counts})")
    lines.append(f"  Average confidence: {summary.avg_confidence}%")
    lines.append(f"  {summary.suggestion}")
    lines.append("-" * 70)
    return "\n".join(lines)
