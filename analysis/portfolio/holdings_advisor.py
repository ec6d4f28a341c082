"""
Holdings Advisor
Batch advice for a list of holdings plus a portfolio-level summary.

Each holding is analysed in its own worker; inside a worker the quote,
indicators and news are fetched in parallel. A holding that fails gets a
degraded HOLD record instead of failing the batch.
"""

import math
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from config.analysis_config import ADVICE_CONFIG, BATCH_LIMITS
from analysis.ai_commentary.commentary_generator import CommentaryGenerator
from analysis.stock.stock_service import StockService
from utils.errors import MarketDataError
from utils.logger import setup_logger
from utils.unified_schema import AdviceRecord, Holding, PortfolioSummary

logger = setup_logger('holdings_advisor')

DEGRADED_PRICE_FACTOR = 0.95


def degraded_advice(holding: Holding) -> AdviceRecord:
    """Placeholder advice for a holding whose data could not be fetched."""
    price = holding.current_price or 0.0
    return AdviceRecord(
        symbol=holding.symbol,
        action='HOLD',
        confidence=0,
        target_price=price,
        stop_loss=price * DEGRADED_PRICE_FACTOR,
        add_more_price=price * DEGRADED_PRICE_FACTOR,
        reasoning=f"Could not fetch data for {holding.symbol}; please check it manually.",
        holding_id=holding.id,
    )


def summarize_advice(advice: List[AdviceRecord]) -> PortfolioSummary:
    """
    Roll holding advice up into counts and one suggestion sentence.

    Priority: any SELL first, then more than half needing action,
    then BUY_MORE opportunities, otherwise steady.
    """
    total = len(advice)
    counts = {action: 0 for action in ADVICE_CONFIG['VALID_ACTIONS']}
    for record in advice:
        counts[record.action] += 1

    # Half rounds up, as in a "toFixed(0)" display
    avg_confidence = int(math.floor(sum(a.confidence for a in advice) / total + 0.5)) if total else 0

    need_action = counts['BUY_MORE'] + counts['REDUCE'] + counts['SELL']
    high_risk = counts['SELL']
    opportunities = counts['BUY_MORE']

    if high_risk > 0:
        suggestion = f"{high_risk} holding(s) flagged to sell; deal with the high-risk positions first."
    elif need_action > total / 2:
        suggestion = f"Over half of the holdings need adjusting ({need_action}/{total}); review the allocation."
    elif opportunities > 0:
        suggestion = f"{opportunities} holding(s) look suitable for adding; consider increasing quality names."
    else:
        suggestion = "The portfolio looks steady; keep monitoring."

    return PortfolioSummary(
        total_holdings=total,
        actions_count=counts,
        avg_confidence=avg_confidence,
        need_action=need_action,
        high_risk=high_risk,
        opportunities=opportunities,
        suggestion=suggestion,
    )


class HoldingsAdvisor:
    """Runs CommentaryGenerator.advise_holding over many holdings."""

    def __init__(
        self,
        stock_service: StockService,
        generator: Optional[CommentaryGenerator] = None,
        max_workers: int = BATCH_LIMITS['MAX_WORKERS'],
    ):
        self.stock_service = stock_service
        self.generator = generator or stock_service.generator
        self.max_workers = max_workers

    def advise_one(self, holding: Holding) -> AdviceRecord:
        """
        Advice for a single holding.

        Raises:
            MarketDataError: quote or history could not be fetched
        """
        service = self.stock_service
        with ThreadPoolExecutor(max_workers=3) as executor:
            quote_future = executor.submit(service.get_quote, holding.symbol)
            indicators_future = executor.submit(service.get_technical_indicators, holding.symbol)
            news_future = executor.submit(
                service.get_news, holding.symbol, BATCH_LIMITS['NEWS_PER_HOLDING']
            )
            quote = quote_future.result()
            indicators = indicators_future.result()
            news = news_future.result()

        return self.generator.advise_holding(holding, quote, indicators, news)

    def _advise_safely(self, holding: Holding) -> AdviceRecord:
        try:
            advice = self.advise_one(holding)
        except MarketDataError as e:
            logger.error(f"Analyze {holding.symbol} failed: {e}")
            return degraded_advice(holding)
        except Exception as e:
            # one broken holding must not take down the batch
            logger.exception(f"Analyze {holding.symbol} failed unexpectedly: {e}")
            return degraded_advice(holding)
        logger.info(f"Analyzed {holding.symbol}: {advice.action} ({advice.confidence}%)")
        return advice

    def advise(self, holdings: List[Holding]) -> List[AdviceRecord]:
        """Advice for every holding, in input order."""
        if not holdings:
            return []
        logger.info(f"Analyzing {len(holdings)} holdings...")
        workers = max(1, min(self.max_workers, len(holdings)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self._advise_safely, holdings))

    def summarize(self, advice: List[AdviceRecord]) -> PortfolioSummary:
        return summarize_advice(advice)
