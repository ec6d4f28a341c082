"""
Portfolio Service
Portfolio-level narrative, stored holding advice and analysis history,
on top of StockService, HoldingsAdvisor and a PortfolioRepository.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from config.analysis_config import BATCH_LIMITS
from analysis.stock.stock_service import StockService
from analysis.portfolio.holdings_advisor import HoldingsAdvisor
from analysis.portfolio.repository import PortfolioRepository
from utils.logger import setup_logger
from utils.unified_schema import (
    AdviceRecord, AnalysisRecord, Holding, NarrativeResult,
    PortfolioPosition, PortfolioSummary
)

logger = setup_logger('portfolio_service')


class PortfolioNotFoundError(LookupError):
    """Unknown portfolio id, or a portfolio with no holdings."""


class PortfolioService:
    """Orchestrates portfolio analysis and persists the results."""

    def __init__(
        self,
        stock_service: StockService,
        repository: PortfolioRepository,
        advisor: Optional[HoldingsAdvisor] = None,
        max_workers: int = BATCH_LIMITS['MAX_WORKERS'],
    ):
        self.stock_service = stock_service
        self.repository = repository
        self.advisor = advisor or HoldingsAdvisor(stock_service)
        self.max_workers = max_workers

    def _load_holdings(self, portfolio_id: str) -> Tuple[str, List[Holding]]:
        portfolio = self.repository.get_portfolio(portfolio_id)
        if portfolio is None:
            raise PortfolioNotFoundError(f"Portfolio {portfolio_id} not found")
        holdings = self.repository.list_holdings(portfolio_id)
        if not holdings:
            raise PortfolioNotFoundError(f"Portfolio {portfolio_id} has no holdings")
        return portfolio.name or portfolio_id, holdings

    def _enrich(self, holding: Holding) -> PortfolioPosition:
        """Live price plus RSI and trend for one holding."""
        quote = self.stock_service.get_quote(holding.symbol)
        indicators = self.stock_service.get_technical_indicators(holding.symbol)
        return PortfolioPosition(
            symbol=holding.symbol,
            quantity=holding.quantity,
            buy_price=holding.buy_price,
            current_price=quote.current_price,
            rsi=indicators.rsi,
            trend=indicators.trend,
        )

    def analyze_portfolio(self, portfolio_id: str, user_id: Optional[str] = None) -> NarrativeResult:
        """
        Narrative for a stored portfolio.

        Args:
            portfolio_id: Portfolio key
            user_id: When given, the result is saved to the analysis history

        Raises:
            PortfolioNotFoundError: unknown or empty portfolio
            MarketDataError: a holding's quote or history could not be fetched
        """
        name, holdings = self._load_holdings(portfolio_id)
        logger.info(f"Analyzing portfolio {portfolio_id} ({len(holdings)} holdings)")

        workers = max(1, min(self.max_workers, len(holdings)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            positions = list(executor.map(self._enrich, holdings))

        result = self.stock_service.generator.analyze_portfolio(name, positions)

        if user_id:
            self.repository.insert_analysis(AnalysisRecord(
                user_id=user_id,
                portfolio_id=portfolio_id,
                analysis_type='portfolio',
                analysis_data=result.model_dump(),
            ))
        return result

    def analyze_holding(
        self,
        holding_id: str,
        user_id: Optional[str] = None,
        custom_prompt: Optional[str] = None
    ) -> NarrativeResult:
        """Single-stock narrative from the point of view of a stored holding."""
        holding = self.repository.get_holding(holding_id)
        if holding is None:
            raise PortfolioNotFoundError(f"Holding {holding_id} not found")

        result = self.stock_service.analyze_stock(holding.symbol, holding, custom_prompt)

        if user_id:
            self.repository.insert_analysis(AnalysisRecord(
                user_id=user_id,
                holding_id=holding_id,
                analysis_type='stock',
                analysis_data=result.model_dump(),
            ))
        return result

    def advise_portfolio(self, portfolio_id: str) -> Tuple[List[AdviceRecord], PortfolioSummary]:
        """Batch advice for a stored portfolio; each record is saved on its holding."""
        _, holdings = self._load_holdings(portfolio_id)
        advice = self.advisor.advise(holdings)
        for holding, record in zip(holdings, advice):
            if holding.id:
                self.repository.save_ai_suggestions(holding.id, record)
        return advice, self.advisor.summarize(advice)

    def history(self, user_id: str, limit: int = 10) -> List[AnalysisRecord]:
        return self.repository.list_analyses(user_id, limit)
