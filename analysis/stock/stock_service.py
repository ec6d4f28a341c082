"""
Stock Service
=============

Single-symbol entry points used by the CLIs and the portfolio layer:
pass-through market data, the indicator snapshot, chart payloads,
the combined overview and the narrative analysis.

Every call refetches from the providers; nothing is cached between calls.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from config.analysis_config import BATCH_LIMITS, DATA_THRESHOLDS
from config.constants import CHART_PERIOD_DAYS, DEFAULT_CHART_PERIOD
from data_acquisition.orchestration.provider_fusion import ProviderFusion, build_provider_fusion
from analysis.technical_scorers.technical_scorer import TechnicalScorer
from analysis.technical_scorers.chart_assembler import ChartAssembler
from analysis.ai_commentary.commentary_generator import CommentaryGenerator
from utils.errors import InsufficientDataError, NotFoundError
from utils.helpers import normalize_symbol
from utils.logger import setup_logger
from utils.unified_schema import (
    ChartData, CompanyProfile, Holding, IndicatorSet, NarrativeResult,
    NewsItem, Quote, StockContext, StockOverview, SymbolMatch
)

logger = setup_logger('stock_service')


class StockService:
    """Facade over ProviderFusion, the indicator engine and the commentary generator."""

    def __init__(
        self,
        fusion: Optional[ProviderFusion] = None,
        generator: Optional[CommentaryGenerator] = None,
        max_workers: int = BATCH_LIMITS['OVERVIEW_WORKERS'],
        history_days: int = DATA_THRESHOLDS['INDICATOR_HISTORY_DAYS'],
        min_data_points: int = DATA_THRESHOLDS['MIN_INDICATOR_HISTORY'],
    ):
        """
        Args:
            fusion: Provider pair (defaults to the configured primary/secondary)
            generator: Narrative generator, created lazily when first needed
            max_workers: Threads used to fetch one symbol's pieces in parallel
            history_days: Calendar days of history behind the indicator set
            min_data_points: Closes required before indicators are reported
        """
        self.fusion = fusion or build_provider_fusion()
        self._generator = generator
        self.max_workers = max_workers
        self.history_days = history_days
        self.min_data_points = min_data_points

    @property
    def generator(self) -> CommentaryGenerator:
        if self._generator is None:
            self._generator = CommentaryGenerator()
        return self._generator

    # ==================== MARKET DATA ====================

    def get_quote(self, symbol: str) -> Quote:
        return self.fusion.get_quote(symbol)

    def get_profile(self, symbol: str) -> CompanyProfile:
        return self.fusion.get_profile(symbol)

    def get_news(self, symbol: str, limit: int = BATCH_LIMITS['DEFAULT_NEWS_LIMIT']) -> List[NewsItem]:
        return self.fusion.get_news(symbol, limit)

    def search_symbols(self, query: str) -> List[SymbolMatch]:
        return self.fusion.search_symbols(query)

    # ==================== INDICATORS ====================

    def get_technical_indicators(self, symbol: str) -> IndicatorSet:
        """
        Indicator snapshot over the configured lookback.

        Raises:
            MarketDataError: the series could not be fetched. Short series do
                not raise; they come back as an all-unknown set with `error`.
        """
        series = self.fusion.get_historical_series(symbol, self.history_days)
        return TechnicalScorer(series, self.min_data_points).calculate()

    def get_chart_data(self, symbol: str, period: str = DEFAULT_CHART_PERIOD) -> ChartData:
        """
        Per-day candles with aligned SMA50 / SMA200 / MACD values.

        Args:
            symbol: Stock ticker symbol
            period: One of CHART_PERIOD_DAYS ('1y', '2y', '5y')

        Raises:
            ValueError: unknown period code
            NotFoundError: the provider returned no bars
            InsufficientDataError: fewer closes than the long moving average needs
        """
        if period not in CHART_PERIOD_DAYS:
            raise ValueError(
                f"Unknown chart period '{period}'. Available: {', '.join(CHART_PERIOD_DAYS)}"
            )
        symbol = normalize_symbol(symbol)
        days = CHART_PERIOD_DAYS[period]
        logger.info(f"Fetching {days} days of candles for {symbol}")

        series = self.fusion.get_historical_series(symbol, days)
        if series.is_empty:
            raise NotFoundError(symbol, f"No candle data available for {symbol}")
        if len(series) < self.min_data_points:
            raise InsufficientDataError(symbol, self.min_data_points, len(series))

        histories = TechnicalScorer(series, self.min_data_points).calculate_histories()
        chart = ChartAssembler().assemble(
            series,
            histories['sma50'],
            histories['sma200'],
            histories['macd'],
            period=period,
        )
        logger.info(
            f"{symbol}: {chart.data_points} rows "
            f"(MA50 {chart.summary.sma50_points}, MA200 {chart.summary.sma200_points}, "
            f"MACD {chart.summary.macd_points})"
        )
        return chart

    # ==================== COMPOSITES ====================

    def get_stock_overview(self, symbol: str) -> StockOverview:
        """Quote, profile and indicators fetched in parallel."""
        symbol = normalize_symbol(symbol)
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            quote_future = executor.submit(self.get_quote, symbol)
            profile_future = executor.submit(self.get_profile, symbol)
            indicators_future = executor.submit(self.get_technical_indicators, symbol)

            quote = quote_future.result()
            profile = profile_future.result()
            indicators = indicators_future.result()

        return StockOverview(
            symbol=quote.symbol,
            name=profile.name or symbol,
            quote=quote,
            profile=profile,
            indicators=indicators,
        )

    def build_context(self, symbol: str, holding: Optional[Holding] = None) -> StockContext:
        symbol = normalize_symbol(symbol)
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            quote_future = executor.submit(self.get_quote, symbol)
            profile_future = executor.submit(self.get_profile, symbol)
            news_future = executor.submit(self.get_news, symbol)
            indicators_future = executor.submit(self.get_technical_indicators, symbol)

            quote = quote_future.result()
            profile = profile_future.result()
            news = news_future.result()
            indicators = indicators_future.result()

        return StockContext(
            symbol=symbol,
            name=profile.name,
            quote=quote,
            indicators=indicators,
            profile=profile,
            holding=holding,
            news=news,
        )

    def analyze_stock(
        self,
        symbol: str,
        holding: Optional[Holding] = None,
        custom_prompt: Optional[str] = None
    ) -> NarrativeResult:
        """
        Narrative analysis of one stock, optionally from a holder's point of view.

        Args:
            symbol: Stock ticker symbol
            holding: The user's position, if any
            custom_prompt: Replaces the generated prompt when given

        Returns:
            NarrativeResult from the model, or the static template
        """
        context = self.build_context(symbol, holding)
        if custom_prompt:
            logger.info(f"{context.symbol}: using custom prompt")
        return self.generator.analyze_stock(context, custom_prompt)
