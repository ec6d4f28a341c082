"""
Provider Fusion - Primary/secondary market data with fallback and profile merge.

Policy per lookup:
1. Quote        - primary, then secondary; if both fail the primary's error wins.
2. Profile      - primary; secondary only when the primary's record is incomplete,
                  merged per field (primary dominates).
3. News/Search  - primary if non-empty, else secondary, else [].
4. History      - primary only; failures carry symbol and lookback.
"""
from typing import Optional, List

from config.analysis_config import BATCH_LIMITS
from config.constants import DEFAULT_HISTORY_DAYS
from config.settings import Settings, settings as default_settings
from data_acquisition.stock_data.base_fetcher import BaseFetcher, FetcherRegistry
from data_acquisition.stock_data.intelligent_merger import IntelligentMerger, is_profile_complete
from utils.errors import MarketDataError, NotFoundError, UpstreamError
from utils.helpers import normalize_symbol
from utils.logger import setup_logger
from utils.unified_schema import Quote, PriceSeries, CompanyProfile, NewsItem, SymbolMatch

# Registers the built-in fetchers
import data_acquisition.stock_data.yahoo_fetcher  # noqa: F401
import data_acquisition.stock_data.finnhub_fetcher  # noqa: F401

logger = setup_logger('provider_fusion')


class ProviderFusion:
    """
    Combines a primary and a secondary provider behind one interface.
    Stateless between calls; safe to share across worker threads.
    """

    def __init__(self, primary: BaseFetcher, secondary: BaseFetcher):
        self.primary = primary
        self.secondary = secondary

    def get_quote(self, symbol: str) -> Quote:
        symbol = normalize_symbol(symbol)
        try:
            return self.primary.get_quote(symbol)
        except MarketDataError as primary_error:
            logger.warning(f"{self.primary.source} quote failed for {symbol}: {primary_error}")
            try:
                quote = self.secondary.get_quote(symbol)
                logger.info(f"{symbol} quote served by {self.secondary.source}")
                return quote
            except MarketDataError as secondary_error:
                logger.warning(f"{self.secondary.source} quote failed for {symbol}: {secondary_error}")
                raise primary_error

    def get_profile(self, symbol: str) -> CompanyProfile:
        symbol = normalize_symbol(symbol)
        merger = IntelligentMerger(symbol)
        primary_profile = self.primary.get_profile(symbol)

        if is_profile_complete(primary_profile, symbol):
            return merger.finalize(primary_profile)

        logger.info(f"{symbol} profile incomplete from {self.primary.source}, asking {self.secondary.source}")
        secondary_profile = self.secondary.get_profile(symbol)
        return merger.merge_profiles(primary_profile, secondary_profile)

    def get_news(self, symbol: str, limit: int = BATCH_LIMITS['DEFAULT_NEWS_LIMIT']) -> List[NewsItem]:
        symbol = normalize_symbol(symbol)
        news = self.primary.get_news(symbol, limit)
        if news:
            return news[:limit]
        return self.secondary.get_news(symbol, limit)[:limit]

    def search_symbols(self, query: str) -> List[SymbolMatch]:
        query = (query or "").strip()
        if not query:
            return []
        matches = self.primary.search_symbols(query)
        if matches:
            return matches
        return self.secondary.search_symbols(query)

    def get_historical_series(self, symbol: str, days_back: int = DEFAULT_HISTORY_DAYS) -> PriceSeries:
        symbol = normalize_symbol(symbol)
        try:
            return self.primary.get_historical_series(symbol, days_back)
        except NotFoundError as e:
            raise NotFoundError(symbol, f"No history for {symbol} ({days_back}d): {e}") from e
        except MarketDataError as e:
            raise UpstreamError(
                self.primary.source, f"history ({days_back}d) failed: {e}", symbol
            ) from e


def build_provider(name: str, config: Settings) -> BaseFetcher:
    """Instantiate a registered fetcher by name with keys from settings."""
    fetcher_class = FetcherRegistry.get(name)
    if fetcher_class is None:
        raise ValueError(
            f"Unknown market data provider '{name}'. "
            f"Available: {', '.join(FetcherRegistry.available_sources())}"
        )
    if name == 'finnhub':
        return fetcher_class(api_key=config.FINNHUB_API_KEY)
    return fetcher_class()


def build_provider_fusion(config: Optional[Settings] = None) -> ProviderFusion:
    """Wire the configured primary and secondary providers."""
    config = config or default_settings
    if 'finnhub' in (config.primary_provider, config.secondary_provider):
        logger.info(f"Finnhub key: {config.get_masked_finnhub_key()} ({config.get_key_count('FINNHUB')} configured)")
    return ProviderFusion(
        primary=build_provider(config.primary_provider, config),
        secondary=build_provider(config.secondary_provider, config),
    )
