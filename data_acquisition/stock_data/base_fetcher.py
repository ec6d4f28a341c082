"""
Base Fetcher - Provider contract and shared helpers for market data fetchers.

Provides:
1. The two provider contracts: critical lookups (quote, series) raise typed
   errors; enrichment lookups (profile, news, search) never raise.
2. Common helper methods for value conversion.
3. A registry so the primary/secondary provider can be chosen by name.

基础数据获取器 - 所有行情数据提供方的统一接口与通用工具。
"""

import functools
from abc import ABC, abstractmethod
from typing import Optional, Any, List, Dict, Callable
from utils.unified_schema import (
    Quote, PriceSeries, CompanyProfile, NewsItem, SymbolMatch, DataSource
)
from utils.logger import setup_logger
from utils.numeric_utils import clean_numeric

logger = setup_logger('base_fetcher')


def best_effort(default_factory: Callable[[], Any]):
    """
    Mark an enrichment lookup: any exception is logged and replaced by
    `default_factory()`, so callers never need a try/except around it.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            try:
                return func(self, *args, **kwargs)
            except Exception as e:
                target = args[0] if args else kwargs.get('symbol', kwargs.get('query', ''))
                logger.warning(f"{self.source} {func.__name__}({target}) degraded: {e}")
                return default_factory()
        return wrapper
    return decorator


class BaseFetcher(ABC):
    """
    Abstract base class for market data providers.
    Instances hold configuration only (keys, timeouts, session); no per-symbol state.
    """

    source: DataSource

    # --- Critical lookups: raise NotFoundError / UpstreamError ---

    @abstractmethod
    def get_quote(self, symbol: str) -> Quote:
        """Latest quote. Raises NotFoundError or UpstreamError."""

    @abstractmethod
    def get_historical_series(self, symbol: str, days_back: int) -> PriceSeries:
        """Daily bars for the last `days_back` calendar days (may be empty)."""

    # --- Enrichment lookups: wrap with @best_effort in subclasses ---

    @abstractmethod
    def get_profile(self, symbol: str) -> CompanyProfile:
        """Company metadata; unknown fields left as None."""

    @abstractmethod
    def get_news(self, symbol: str, limit: int = 10) -> List[NewsItem]:
        """Most recent headlines, at most `limit`."""

    @abstractmethod
    def search_symbols(self, query: str) -> List[SymbolMatch]:
        """Equity symbols matching a free-text query."""

    # --- Helpers ---

    def _safe_get(self, data: Optional[Dict], key: str, default: Any = None) -> Any:
        if not data:
            return default
        value = data.get(key, default)
        return default if value is None else value

    def _safe_float(self, value: Any) -> Optional[float]:
        """Delegates to centralized clean_numeric utility."""
        return clean_numeric(value)

    def _text_or_none(self, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


# Fetcher registry for dynamic source selection
class FetcherRegistry:
    """Registry of available fetchers by data source name."""

    _fetchers: Dict[str, type] = {}

    @classmethod
    def register(cls, source: str, fetcher_class: type):
        """Register a fetcher class for a data source."""
        cls._fetchers[source] = fetcher_class

    @classmethod
    def get(cls, source: str) -> Optional[type]:
        """Get the fetcher class for a data source."""
        return cls._fetchers.get(source)

    @classmethod
    def available_sources(cls) -> List[str]:
        return list(cls._fetchers.keys())
