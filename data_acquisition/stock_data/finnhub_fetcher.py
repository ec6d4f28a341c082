"""
Finnhub Data Fetcher (secondary market data source).
REST endpoints: /quote, /stock/candle, /stock/profile2, /company-news, /search.
"""
import requests
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, List
from pydantic import ValidationError
from .base_fetcher import BaseFetcher, FetcherRegistry, best_effort
from config.constants import (
    FINNHUB_BASE_URL, FINNHUB_TIMEOUT_SECONDS,
    FINNHUB_HISTORY_TIMEOUT_SECONDS, FINNHUB_NEWS_LOOKBACK_DAYS
)
from utils.errors import NotFoundError, UpstreamError
from utils.helpers import epoch_to_iso, normalize_symbol
from utils.http_utils import make_request
from utils.logger import setup_logger
from utils.unified_schema import (
    Quote, PriceSeries, CompanyProfile, NewsItem, SymbolMatch
)

logger = setup_logger('finnhub_fetcher')


class FinnhubFetcher(BaseFetcher):
    """
    Fetches quotes, candles, profile, news and search results from Finnhub.
    The API key travels as the `token` query parameter.
    """

    source = 'finnhub'

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = FINNHUB_BASE_URL,
        timeout: float = FINNHUB_TIMEOUT_SECONDS,
        history_timeout: float = FINNHUB_HISTORY_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            api_key: Finnhub token; without it every call fails fast
            base_url: API root
            timeout: Seconds for quote/profile/news/search
            history_timeout: Seconds for candles
            session: Optional requests.Session
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.history_timeout = history_timeout
        self.session = session
        if not api_key:
            logger.warning("Finnhub API key not configured. Secondary provider disabled.")

    def _get(self, endpoint: str, params: Dict[str, Any], symbol: Optional[str], timeout: float):
        if not self.api_key:
            raise UpstreamError(self.source, "API key not configured", symbol)
        return make_request(
            f"{self.base_url}/{endpoint}",
            params={**params, 'token': self.api_key},
            timeout=timeout,
            source_name='Finnhub',
            symbol=symbol,
            session=self.session,
        )

    # ==================== CRITICAL LOOKUPS ====================

    def get_quote(self, symbol: str) -> Quote:
        symbol = normalize_symbol(symbol)
        data = self._get('quote', {'symbol': symbol}, symbol, self.timeout)
        return self._parse_quote(symbol, data)

    def _parse_quote(self, symbol: str, data: Any) -> Quote:
        if not isinstance(data, dict) or 'c' not in data:
            raise UpstreamError(self.source, "quote payload missing current price", symbol)

        current = self._safe_float(data.get('c'))
        if current is None:
            raise UpstreamError(self.source, f"non-numeric current price {data.get('c')!r}", symbol)
        # Unknown symbols come back as an all-zero quote
        if current == 0 and not data.get('t'):
            raise NotFoundError(symbol, f"Finnhub has no quote for {symbol}")

        previous_close = self._safe_float(data.get('pc')) or 0.0
        try:
            return Quote(
                symbol=symbol,
                current_price=current,
                change=self._safe_float(data.get('d')) or current - previous_close,
                change_percent=self._safe_float(data.get('dp')) or 0.0,
                high=self._safe_float(data.get('h')) or 0.0,
                low=self._safe_float(data.get('l')) or 0.0,
                open=self._safe_float(data.get('o')) or 0.0,
                previous_close=previous_close,
                timestamp=int(data.get('t') or 0),
                source=self.source,
            )
        except (ValidationError, TypeError, ValueError) as e:
            raise UpstreamError(self.source, f"malformed quote payload: {e}", symbol) from e

    def get_historical_series(self, symbol: str, days_back: int) -> PriceSeries:
        symbol = normalize_symbol(symbol)
        now = datetime.now(timezone.utc)
        params = {
            'symbol': symbol,
            'resolution': 'D',
            'from': int((now - timedelta(days=days_back)).timestamp()),
            'to': int(now.timestamp()),
        }
        data = self._get('stock/candle', params, symbol, self.history_timeout)

        if not isinstance(data, dict):
            raise UpstreamError(self.source, "candle payload is not an object", symbol)
        if data.get('s') == 'no_data':
            raise NotFoundError(symbol, f"Finnhub has no candles for {symbol}")

        def column(key: str) -> List[float]:
            return [self._safe_float(v) or 0.0 for v in (data.get(key) or [])]

        try:
            return PriceSeries(
                symbol=symbol,
                timestamps=[int(t) for t in (data.get('t') or [])],
                open=column('o'),
                high=column('h'),
                low=column('l'),
                close=column('c'),
                volume=column('v'),
            )
        except (ValidationError, TypeError, ValueError) as e:
            raise UpstreamError(self.source, f"malformed candle payload: {e}", symbol) from e

    # ==================== ENRICHMENT LOOKUPS ====================

    @best_effort(CompanyProfile)
    def get_profile(self, symbol: str) -> CompanyProfile:
        symbol = normalize_symbol(symbol)
        data = self._get('stock/profile2', {'symbol': symbol}, symbol, self.timeout) or {}

        # profile2 reports market cap in millions
        market_cap_millions = self._safe_float(data.get('marketCapitalization'))
        return CompanyProfile(
            name=self._text_or_none(data.get('name')),
            country=self._text_or_none(data.get('country')),
            currency=self._text_or_none(data.get('currency')),
            exchange=self._text_or_none(data.get('exchange')),
            industry=self._text_or_none(data.get('finnhubIndustry')),
            market_cap_billions=market_cap_millions / 1000 if market_cap_millions else None,
            website_url=self._text_or_none(data.get('weburl')),
            source=self.source,
        )

    @best_effort(list)
    def get_news(self, symbol: str, limit: int = 10) -> List[NewsItem]:
        symbol = normalize_symbol(symbol)
        today = datetime.now(timezone.utc).date()
        params = {
            'symbol': symbol,
            'from': (today - timedelta(days=FINNHUB_NEWS_LOOKBACK_DAYS)).isoformat(),
            'to': today.isoformat(),
        }
        data = self._get('company-news', params, symbol, self.timeout) or []

        items = []
        for raw in data[:limit]:
            if not raw.get('headline'):
                continue
            items.append(NewsItem(
                headline=raw['headline'],
                summary=raw.get('summary') or "",
                source=raw.get('source') or "Finnhub",
                url=raw.get('url') or "",
                published_at=epoch_to_iso(raw.get('datetime')),
            ))
        return items

    @best_effort(list)
    def search_symbols(self, query: str) -> List[SymbolMatch]:
        data = self._get('search', {'q': query}, None, self.timeout) or {}
        return [
            SymbolMatch(
                symbol=item['symbol'],
                name=item.get('description') or "",
                type=item.get('type') or "",
                exchange=item.get('displaySymbol') or "",
                region='US',
            )
            for item in data.get('result') or []
            if item.get('symbol')
        ]


FetcherRegistry.register('finnhub', FinnhubFetcher)
