"""
Yahoo Finance data fetcher.
Primary market data source: quotes, daily history, profile, news and symbol search.
Transport (cookies, crumb, endpoints) is delegated to yfinance.
"""

import yfinance as yf
import pandas as pd
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Dict, Any
from config.constants import (
    YAHOO_QUOTE_TIMEOUT_SECONDS, YAHOO_HISTORY_TIMEOUT_SECONDS,
    YAHOO_SEARCH_TIMEOUT_SECONDS, EXCHANGE_COUNTRY_MAP
)
from utils.errors import NotFoundError, UpstreamError
from utils.helpers import safe_float, safe_int, epoch_to_iso, normalize_symbol
from utils.logger import setup_logger
from utils.unified_schema import (
    Quote, PriceSeries, CompanyProfile, NewsItem, SymbolMatch
)
from data_acquisition.stock_data.base_fetcher import BaseFetcher, FetcherRegistry, best_effort

logger = setup_logger('yahoo_fetcher')

OHLCV_COLUMNS = ['Open', 'High', 'Low', 'Close', 'Volume']


def guess_country_from_exchange(exchange_code: Optional[str]) -> Optional[str]:
    """Map a Yahoo exchange code (NMS, HKG, LSE...) to an ISO country code."""
    if not exchange_code:
        return None
    return EXCHANGE_COUNTRY_MAP.get(exchange_code.upper())


class YahooFetcher(BaseFetcher):
    """Fetches market data from Yahoo Finance and maps it to the unified schema."""

    source = 'yahoo'

    def __init__(
        self,
        quote_timeout: float = YAHOO_QUOTE_TIMEOUT_SECONDS,
        history_timeout: float = YAHOO_HISTORY_TIMEOUT_SECONDS,
        search_timeout: float = YAHOO_SEARCH_TIMEOUT_SECONDS,
    ):
        """
        Args:
            quote_timeout: Seconds allowed for the quote history call
            history_timeout: Seconds allowed for the full daily history call
            search_timeout: Seconds allowed for symbol search
        """
        self.quote_timeout = quote_timeout
        self.history_timeout = history_timeout
        self.search_timeout = search_timeout

    # ==================== CRITICAL LOOKUPS ====================

    def get_quote(self, symbol: str) -> Quote:
        """
        Latest quote built from the last daily bars.

        Current price is the last close; previous close is the bar before it
        (or the last open when only one bar came back).
        """
        symbol = normalize_symbol(symbol)
        try:
            frame = yf.Ticker(symbol).history(
                period="5d", interval="1d", auto_adjust=False, timeout=self.quote_timeout
            )
        except Exception as e:
            raise UpstreamError(self.source, f"quote request failed: {e}", symbol) from e

        if frame is None or frame.empty:
            raise NotFoundError(symbol, f"Yahoo returned no quote for {symbol}")

        last = frame.iloc[-1]
        current_price = safe_float(last.get('Close'))
        if current_price <= 0:
            raise UpstreamError(self.source, "quote payload has no usable price", symbol)

        if len(frame) > 1:
            previous_close = safe_float(frame.iloc[-2].get('Close'))
        else:
            previous_close = safe_float(last.get('Open'))

        return Quote.from_prices(
            symbol,
            current_price,
            previous_close,
            high=safe_float(last.get('High')),
            low=safe_float(last.get('Low')),
            open=safe_float(last.get('Open')),
            volume=safe_float(last.get('Volume')),
            timestamp=int(pd.Timestamp(frame.index[-1]).timestamp()),
            source=self.source,
        )

    def get_historical_series(self, symbol: str, days_back: int) -> PriceSeries:
        """
        Daily bars covering the last `days_back` calendar days.
        An empty frame is returned as an empty series, not an error.
        """
        symbol = normalize_symbol(symbol)
        end = datetime.now(timezone.utc).date() + timedelta(days=1)
        start = end - timedelta(days=days_back + 1)
        try:
            frame = yf.Ticker(symbol).history(
                start=start.isoformat(),
                end=end.isoformat(),
                interval="1d",
                auto_adjust=False,
                timeout=self.history_timeout,
            )
        except Exception as e:
            raise UpstreamError(self.source, f"history request failed: {e}", symbol) from e

        if frame is None or frame.empty:
            logger.info(f"Yahoo returned no history for {symbol} ({days_back}d)")
            return PriceSeries(symbol=symbol)

        return self._frame_to_series(symbol, frame)

    def _frame_to_series(self, symbol: str, frame: pd.DataFrame) -> PriceSeries:
        missing = [c for c in OHLCV_COLUMNS if c not in frame.columns]
        if missing:
            raise UpstreamError(self.source, f"history payload missing columns {missing}", symbol)

        frame = frame.sort_index()
        frame = frame[~frame.index.duplicated(keep='last')]
        # Missing upstream values are normalized to 0
        values = frame[OHLCV_COLUMNS].apply(pd.to_numeric, errors='coerce').fillna(0.0)

        return PriceSeries(
            symbol=symbol,
            timestamps=[int(pd.Timestamp(ts).timestamp()) for ts in frame.index],
            open=values['Open'].tolist(),
            high=values['High'].tolist(),
            low=values['Low'].tolist(),
            close=values['Close'].tolist(),
            volume=values['Volume'].tolist(),
        )

    # ==================== ENRICHMENT LOOKUPS ====================

    @best_effort(CompanyProfile)
    def get_profile(self, symbol: str) -> CompanyProfile:
        """
        Profile fallback chain: quote summary (`Ticker.info`), then chart
        metadata with the country guessed from the exchange, then a record
        carrying only the symbol as name.
        """
        symbol = normalize_symbol(symbol)
        ticker = yf.Ticker(symbol)

        profile = self._profile_from_info(ticker, symbol)
        if profile is not None:
            return profile

        profile = self._profile_from_metadata(ticker, symbol)
        if profile is not None:
            return profile

        logger.info(f"No Yahoo profile for {symbol}, returning symbol-only record")
        return CompanyProfile(name=symbol, source=self.source)

    def _profile_from_info(self, ticker: yf.Ticker, symbol: str) -> Optional[CompanyProfile]:
        try:
            info = ticker.info or {}
        except Exception as e:
            logger.debug(f"Yahoo quote summary unavailable for {symbol}: {e}")
            return None

        name = self._text_or_none(info.get('longName') or info.get('shortName'))
        if not name:
            return None

        market_cap = self._safe_float(info.get('marketCap'))
        return CompanyProfile(
            name=name,
            country=self._text_or_none(info.get('country')),
            currency=self._text_or_none(info.get('currency')),
            exchange=self._text_or_none(info.get('fullExchangeName') or info.get('exchange')),
            industry=self._text_or_none(info.get('industry') or info.get('sector')),
            market_cap_billions=market_cap / 1e9 if market_cap else None,
            website_url=self._text_or_none(info.get('website')),
            source=self.source,
        )

    def _profile_from_metadata(self, ticker: yf.Ticker, symbol: str) -> Optional[CompanyProfile]:
        try:
            meta = ticker.get_history_metadata() or {}
        except Exception as e:
            logger.debug(f"Yahoo chart metadata unavailable for {symbol}: {e}")
            return None

        name = self._text_or_none(meta.get('longName') or meta.get('shortName'))
        exchange_code = self._text_or_none(meta.get('exchangeName'))
        if not name and not exchange_code:
            return None

        return CompanyProfile(
            name=name or symbol,
            country=guess_country_from_exchange(exchange_code),
            currency=self._text_or_none(meta.get('currency')),
            exchange=self._text_or_none(meta.get('fullExchangeName')) or exchange_code,
            source=self.source,
        )

    @best_effort(list)
    def get_news(self, symbol: str, limit: int = 10) -> List[NewsItem]:
        symbol = normalize_symbol(symbol)
        raw_items = yf.Ticker(symbol).news or []

        items = []
        for raw in raw_items:
            item = self._parse_news_item(raw)
            if item is not None:
                items.append(item)
            if len(items) >= limit:
                break
        return items

    def _parse_news_item(self, raw: Dict[str, Any]) -> Optional[NewsItem]:
        # Newer yfinance nests the article under 'content'
        content = raw.get('content')
        if isinstance(content, dict):
            headline = content.get('title')
            if not headline:
                return None
            provider = content.get('provider') or {}
            url = (content.get('canonicalUrl') or {}).get('url') or \
                  (content.get('clickThroughUrl') or {}).get('url') or ""
            return NewsItem(
                headline=headline,
                summary=content.get('summary') or "",
                source=provider.get('displayName') or "Yahoo Finance",
                url=url,
                published_at=content.get('pubDate') or "",
            )

        headline = raw.get('title')
        if not headline:
            return None
        return NewsItem(
            headline=headline,
            summary=raw.get('summary') or "",
            source=raw.get('publisher') or "Yahoo Finance",
            url=raw.get('link') or "",
            published_at=epoch_to_iso(safe_int(raw.get('providerPublishTime'))),
        )

    @best_effort(list)
    def search_symbols(self, query: str) -> List[SymbolMatch]:
        """Equity matches only; Yahoo does not report a region, 'US' is assumed."""
        search = yf.Search(query, max_results=10, news_count=0, timeout=self.search_timeout)
        matches = []
        for quote in search.quotes or []:
            if quote.get('quoteType') != 'EQUITY' or not quote.get('symbol'):
                continue
            matches.append(SymbolMatch(
                symbol=quote['symbol'],
                name=quote.get('longname') or quote.get('shortname') or quote['symbol'],
                type='Equity',
                exchange=quote.get('exchDisp') or quote.get('exchange') or "",
                region='US',
            ))
        return matches


FetcherRegistry.register('yahoo', YahooFetcher)
