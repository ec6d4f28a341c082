"""
Shared fixtures: synthetic price series, in-memory providers and a scripted LLM client.
No test touches the network.
"""

import random
from typing import Dict, List, Optional

import pytest

from analysis.reporting.llm_client import GenerationResult
from data_acquisition.stock_data.base_fetcher import BaseFetcher, best_effort
from utils.errors import NotFoundError
from utils.unified_schema import (
    CompanyProfile, NewsItem, PriceSeries, Quote, SymbolMatch
)

DAY = 86400
START_TS = 1_600_000_000


def make_series(closes: List[float], symbol: str = "TEST") -> PriceSeries:
    n = len(closes)
    return PriceSeries(
        symbol=symbol,
        timestamps=[START_TS + i * DAY for i in range(n)],
        open=list(closes),
        high=[c + 1 for c in closes],
        low=[c - 1 for c in closes],
        close=list(closes),
        volume=[1000.0 + i for i in range(n)],
    )


def rising_closes() -> List[float]:
    """Flat at 100 for 200 days, then a straight line up to 150 over 50 days."""
    return [100.0] * 200 + [100.0 + (i + 1) for i in range(50)]


def make_quote(symbol: str, price: float, previous_close: Optional[float] = None, source='yahoo') -> Quote:
    return Quote.from_prices(
        symbol, price, previous_close if previous_close is not None else price,
        high=price, low=price, open=price, source=source,
    )


class FakeProvider(BaseFetcher):
    """
    In-memory provider. Critical lookups raise NotFoundError for unknown
    symbols; a stored exception instance is raised as-is.
    """

    def __init__(
        self,
        source: str = 'yahoo',
        quotes: Optional[Dict] = None,
        series: Optional[Dict] = None,
        profiles: Optional[Dict] = None,
        news: Optional[Dict] = None,
        matches: Optional[List[SymbolMatch]] = None,
    ):
        self.source = source
        self.quotes = quotes or {}
        self.series = series or {}
        self.profiles = profiles or {}
        self.news = news or {}
        self.matches = matches or []
        self.calls: List[tuple] = []

    def _lookup(self, table: Dict, symbol: str):
        value = table.get(symbol)
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise NotFoundError(symbol)
        return value

    def get_quote(self, symbol: str) -> Quote:
        self.calls.append(('quote', symbol))
        return self._lookup(self.quotes, symbol)

    def get_historical_series(self, symbol: str, days_back: int) -> PriceSeries:
        self.calls.append(('series', symbol, days_back))
        return self._lookup(self.series, symbol)

    @best_effort(CompanyProfile)
    def get_profile(self, symbol: str) -> CompanyProfile:
        self.calls.append(('profile', symbol))
        return self._lookup(self.profiles, symbol)

    @best_effort(list)
    def get_news(self, symbol: str, limit: int = 10) -> List[NewsItem]:
        self.calls.append(('news', symbol))
        return self._lookup(self.news, symbol)[:limit]

    @best_effort(list)
    def search_symbols(self, query: str) -> List[SymbolMatch]:
        self.calls.append(('search', query))
        return list(self.matches)


class FakeLLMClient:
    """Returns scripted replies in order; None simulates every model failing."""

    def __init__(self, replies: Optional[List[Optional[str]]] = None, model: str = "fake/model-1"):
        self.replies = list(replies or [])
        self.model = model
        self.prompts: List[str] = []

    @property
    def enabled(self) -> bool:
        return True

    def generate_text(self, prompt, system_prompt=None, max_tokens=2500, extra_models=None, model_hint=None):
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if self.replies else None
        if reply is None:
            return None
        return GenerationResult(text=reply, model=self.model)


class ZeroJitterRandom(random.Random):
    """Random source whose randint always returns 0 (confidence jitter off)."""

    def randint(self, a, b):
        return 0


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def rising_series():
    return make_series(rising_closes(), symbol="RISE")


@pytest.fixture
def fake_llm():
    return FakeLLMClient()
