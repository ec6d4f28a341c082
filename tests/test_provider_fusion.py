"""ProviderFusion fallback policy and per-field profile merge."""

import pytest

from data_acquisition.orchestration.provider_fusion import ProviderFusion, build_provider
from data_acquisition.stock_data.finnhub_fetcher import FinnhubFetcher
from data_acquisition.stock_data.yahoo_fetcher import YahooFetcher
from data_acquisition.stock_data.intelligent_merger import (
    IntelligentMerger, is_present, is_profile_complete
)
from utils.errors import NotFoundError, UpstreamError
from utils.unified_schema import CompanyProfile, NewsItem, SymbolMatch

from conftest import FakeProvider, make_quote, make_series


def fusion_of(primary: FakeProvider, secondary: FakeProvider) -> ProviderFusion:
    return ProviderFusion(primary, secondary)


# ==================== QUOTE ====================

def test_primary_quote_wins():
    primary = FakeProvider('yahoo', quotes={'AAPL': make_quote('AAPL', 190.0)})
    secondary = FakeProvider('finnhub', quotes={'AAPL': make_quote('AAPL', 1.0, source='finnhub')})
    quote = fusion_of(primary, secondary).get_quote('aapl')
    assert quote.current_price == 190.0
    assert ('quote', 'AAPL') not in secondary.calls


def test_primary_timeout_falls_back_to_secondary():
    primary = FakeProvider('yahoo', quotes={'AAPL': UpstreamError('yahoo', 'timed out after 10s', 'AAPL')})
    secondary = FakeProvider('finnhub', quotes={'AAPL': make_quote('AAPL', 189.5, source='finnhub')})
    quote = fusion_of(primary, secondary).get_quote('AAPL')
    assert quote.current_price == 189.5
    assert quote.source == 'finnhub'


def test_both_quote_providers_fail_raises_primary_error():
    primary = FakeProvider('yahoo', quotes={'ZZZZ': UpstreamError('yahoo', 'timed out after 10s', 'ZZZZ')})
    secondary = FakeProvider('finnhub', quotes={'ZZZZ': NotFoundError('ZZZZ')})
    with pytest.raises(UpstreamError) as excinfo:
        fusion_of(primary, secondary).get_quote('ZZZZ')
    assert "timed out" in str(excinfo.value)
    assert "ZZZZ" in str(excinfo.value)
    assert excinfo.value.symbol == 'ZZZZ'


# ==================== PROFILE ====================

def test_profile_merged_per_field():
    primary = FakeProvider('yahoo', profiles={
        'ACME': CompanyProfile(name="N/A", industry="Tech", source='yahoo'),
    })
    secondary = FakeProvider('finnhub', profiles={
        'ACME': CompanyProfile(name="Acme", industry=None, market_cap_billions=12.0, source='finnhub'),
    })
    profile = fusion_of(primary, secondary).get_profile('ACME')
    assert profile.name == "Acme"
    assert profile.industry == "Tech"
    assert profile.market_cap_billions == 12.0
    assert profile.source == 'fused'


def test_complete_primary_profile_skips_secondary():
    primary = FakeProvider('yahoo', profiles={
        'MSFT': CompanyProfile(name="Microsoft", industry="Software", market_cap_billions=3000.0, source='yahoo'),
    })
    secondary = FakeProvider('finnhub')
    profile = fusion_of(primary, secondary).get_profile('MSFT')
    assert profile.name == "Microsoft"
    assert profile.country == "N/A"
    assert profile.currency == "USD"
    assert profile.website_url == ""
    assert secondary.calls == []


def test_profile_with_nothing_known_uses_sentinels():
    profile = fusion_of(FakeProvider('yahoo'), FakeProvider('finnhub')).get_profile('NONE')
    assert profile.name == 'NONE'
    assert profile.exchange == "N/A"
    assert profile.market_cap_billions == 0.0


def test_symbol_echoed_as_name_is_not_present():
    assert not is_present("AAPL", "AAPL")
    assert is_present("Apple Inc.", "AAPL")
    assert not is_present("N/A")
    assert not is_present(0)
    assert not is_present("   ")


def test_profile_completeness():
    assert not is_profile_complete(None, 'X')
    assert not is_profile_complete(CompanyProfile(name='X', industry='Tech', market_cap_billions=1.0), 'X')
    assert is_profile_complete(CompanyProfile(name='Xco', industry='Tech', market_cap_billions=1.0), 'X')


def test_merger_records_field_sources():
    merger = IntelligentMerger('acme')
    merger.merge_profiles(
        CompanyProfile(name="Acme", source='yahoo'),
        CompanyProfile(country="US", source='finnhub'),
    )
    assert merger.field_sources['name'] == 'yahoo'
    assert merger.field_sources['country'] == 'finnhub'
    assert merger.field_sources['industry'] is None


# ==================== NEWS / SEARCH ====================

def test_news_falls_back_when_primary_empty():
    item = NewsItem(headline="Acme beats estimates", source="Wire")
    primary = FakeProvider('yahoo', news={'ACME': []})
    secondary = FakeProvider('finnhub', news={'ACME': [item]})
    assert fusion_of(primary, secondary).get_news('ACME') == [item]


def test_news_never_raises():
    primary = FakeProvider('yahoo', news={'ACME': RuntimeError("boom")})
    secondary = FakeProvider('finnhub', news={'ACME': UpstreamError('finnhub', 'down', 'ACME')})
    assert fusion_of(primary, secondary).get_news('ACME') == []


def test_news_respects_limit():
    items = [NewsItem(headline=f"h{i}") for i in range(10)]
    primary = FakeProvider('yahoo', news={'ACME': items})
    assert len(fusion_of(primary, FakeProvider('finnhub')).get_news('ACME', limit=3)) == 3


def test_blank_search_returns_empty_without_calls():
    primary = FakeProvider('yahoo', matches=[SymbolMatch(symbol='AAPL')])
    assert fusion_of(primary, FakeProvider('finnhub')).search_symbols("  ") == []
    assert primary.calls == []


def test_search_falls_back_to_secondary():
    secondary = FakeProvider('finnhub', matches=[SymbolMatch(symbol='AAPL', name='Apple')])
    matches = fusion_of(FakeProvider('yahoo'), secondary).search_symbols("apple")
    assert [m.symbol for m in matches] == ['AAPL']


# ==================== HISTORY ====================

def test_history_from_primary_only():
    series = make_series([1.0, 2.0, 3.0], symbol='ACME')
    primary = FakeProvider('yahoo', series={'ACME': series})
    secondary = FakeProvider('finnhub', series={'ACME': series})
    assert fusion_of(primary, secondary).get_historical_series('ACME', 30) is series
    assert secondary.calls == []


def test_history_failure_carries_symbol_and_lookback():
    primary = FakeProvider('yahoo', series={'ACME': UpstreamError('yahoo', 'connection error', 'ACME')})
    with pytest.raises(UpstreamError) as excinfo:
        fusion_of(primary, FakeProvider('finnhub')).get_historical_series('ACME', 365)
    assert "365" in str(excinfo.value)
    assert excinfo.value.symbol == 'ACME'


def test_history_not_found_stays_not_found():
    with pytest.raises(NotFoundError):
        fusion_of(FakeProvider('yahoo'), FakeProvider('finnhub')).get_historical_series('NOPE', 365)


# ==================== WIRING ====================

class _Config:
    FINNHUB_API_KEY = "abc123"
    primary_provider = 'yahoo'
    secondary_provider = 'finnhub'


def test_build_provider_by_name():
    assert isinstance(build_provider('yahoo', _Config()), YahooFetcher)
    finnhub = build_provider('finnhub', _Config())
    assert isinstance(finnhub, FinnhubFetcher)
    assert finnhub.api_key == "abc123"


def test_build_unknown_provider():
    with pytest.raises(ValueError):
        build_provider('bloomberg', _Config())
