from .base_fetcher import BaseFetcher, FetcherRegistry, best_effort
from .yahoo_fetcher import YahooFetcher
from .finnhub_fetcher import FinnhubFetcher
from .intelligent_merger import IntelligentMerger, is_profile_complete

__all__ = [
    'BaseFetcher',
    'FetcherRegistry',
    'best_effort',
    'YahooFetcher',
    'FinnhubFetcher',
    'IntelligentMerger',
    'is_profile_complete',
]
