"""
Data Acquisition Module / 数据获取模块

Fetches market data from Yahoo Finance (primary) and Finnhub (secondary) and
normalizes it into the unified schema.
从 Yahoo Finance（主）和 Finnhub（备）获取行情数据，并标准化为统一格式。

Main Entry Point / 主要入口点:
    - ProviderFusion: fallback + profile merge across both providers
    - build_provider_fusion: wiring from config.settings
"""

from .orchestration.provider_fusion import ProviderFusion, build_provider_fusion

__all__ = [
    'ProviderFusion',
    'build_provider_fusion',
]
