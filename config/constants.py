"""
Centralized constants for the application.
Stores API base URLs, timeouts, model ids and other magic numbers.
"""

from typing import Dict, List

# --- API Configuration ---

# Yahoo Finance (yfinance)
YAHOO_QUOTE_TIMEOUT_SECONDS = 10
YAHOO_HISTORY_TIMEOUT_SECONDS = 30
YAHOO_SEARCH_TIMEOUT_SECONDS = 10

# Finnhub
FINNHUB_BASE_URL = "https://finnhub.io/api/v1"
FINNHUB_TIMEOUT_SECONDS = 10
FINNHUB_HISTORY_TIMEOUT_SECONDS = 30
FINNHUB_NEWS_LOOKBACK_DAYS = 30

# Hugging Face inference router (OpenAI-compatible chat completions)
HF_CHAT_COMPLETIONS_URL = "https://router.huggingface.co/v1/chat/completions"
LLM_TIMEOUT_SECONDS = 60

# Ordered fallback list; the first model that answers wins
DEFAULT_LLM_MODELS: List[str] = [
    "meta-llama/Meta-Llama-3-8B-Instruct",
    "mistralai/Mistral-7B-Instruct-v0.2",
]

# Single-stock analysis may try one more (smaller) model
STOCK_ANALYSIS_EXTRA_MODELS: List[str] = [
    "microsoft/Phi-3-mini-4k-instruct",
]

# --- Data Processing ---

DEFAULT_HISTORY_DAYS = 365

# Chart period code -> calendar days of history.
# Every period must cover the 200 closes the long moving average needs.
CHART_PERIOD_DAYS: Dict[str, int] = {
    '1y': 365,
    '2y': 730,
    '5y': 1825,
}
DEFAULT_CHART_PERIOD = '1y'

# Exchange code -> ISO country, used when Yahoo only returns chart metadata
EXCHANGE_COUNTRY_MAP: Dict[str, str] = {
    'NMS': 'US',
    'NYQ': 'US',
    'PCX': 'US',
    'NGM': 'US',
    'NCM': 'US',
    'ASE': 'US',
    'HKG': 'HK',
    'HKD': 'HK',
    'LSE': 'GB',
    'FRA': 'DE',
    'GER': 'DE',
    'JPX': 'JP',
}

# --- Data Directory Paths (relative to project root) ---
DATA_STORE = "data/store"          # JSON-backed portfolio tables
DATA_REPORTS = "generated_reports" # Saved narratives
