"""
Analysis Configuration
Centralized configuration for data sufficiency, fan-out limits and advice thresholds.
"""

# --- Data Sufficiency Thresholds ---
DATA_THRESHOLDS = {
    # Indicator set is only computed with at least this many daily closes
    "MIN_INDICATOR_HISTORY": 200,
    # Calendar days requested for the indicator series (covers ~250 trading days)
    "INDICATOR_HISTORY_DAYS": 365,
}

# --- Fan-out Limits ---
BATCH_LIMITS = {
    "MAX_WORKERS": 8,            # Holdings analysed in parallel
    "OVERVIEW_WORKERS": 3,       # quote / profile / indicators for one symbol
    "NEWS_PER_STOCK": 5,         # Headlines fed into a single-stock prompt
    "NEWS_PER_HOLDING": 3,       # Headlines fed into a holding-advice prompt
    "DEFAULT_NEWS_LIMIT": 10,
}

# --- Holding Advice ---
ADVICE_CONFIG = {
    # Confidence range offered to the model around the rule-based value
    "CONFIDENCE_BAND": 8,
    # Values on these marks look hand-picked and are nudged away
    "ROUND_CONFIDENCE_MARKS": (0, 25, 50, 75, 100),
    "PERTURBATION_RANGE": (1, 8),
    "VALID_ACTIONS": ("HOLD", "BUY_MORE", "REDUCE", "SELL"),
    "ADVICE_MAX_TOKENS": 800,
    "NARRATIVE_MAX_TOKENS": 2500,
}

# --- Portfolio Health Bands (static portfolio narrative) ---
PORTFOLIO_HEALTH_BANDS = [
    # (minimum total return %, label)
    (10.0, "Excellent"),
    (0.0, "Good"),
    (-10.0, "Fair"),
]
PORTFOLIO_HEALTH_FLOOR_LABEL = "Needs attention"
DIVERSIFICATION_COUNTS = {"well": 5, "moderate": 3}
MAX_SINGLE_WEIGHT_PERCENT = 40.0
