"""
Technical Scoring Configuration.
Defines indicator parameters, signal thresholds, per-indicator score bands,
confidence adjustments and the price-level ladder multipliers.
"""

# ==================== INDICATOR PARAMETERS ====================

# Minimum closes before an IndicatorSet is computed at all
MIN_DATA_POINTS = 200

RSI_CONFIG = {
    'period': 14,
    'levels': {
        'overbought': 70,       # RSI >= 70
        'oversold': 30,         # RSI <= 30
        'strong': 50,           # RSI >= 50 (below: weak)
    },
    'hints': {
        'overbought': 'possible pullback',
        'oversold': 'possible rebound',
        'strong': 'bullish momentum',
        'weak': 'bearish momentum',
        'unknown': '',
    },
}

MA_CONFIG = {
    'short_period': 50,
    'long_period': 200,
}

MACD_CONFIG = {
    'fast': 12,
    'slow': 26,
    'signal': 9,
    # |histogram| above this raises a medium-strength signal
    'histogram_signal_threshold': 0.3,
}

BOLLINGER_CONFIG = {
    'period': 20,
    'std_dev': 2,
}

VOLATILITY_CONFIG = {
    'period': 20,
}

# ==================== PER-INDICATOR SCORES (0 - 2.5 each) ====================
MAX_INDICATOR_SCORE = 2.5

MACD_SCORING = {
    'golden_multiplier': 0.5,   # score = min(2.5, |hist| * 0.5)
    'death_floor': 0.5,         # score = max(0.5, 2.5 - |hist| * 0.5)
    'neutral': 1.5,
    'cross_weight': 8,
}

RSI_SCORING = {
    'overbought': 70,
    'oversold': 30,
    'midline': 50,
    'oversold_score': 2.5,
    'extreme_weight': 7,        # overbought (bearish) / oversold (bullish)
    'strong_weight': 3,         # 50 <= RSI <= 70 (bullish)
}

MA_SCORING = {
    'golden': {'above_both': 2.5, 'above_long': 1.8, 'below': 1.2},
    'death': {'below_both': 0.5, 'above_long': 1.5, 'between': 1.0},
    'cross_weight': 8,
}

BOLLINGER_SCORING = {
    'above_upper': (0.8, 5),    # (score, bearish weight)
    'below_lower': (2.5, 7),    # (score, bullish weight)
    'above_middle': 1.5,
    'below_middle': 1.2,
}

# bullish share of the tally -> overall bias
OVERALL_BIAS = {
    'bullish_above': 60,
    'bearish_below': 40,
}

# ==================== BASE CONFIDENCE ====================
CONFIDENCE_CONFIG = {
    'start': 50,
    'bounds': (15, 95),
    'jitter': (-3, 3),
    # (threshold, adjustment) on bullish share %, checked in order
    'share_above': [(70, 25), (55, 15)],
    'share_below': [(30, -25), (45, -15)],
    'rsi_overbought': (70, -8),
    'rsi_oversold': (30, 8),
    'rsi_neutral_band': (45, 55, 5),
    # (threshold, adjustment) on unrealized P/L %
    'pnl_above': [(20, 10), (10, 5)],
    'pnl_below': [(-20, -10), (-10, -8)],
    'macd_cross': 6,
    'ma_cross': 6,
}

# ==================== PRICE LEVEL LADDER ====================
# Multipliers are applied to the buy price (buy) or the current price (cur)
PRICE_LEVEL_CONFIG = {
    'stop_loss': {
        'profit_20': {'buy': 1.10, 'cur': 0.90},
        'profit_10': {'buy': 1.05, 'cur': 0.92},
        'profit': {'buy': 1.00, 'cur': 0.93},
        'loss_20': {'cur': 0.90},
        'loss_10': {'cur': 0.88},
        'loss': {'buy': 0.90, 'cur': 0.88},
    },
    'add_more': {
        'profit_overbought': 0.93,
        'profit': 0.95,
        'loss_30': 0.98,
        'loss_20': 0.95,
        'loss': 0.92,
    },
    'target': {
        'profit_bullish': 1.15,
        'profit': 1.08,
        'loss_20': 1.05,
        'loss': {'buy': 1.05, 'cur': 1.10},
        'loss_bullish_recovery': 1.10,
    },
    'references': {
        'sma50_add_more': 0.98,
        'sma50_target': 1.05,
        'sma200_stop': 0.95,
        'lower_band_zone': 1.05,
        'lower_band_add_more': 1.02,
        'upper_band_target': 0.98,
    },
    'clamps': {
        'stop_max': 0.95,
        'add_more_max': 0.98,
        'target_min': 1.02,
        'target_clamp_profit_exempt': 50,
    },
}
