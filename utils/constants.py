"""
System-wide Constants for the Meme-Coin Metrics Engine
Centralized horizon tables, scoring weights, thresholds and upstream limits
"""

from enum import Enum
from typing import Dict, List

# ============= Version Info =============
VERSION = "1.0.0"
ENGINE_NAME = "MemeDash"
PROJECT_NAME = "MemeDash Metrics Engine"

# ============= Horizons =============

class Horizon(str, Enum):
    """Prediction/lookback windows a metric is computed for"""
    H24 = "24h"
    D7 = "7d"
    D30 = "30d"
    D90 = "90d"


class RiskLevel(str, Enum):
    """Risk classification"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Recommendation(str, Enum):
    """Buy/hold/sell recommendation"""
    BUY = "Buy"
    HOLD = "Hold"
    SELL = "Sell"


SUPPORTED_HORIZONS: List[Horizon] = [Horizon.H24, Horizon.D7, Horizon.D30, Horizon.D90]
DEFAULT_HORIZON = Horizon.D7

HORIZON_DAYS: Dict[Horizon, int] = {
    Horizon.H24: 1,
    Horizon.D7: 7,
    Horizon.D30: 30,
    Horizon.D90: 90,
}

# ============= Social Signal Synthesis =============

SOCIAL_DIMENSIONS = ("political", "twitter", "memes", "celebrity")

SOCIAL_BASE_VALUES: Dict[str, float] = {
    "political": 65,
    "twitter": 75,
    "memes": 70,
    "celebrity": 60,
}

SOCIAL_VOLATILITY: Dict[str, float] = {
    "political": 10,
    "twitter": 15,
    "memes": 20,
    "celebrity": 12,
}

# Noise amplification per horizon
HORIZON_NOISE_MULTIPLIER: Dict[Horizon, float] = {
    Horizon.H24: 1.5,
    Horizon.D7: 1.2,
    Horizon.D30: 0.8,
    Horizon.D90: 0.5,
}

METRIC_MIN = 0.0
METRIC_MAX = 100.0

# ============= Scoring =============

STRATEGY_WEIGHTS: Dict[Horizon, Dict[str, float]] = {
    Horizon.H24: {"political": 0.1, "twitter": 0.4, "memes": 0.4, "celebrity": 0.1},
    Horizon.D7: {"political": 0.2, "twitter": 0.3, "memes": 0.3, "celebrity": 0.2},
    Horizon.D30: {"political": 0.3, "twitter": 0.25, "memes": 0.25, "celebrity": 0.2},
    Horizon.D90: {"political": 0.4, "twitter": 0.2, "memes": 0.2, "celebrity": 0.2},
}

RISK_THRESHOLDS = {
    "high": 80,
    "medium": 30,
}

RECOMMENDATION_THRESHOLDS: Dict[Horizon, Dict[str, float]] = {
    Horizon.H24: {"buy": 75, "sell": 35},
    Horizon.D7: {"buy": 80, "sell": 40},
    Horizon.D30: {"buy": 85, "sell": 45},
    Horizon.D90: {"buy": 90, "sell": 50},
}

DEFAULT_STRATEGY_SCORE = 50

# ============= Price Predictions =============

PREDICTION_HORIZON_MULTIPLIER: Dict[Horizon, float] = {
    Horizon.D7: 1.0,
    Horizon.D30: 1.5,
    Horizon.D90: 2.0,
}

# ============= News / Engagement =============

ENGAGEMENT_WEIGHTS = {
    "likes": 1.0,
    "retweets": 2.0,
    "replies": 1.5,
}

SENTIMENT_POSITIVE_ABOVE = 1000
SENTIMENT_NEGATIVE_BELOW = 100
TRENDING_ENGAGEMENT_THRESHOLD = 1000
MAX_INFLUENCERS = 5

# ============= API Configuration =============

COINGECKO_API_URL = "https://api.coingecko.com/api/v3"
TWITTER_API_URL = "https://api.twitter.com/2"
MEME_CATEGORY = "meme-token"

API_RATE_LIMITS = {
    "twitter": {"calls": 450, "period": 900},  # 450 calls / 15 minutes
}

DEFAULT_PAGE_SIZE = 20
PREDICTIONS_PAGE_SIZE = 100

# ============= Time Constants =============

CACHE_TTL_SECONDS = 300  # 5 minutes, every cache
MAX_RETRIES = 3
RETRY_DELAY_SECONDS = 1.0
REQUEST_TIMEOUT_SECONDS = 10

# ============= Export All Constants =============

__all__ = [
    'VERSION', 'ENGINE_NAME', 'PROJECT_NAME',
    'Horizon', 'RiskLevel', 'Recommendation',
    'SUPPORTED_HORIZONS', 'DEFAULT_HORIZON', 'HORIZON_DAYS',
    'SOCIAL_DIMENSIONS', 'SOCIAL_BASE_VALUES', 'SOCIAL_VOLATILITY',
    'HORIZON_NOISE_MULTIPLIER', 'METRIC_MIN', 'METRIC_MAX',
    'STRATEGY_WEIGHTS', 'RISK_THRESHOLDS', 'RECOMMENDATION_THRESHOLDS',
    'DEFAULT_STRATEGY_SCORE', 'PREDICTION_HORIZON_MULTIPLIER',
    'ENGAGEMENT_WEIGHTS', 'SENTIMENT_POSITIVE_ABOVE', 'SENTIMENT_NEGATIVE_BELOW',
    'TRENDING_ENGAGEMENT_THRESHOLD', 'MAX_INFLUENCERS',
    'COINGECKO_API_URL', 'TWITTER_API_URL', 'MEME_CATEGORY',
    'API_RATE_LIMITS', 'DEFAULT_PAGE_SIZE', 'PREDICTIONS_PAGE_SIZE',
    'CACHE_TTL_SECONDS', 'MAX_RETRIES', 'RETRY_DELAY_SECONDS',
    'REQUEST_TIMEOUT_SECONDS',
]
