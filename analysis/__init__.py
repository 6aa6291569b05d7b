"""
Analysis Module
Horizon scoring and price projections
"""

from .token_scorer import ScoringEngine
from .price_predictor import PricePredictor

__all__ = [
    'ScoringEngine',
    'PricePredictor'
]
