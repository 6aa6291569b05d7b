# analysis/token_scorer.py

import logging
import math
from typing import Dict, Optional, Union

import numpy as np

from utils.constants import (
    Horizon, RiskLevel, Recommendation,
    DEFAULT_STRATEGY_SCORE, RECOMMENDATION_THRESHOLDS, RISK_THRESHOLDS,
    SOCIAL_DIMENSIONS, STRATEGY_WEIGHTS
)
from utils.helpers import round_half_up, to_finite_float
from data.collectors.social_signals import sanitize_metric
from data.storage.models import HorizonMetric, SocialMetricPoint

logger = logging.getLogger(__name__)


class ScoringEngine:
    """
    Horizon-aware social scoring.

    Every method is a pure function of a social metric point, the coin's 24h
    price change and the horizon.
    """

    def __init__(
        self,
        weights: Optional[Dict[Horizon, Dict[str, float]]] = None,
        thresholds: Optional[Dict[Horizon, Dict[str, float]]] = None
    ):
        self.weights = weights or STRATEGY_WEIGHTS
        self.thresholds = thresholds or RECOMMENDATION_THRESHOLDS
        self.risk_thresholds = RISK_THRESHOLDS

        for horizon, table in self.weights.items():
            total = sum(table.values())
            if not math.isclose(total, 1.0, abs_tol=1e-9):
                raise ValueError(f"Weights for {horizon.value} sum to {total}, expected 1.0")

    def calculate_strategy_score(self, point: Optional[SocialMetricPoint],
                                 horizon: Union[Horizon, str] = Horizon.D7) -> int:
        """Weighted composite of the four dimensions, 0-100"""
        if point is None:
            return DEFAULT_STRATEGY_SCORE

        weights = self.weights[Horizon(horizon)]
        score = sanitize_metric(sum(
            getattr(point, name) * weights[name] for name in SOCIAL_DIMENSIONS
        ))
        return int(round_half_up(score))

    def calculate_social_volatility(self, point: SocialMetricPoint) -> int:
        """Population standard deviation of the four dimensions"""
        values = np.array([sanitize_metric(v) for v in point.values()], dtype=float)
        return int(round_half_up(float(np.std(values))))

    def calculate_risk_level(self, point: SocialMetricPoint, price_change: float,
                             horizon: Union[Horizon, str] = Horizon.D7) -> RiskLevel:
        """High dominates Medium; both price and social volatility are checked"""
        volatility = abs(to_finite_float(price_change))
        social_volatility = self.calculate_social_volatility(point)

        if volatility > self.risk_thresholds["high"] or social_volatility > self.risk_thresholds["high"]:
            return RiskLevel.HIGH
        if volatility > self.risk_thresholds["medium"] or social_volatility > self.risk_thresholds["medium"]:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def get_recommendation(self, point: SocialMetricPoint, price_change: float,
                           horizon: Union[Horizon, str] = Horizon.D7) -> Recommendation:
        horizon = Horizon(horizon)
        strategy_score = self.calculate_strategy_score(point, horizon)
        risk_level = self.calculate_risk_level(point, price_change, horizon)
        thresholds = self.thresholds[horizon]

        if strategy_score > thresholds["buy"] and risk_level != RiskLevel.HIGH:
            return Recommendation.BUY
        if strategy_score < thresholds["sell"] or risk_level == RiskLevel.HIGH:
            return Recommendation.SELL
        return Recommendation.HOLD

    def score_horizon(self, point: SocialMetricPoint, price_change: float,
                      horizon: Union[Horizon, str]) -> HorizonMetric:
        """Assemble the HorizonMetric for the latest point of a series"""
        horizon = Horizon(horizon)
        return HorizonMetric(
            horizon=horizon,
            social_score=self.calculate_strategy_score(point, horizon),
            risk_level=self.calculate_risk_level(point, price_change, horizon),
            recommendation=self.get_recommendation(point, price_change, horizon),
        )
