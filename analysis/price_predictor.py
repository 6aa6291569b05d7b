"""
Price Predictor - Social-score driven price projections for the prediction grid
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Tuple, Union

from utils.constants import Horizon, RiskLevel, PREDICTION_HORIZON_MULTIPLIER, RISK_THRESHOLDS
from data.storage.models import CoinRecord, PricePrediction

logger = logging.getLogger(__name__)


class PricePredictor:
    """Projects prices per horizon from the horizon's social score"""

    def __init__(self, horizon_multipliers: Optional[Dict[Horizon, float]] = None):
        self.horizon_multipliers = horizon_multipliers or PREDICTION_HORIZON_MULTIPLIER

    @staticmethod
    def classify_change(predicted_change: float) -> RiskLevel:
        """Risk from the magnitude of the projected move"""
        magnitude = abs(predicted_change)
        if magnitude > RISK_THRESHOLDS["high"]:
            return RiskLevel.HIGH
        if magnitude > RISK_THRESHOLDS["medium"]:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def predict(self, coin: CoinRecord, horizon: Union[Horizon, str] = Horizon.D7) -> PricePrediction:
        """
        Projected price for one horizon.

        A coin without a metric for the horizon is projected flat.
        """
        horizon = Horizon(horizon)
        if horizon not in self.horizon_multipliers:
            raise ValueError(f"No prediction multiplier for horizon {horizon.value}")

        metric = coin.metric_for(horizon)
        if metric is None:
            return PricePrediction(horizon, coin.price, coin.price, 0.0, RiskLevel.LOW)

        social_impact = (metric.social_score - 50) / 100
        base_growth = (metric.social_score / 100) * self.horizon_multipliers[horizon]
        predicted_change = base_growth * (1 + social_impact) * 100
        predicted_price = coin.price * (1 + predicted_change / 100)

        return PricePrediction(
            horizon=horizon,
            current_price=coin.price,
            predicted_price=predicted_price,
            predicted_change=predicted_change,
            risk_level=self.classify_change(predicted_change),
        )

    def annotate(self, coin: CoinRecord) -> CoinRecord:
        """Copy of the coin with predictions for every prediction horizon"""
        return replace(coin, predictions={
            horizon.value: self.predict(coin, horizon) for horizon in self.horizon_multipliers
        })

    def top_predictions(
        self,
        coins: List[CoinRecord],
        horizon: Union[Horizon, str] = Horizon.D7,
        risk: Optional[Union[RiskLevel, str]] = None,
        limit: int = 6
    ) -> List[Tuple[CoinRecord, PricePrediction]]:
        """Coins ranked by projected change, optionally filtered by risk"""
        risk = RiskLevel(risk) if risk is not None else None
        ranked = [(coin, self.predict(coin, horizon)) for coin in coins]
        if risk is not None:
            ranked = [item for item in ranked if item[1].risk_level == risk]
        ranked.sort(key=lambda item: item[1].predicted_change, reverse=True)
        logger.debug(f"Ranked {len(ranked)} predictions for {Horizon(horizon).value}")
        return ranked[:limit]
