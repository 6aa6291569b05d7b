"""
Social Signal Synthesizer - Stand-in social-dimension series for the Meme-Coin Engine

Produces a daily series of four social dimensions (political, twitter, memes,
celebrity influence) for a coin over a horizon. No social-listening API is
integrated for these dimensions yet; ``generate`` is the seam a real collector
would replace without touching the scoring engine.
"""

import math
from datetime import date, timedelta
from typing import Callable, List, Optional, Union

import numpy as np
from loguru import logger

from utils.constants import (
    Horizon, HORIZON_DAYS, HORIZON_NOISE_MULTIPLIER, METRIC_MAX, METRIC_MIN,
    SOCIAL_BASE_VALUES, SOCIAL_DIMENSIONS, SOCIAL_VOLATILITY
)
from utils.helpers import TTLCache, clamp, round_half_up
from data.storage.models import SocialMetricPoint


def sanitize_metric(value: float) -> float:
    """Clamp to [0, 100] and round to two decimals; non-finite values become 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0.0
    return clamp(round_half_up(float(value), 2), METRIC_MIN, METRIC_MAX)


def horizon_days(horizon: Union[Horizon, str]) -> int:
    return HORIZON_DAYS[Horizon(horizon)]


class SocialSignalSynthesizer:
    """Generates randomized-but-bounded social metric series"""

    def __init__(
        self,
        cache: Optional[TTLCache] = None,
        rng: Optional[np.random.Generator] = None,
        today: Optional[Callable[[], date]] = None
    ):
        self.cache = cache if cache is not None else TTLCache()
        # Seeded from OS entropy unless a generator is injected
        self.rng = rng if rng is not None else np.random.default_rng()
        self.today = today or date.today

    async def generate(self, coin_id: str, horizon: Union[Horizon, str] = Horizon.D7) -> List[SocialMetricPoint]:
        """
        Social metric series for a coin.

        Args:
            coin_id: Upstream coin id
            horizon: One of 24h / 7d / 30d / 90d

        Returns:
            ``horizon_days + 1`` points, date-ascending, ending today
        """
        horizon = Horizon(horizon)
        cache_key = f"{coin_id}-{horizon.value}"

        cached = self.cache.get(cache_key)
        if cached is not None:
            return list(cached)

        series = self.build_series(horizon)
        self.cache.set(cache_key, series)
        logger.debug(f"Synthesized {len(series)} social points for {coin_id} ({horizon.value})")
        return list(series)

    def build_series(self, horizon: Horizon) -> List[SocialMetricPoint]:
        days = HORIZON_DAYS[horizon]
        today = self.today()
        base_values = {name: sanitize_metric(SOCIAL_BASE_VALUES[name]) for name in SOCIAL_DIMENSIONS}

        series = []
        for offset in range(days, -1, -1):
            values = {
                name: self._generate_metric(base_values[name], offset, SOCIAL_VOLATILITY[name], horizon)
                for name in SOCIAL_DIMENSIONS
            }
            series.append(SocialMetricPoint(
                date=(today - timedelta(days=offset)).isoformat(),
                **values
            ))
        return series

    def _generate_metric(self, base_value: float, day_offset: int, volatility: float,
                         horizon: Horizon) -> float:
        period = HORIZON_DAYS[horizon]
        adjusted_volatility = volatility * HORIZON_NOISE_MULTIPLIER[horizon]

        trend = math.sin(day_offset / period * math.pi) * (10 / math.sqrt(period))
        noise = (self.rng.random() - 0.5) * adjusted_volatility

        return sanitize_metric(base_value + trend + noise)
