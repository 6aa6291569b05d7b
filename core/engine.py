"""
Core Metrics Engine - Owns every cache, limiter and pipeline of the Meme-Coin Engine
"""

import logging
import time
from enum import Enum
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple, Union

import aiohttp
import numpy as np

from config.config_manager import EngineConfig
from config.rate_limiter import RateLimiter
from utils.constants import Horizon, RiskLevel
from utils.helpers import TTLCache
from analysis.price_predictor import PricePredictor
from analysis.token_scorer import ScoringEngine
from data.collectors.coingecko import CoinGeckoCollector
from data.collectors.social_data import TwitterCollector
from data.collectors.social_signals import SocialSignalSynthesizer
from data.processors.aggregator import CoinAggregator
from data.processors.news_ranker import NewsRankingPipeline
from data.storage.models import CoinRecord, NewsItem, PricePrediction, SocialMetricPoint, TwitterMetrics

logger = logging.getLogger(__name__)


class EngineState(Enum):
    """Engine lifecycle states"""
    CREATED = "created"
    RUNNING = "running"
    CLOSED = "closed"


class MemeCoinEngine:
    """
    Long-lived engine instance.

    Caches and rate-limit windows are owned here rather than held in module
    globals, so separate engines (e.g. in tests) never share state.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
        rng: Optional[np.random.Generator] = None,
        clock: Callable[[], float] = time.monotonic,
        today: Optional[Callable[[], date]] = None
    ):
        self.config = config or EngineConfig()
        self.state = EngineState.CREATED
        self.session = session
        self._owns_session = session is None

        cache_cfg = self.config.cache

        def new_cache() -> TTLCache:
            return TTLCache(ttl=cache_cfg.ttl_seconds, max_size=cache_cfg.max_size, clock=clock)

        # One cache per layer, all with the same TTL
        self.market_cache = new_cache()
        self.social_cache = new_cache()
        self.news_cache = new_cache()
        self.twitter_cache = new_cache()

        self.rate_limiter = RateLimiter(self.config.rate_limit.as_limits(), clock=clock)

        self.market_collector = CoinGeckoCollector(self.config.market_data, self.config.retry, session)
        self.twitter_collector = TwitterCollector(
            self.config.twitter,
            self.config.retry,
            rate_limiter=self.rate_limiter,
            cache=self.twitter_cache,
            session=session,
        )
        self.synthesizer = SocialSignalSynthesizer(self.social_cache, rng=rng, today=today)
        self.scorer = ScoringEngine()
        self.predictor = PricePredictor()

        self.aggregator = CoinAggregator(
            self.market_collector,
            self.synthesizer,
            self.scorer,
            self.market_cache,
            predictions_page_size=self.config.market_data.predictions_page_size,
        )
        self.news_pipeline = NewsRankingPipeline(self.twitter_collector, self.news_cache)

    async def initialize(self) -> None:
        """Create the shared HTTP session unless one was injected"""
        if self.session is None:
            timeout = aiohttp.ClientTimeout(total=self.config.market_data.request_timeout)
            self.session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
            self.market_collector.session = self.session
            self.market_collector._owns_session = False
            self.twitter_collector.session = self.session
            self.twitter_collector._owns_session = False

        self.state = EngineState.RUNNING
        logger.info("Meme-coin engine initialized")

    async def close(self) -> None:
        """Close the HTTP sessions created by the engine or lazily by its collectors"""
        await self.market_collector.close()
        await self.twitter_collector.close()
        if self.session is not None and self._owns_session:
            await self.session.close()
            self.session = None
        self.state = EngineState.CLOSED
        logger.info("Meme-coin engine closed")

    async def __aenter__(self) -> "MemeCoinEngine":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ============= Listing =============

    async def list_page(self, page: int = 1, per_page: Optional[int] = None) -> Tuple[List[CoinRecord], bool]:
        per_page = per_page or self.config.market_data.default_page_size
        return await self.aggregator.list_page(page, per_page)

    async def list_all_for_predictions(self) -> List[CoinRecord]:
        """Up to 100 coins, each annotated with price predictions"""
        coins = await self.aggregator.list_all_for_predictions()
        return [self.predictor.annotate(coin) for coin in coins]

    # ============= Coin detail =============

    async def social_metrics(self, coin_id: str, horizon: Union[Horizon, str] = Horizon.D7) -> List[SocialMetricPoint]:
        return await self.synthesizer.generate(coin_id, horizon)

    async def ranked_news(self, coin_id: str) -> List[NewsItem]:
        return await self.news_pipeline.ranked_news(coin_id)

    async def twitter_metrics(self, symbol: str) -> TwitterMetrics:
        return await self.twitter_collector.fetch_metrics(symbol)

    # ============= Predictions =============

    async def top_predictions(
        self,
        horizon: Union[Horizon, str] = Horizon.D7,
        risk: Optional[Union[RiskLevel, str]] = None,
        limit: int = 6
    ) -> List[Tuple[CoinRecord, PricePrediction]]:
        coins = await self.list_all_for_predictions()
        return self.predictor.top_predictions(coins, horizon, risk, limit)

    def stats(self) -> Dict[str, Dict]:
        return {
            "aggregator": dict(self.aggregator.stats),
            "market_collector": dict(self.market_collector.stats),
            "rate_limiter": self.rate_limiter.stats(),
            "caches": {
                "market": len(self.market_cache),
                "social": len(self.social_cache),
                "news": len(self.news_cache),
                "twitter": len(self.twitter_cache),
            },
        }
