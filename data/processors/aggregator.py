"""
Coin Aggregator - Assembles scored CoinRecords for the Meme-Coin Engine
Fetches market rows, fans out per-coin horizon scoring and caches whole pages
"""

import asyncio
import copy
from typing import Dict, List, Optional, Tuple

from loguru import logger

from utils.constants import (
    DEFAULT_HORIZON, DEFAULT_PAGE_SIZE, PREDICTIONS_PAGE_SIZE, SUPPORTED_HORIZONS, Horizon
)
from utils.helpers import TTLCache
from analysis.token_scorer import ScoringEngine
from data.collectors.coingecko import CoinGeckoCollector
from data.collectors.social_signals import SocialSignalSynthesizer
from data.processors.normalizer import DataNormalizer
from data.processors.validator import validate_coin_record, validate_social_series
from data.storage.models import CoinRecord, HorizonMetric


class CoinAggregator:
    """
    Builds pages of scored meme-coins

    Failures never propagate out of the listing entry points: a bad coin is
    dropped from its page and an upstream outage yields an empty page.
    """

    PREDICTIONS_CACHE_KEY = "all-memecoins-predictions"

    def __init__(
        self,
        collector: CoinGeckoCollector,
        synthesizer: SocialSignalSynthesizer,
        scorer: Optional[ScoringEngine] = None,
        cache: Optional[TTLCache] = None,
        normalizer: Optional[DataNormalizer] = None,
        predictions_page_size: int = PREDICTIONS_PAGE_SIZE
    ):
        self.collector = collector
        self.synthesizer = synthesizer
        self.scorer = scorer or ScoringEngine()
        self.cache = cache if cache is not None else TTLCache()
        self.normalizer = normalizer or DataNormalizer()
        self.predictions_page_size = predictions_page_size

        self.stats = {
            'pages_built': 0,
            'cache_hits': 0,
            'coins_dropped': 0,
            'page_failures': 0,
        }

    @staticmethod
    def page_cache_key(page: int, per_page: int) -> str:
        return f"memecoins-{page}-{per_page}"

    async def list_page(self, page: int = 1, per_page: int = DEFAULT_PAGE_SIZE) -> Tuple[List[CoinRecord], bool]:
        """
        One page of scored coins

        Args:
            page: 1-based page number
            per_page: Requested page size

        Returns:
            (records, has_more); ``has_more`` is true iff the upstream returned
            a full page. Any page-level failure returns ``([], False)``.
        """
        cache_key = self.page_cache_key(page, per_page)
        cached = self.cache.get(cache_key)
        if cached is not None:
            self.stats['cache_hits'] += 1
            return copy.deepcopy(cached), len(cached) == per_page

        try:
            rows = await self.collector.fetch_markets(page, per_page)
            records = await self._build_records(rows)
        except Exception as e:
            self.stats['page_failures'] += 1
            logger.error(f"Error fetching meme coins (page={page}, per_page={per_page}): {e}")
            return [], False

        self.cache.set(cache_key, records)
        self.stats['pages_built'] += 1
        return copy.deepcopy(records), len(rows) == per_page

    async def list_all_for_predictions(self) -> List[CoinRecord]:
        """Up to ``predictions_page_size`` coins in one call, cached separately"""
        cached = self.cache.get(self.PREDICTIONS_CACHE_KEY)
        if cached is not None:
            self.stats['cache_hits'] += 1
            return copy.deepcopy(cached)

        try:
            rows = await self.collector.fetch_markets(1, self.predictions_page_size)
            records = await self._build_records(rows)
        except Exception as e:
            self.stats['page_failures'] += 1
            logger.error(f"Error fetching all meme coins: {e}")
            return []

        self.cache.set(self.PREDICTIONS_CACHE_KEY, records)
        return copy.deepcopy(records)

    async def _build_records(self, rows: List[Dict]) -> List[CoinRecord]:
        """Fan out per row; gather keeps the upstream row order"""
        results = await asyncio.gather(
            *(self.build_record(row) for row in rows),
            return_exceptions=True
        )

        records = []
        for row, result in zip(rows, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                self.stats['coins_dropped'] += 1
                logger.error(f"Error processing coin {row.get('id')}: {result}")
                continue
            records.append(result)
        return records

    async def _score_horizon(self, coin_id: str, price_change: float, horizon: Horizon) -> HorizonMetric:
        series = await self.synthesizer.generate(coin_id, horizon)
        validate_social_series(series, horizon)
        latest = series[-1]
        return self.scorer.score_horizon(latest, price_change, horizon)

    async def build_record(self, row: Dict) -> CoinRecord:
        """
        Score one market row across every horizon

        Raises:
            ValueError: when the row cannot be normalized
            ValidationError: when the assembled record breaks an invariant
        """
        snapshot = self.normalizer.normalize_market_row(row)

        horizon_metrics = list(await asyncio.gather(*(
            self._score_horizon(snapshot.id, snapshot.change_24h, horizon)
            for horizon in SUPPORTED_HORIZONS
        )))
        default = next(metric for metric in horizon_metrics if metric.horizon == DEFAULT_HORIZON)

        record = CoinRecord(
            id=snapshot.id,
            symbol=snapshot.symbol,
            name=snapshot.name,
            image=snapshot.image,
            price=snapshot.price,
            change_24h=snapshot.change_24h,
            market_cap=snapshot.market_cap,
            social_score=default.social_score,
            risk_level=default.risk_level,
            recommendation=default.recommendation,
            strategy_confidence=default.social_score,
            horizon_metrics=horizon_metrics,
        )
        return validate_coin_record(record)
