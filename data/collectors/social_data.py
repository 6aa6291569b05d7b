"""
Social Data Collector - Influencer posts and engagement metrics for the Meme-Coin Engine

Queries the recent-search endpoint of the Twitter API (directly, or through a
proxy that injects the bearer credential server-side). Whenever live data is
unavailable (no credentials, rate limited, upstream failure, empty or
malformed payload) a fixed synthetic dataset is returned instead, so callers
always have something to show.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import aiohttp
from loguru import logger

from config.config_manager import RetryConfig, TwitterConfig
from config.rate_limiter import RateLimiter
from utils.constants import MAX_INFLUENCERS, TRENDING_ENGAGEMENT_THRESHOLD
from utils.errors import RateLimitedError, UpstreamError
from utils.helpers import TTLCache, retry_async, round_half_up, sanitize_value, to_finite_float
from data.storage.models import InfluencerMention, TweetEngagement, TwitterMetrics


class TwitterCollector:
    """Collects influencer posts and engagement for a coin symbol"""

    SOURCE = "twitter"

    def __init__(
        self,
        config: Optional[TwitterConfig] = None,
        retry: Optional[RetryConfig] = None,
        rate_limiter: Optional[RateLimiter] = None,
        cache: Optional[TTLCache] = None,
        session: Optional[aiohttp.ClientSession] = None,
        now: Optional[Callable[[], datetime]] = None
    ):
        self.config = config or TwitterConfig()
        self.retry = retry or RetryConfig()
        self.rate_limiter = rate_limiter or RateLimiter()
        self.cache = cache if cache is not None else TTLCache()
        self.now = now or (lambda: datetime.now(timezone.utc))

        self.session = session
        self._owns_session = session is None

        self._search_with_retry = retry_async(**self.retry.as_kwargs())(self._search_recent)

        # Sentiment weighting
        self.sentiment_weights = {
            "likes": 0.4,
            "retweets": 0.4,
            "followers": 0.2,
        }

    async def initialize(self) -> None:
        if not self.session:
            timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)
            self.session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True

    async def close(self) -> None:
        if self.session and self._owns_session:
            await self.session.close()
            self.session = None

    async def fetch_metrics(self, symbol: str) -> TwitterMetrics:
        """
        Twitter metrics for a coin symbol, cached per lower-cased symbol

        Args:
            symbol: Coin symbol or id used in the search query

        Returns:
            Live metrics, or the synthetic dataset when live data is unavailable
        """
        cache_key = symbol.lower()
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            metrics = await self._collect_twitter_data(symbol)
        except Exception as e:
            logger.error(f"Twitter metrics collection failed for {symbol}: {e}")
            metrics = self.generate_mock_data(symbol)

        self.cache.set(cache_key, metrics)
        return metrics

    async def _collect_twitter_data(self, symbol: str) -> TwitterMetrics:
        """Collect data from Twitter"""
        if not self.config.has_credentials:
            logger.warning("Twitter credentials not configured, using mock data")
            return self.generate_mock_data(symbol)

        query = f"{symbol} crypto OR {symbol} token lang:en -is:retweet -is:reply"

        try:
            payload = await self._search_with_retry(query)
        except RateLimitedError:
            logger.warning("Twitter rate limit reached, using mock data")
            return self.generate_mock_data(symbol)
        except UpstreamError as e:
            status = getattr(e.cause, "status", None)
            if status == 401:
                logger.error("Invalid Twitter bearer token")
            elif status == 429:
                logger.error("Twitter rate limit exceeded upstream")
            logger.error(f"Twitter API error: {e}")
            return self.generate_mock_data(symbol)

        metrics = self._parse_response(payload)
        if metrics is None:
            logger.warning("Invalid or empty response from Twitter API, using mock data")
            return self.generate_mock_data(symbol)
        return metrics

    async def _search_recent(self, query: str) -> Dict[str, Any]:
        """One HTTP attempt; each attempt counts against the rate-limit window"""
        if not self.rate_limiter.allow(self.SOURCE):
            raise RateLimitedError(self.SOURCE)
        self.rate_limiter.record_call(self.SOURCE)

        if self.session is None:
            await self.initialize()

        params = {
            "query": query,
            "tweet.fields": "public_metrics,created_at,author_id",
            "user.fields": "public_metrics,username,name,profile_image_url",
            "expansions": "author_id",
            "max_results": self.config.max_results,
        }
        headers = {"Content-Type": "application/json"}
        if self.config.bearer_token and not self.config.proxy_injects_credentials:
            headers["Authorization"] = f"Bearer {self.config.bearer_token.get_secret_value()}"

        url = f"{self.config.api_url.rstrip('/')}/tweets/search/recent"
        async with self.session.get(url, params=params, headers=headers) as resp:
            if resp.status != 200:
                raise aiohttp.ClientResponseError(
                    resp.request_info,
                    resp.history,
                    status=resp.status,
                    message=f"Twitter search returned {resp.status}",
                )
            return sanitize_value(await resp.json())

    def _parse_response(self, payload: Any) -> Optional[TwitterMetrics]:
        """Map a recent-search payload to TwitterMetrics; None when unusable"""
        if not isinstance(payload, dict):
            return None
        tweets = payload.get("data")
        users = (payload.get("includes") or {}).get("users")
        if not tweets or not users:
            return None

        user_map = {user.get("id"): user for user in users if isinstance(user, dict)}

        processed = []
        for tweet in tweets:
            if not isinstance(tweet, dict):
                continue
            author = user_map.get(tweet.get("author_id"))
            if not author:
                continue
            metrics = tweet.get("public_metrics") or {}
            processed.append({
                "text": str(tweet.get("text") or ""),
                "date": str(tweet.get("created_at") or ""),
                "name": str(author.get("name") or ""),
                "username": str(author.get("username") or ""),
                "followers": int(to_finite_float((author.get("public_metrics") or {}).get("followers_count"))),
                "engagement": TweetEngagement(
                    likes=int(to_finite_float(metrics.get("like_count"))),
                    retweets=int(to_finite_float(metrics.get("retweet_count"))),
                    replies=int(to_finite_float(metrics.get("reply_count"))),
                ),
            })

        if not processed:
            return None

        processed.sort(key=lambda tweet: tweet["engagement"].score, reverse=True)

        likes = sum(tweet["engagement"].likes for tweet in processed)
        retweets = sum(tweet["engagement"].retweets for tweet in processed)
        replies = sum(tweet["engagement"].replies for tweet in processed)
        total_engagement = likes + retweets + replies

        meta = payload.get("meta") or {}
        return TwitterMetrics(
            tweet_count=int(to_finite_float(meta.get("result_count"))) or len(processed),
            sentiment=self.calculate_sentiment(processed),
            influencers=[
                InfluencerMention(
                    name=tweet["name"],
                    username=tweet["username"],
                    followers=tweet["followers"],
                    text=tweet["text"],
                    date=tweet["date"],
                    engagement=tweet["engagement"],
                )
                for tweet in processed[:MAX_INFLUENCERS]
            ],
            trending=total_engagement > TRENDING_ENGAGEMENT_THRESHOLD,
            engagement=TweetEngagement(likes=likes, retweets=retweets, replies=replies),
        )

    def calculate_sentiment(self, tweets: List[Dict[str, Any]]) -> int:
        """Engagement-derived sentiment, 0-100; not NLP"""
        if not tweets:
            return 50

        total = 0.0
        for tweet in tweets:
            engagement = tweet["engagement"]
            like_score = min(100.0, engagement.likes / 1000 * 100)
            retweet_score = min(100.0, engagement.retweets / 500 * 100)
            follower_score = min(100.0, tweet["followers"] / 100000 * 100)
            total += (
                like_score * self.sentiment_weights["likes"]
                + retweet_score * self.sentiment_weights["retweets"]
                + follower_score * self.sentiment_weights["followers"]
            )

        return int(round_half_up(total / len(tweets)))

    def generate_mock_data(self, symbol: str) -> TwitterMetrics:
        """Fixed synthetic influencer dataset"""
        timestamp = self.now().isoformat()
        return TwitterMetrics(
            tweet_count=75,
            sentiment=65,
            influencers=[
                InfluencerMention(
                    name="Crypto Analyst",
                    username="cryptoanalyst",
                    followers=125000,
                    text=f"{symbol} showing strong momentum with increasing social engagement. Watch this space! 🚀",
                    date=timestamp,
                    engagement=TweetEngagement(likes=1200, retweets=300, replies=150),
                ),
                InfluencerMention(
                    name="Meme Coin Tracker",
                    username="memecointracker",
                    followers=85000,
                    text=f"Breaking: {symbol} community growing rapidly. New developments coming soon! 📈",
                    date=timestamp,
                    engagement=TweetEngagement(likes=800, retweets=200, replies=100),
                ),
            ],
            trending=True,
            engagement=TweetEngagement(likes=3000, retweets=1500, replies=500),
            synthetic=True,
        )
