"""
News Ranking Pipeline - Influencer posts ranked by engagement, cached per coin
"""

import hashlib
from typing import List, Optional

from loguru import logger

from utils.constants import SENTIMENT_NEGATIVE_BELOW, SENTIMENT_POSITIVE_ABOVE
from utils.helpers import TTLCache
from data.collectors.social_data import TwitterCollector
from data.storage.models import InfluencerMention, NewsAuthor, NewsItem, TweetEngagement

TWITTER_NEWS_IMAGE = (
    "https://images.unsplash.com/photo-1611605698335-8b1569810432"
    "?w=400&auto=format&fit=crop&q=60"
)


def calculate_engagement_score(engagement: Optional[TweetEngagement]) -> float:
    """likes + 2*retweets + 1.5*replies"""
    if engagement is None:
        return 0.0
    return engagement.score


def sentiment_from_engagement(engagement: Optional[TweetEngagement]) -> str:
    score = calculate_engagement_score(engagement)
    if score > SENTIMENT_POSITIVE_ABOVE:
        return "positive"
    if score < SENTIMENT_NEGATIVE_BELOW:
        return "negative"
    return "neutral"


class NewsRankingPipeline:
    """Turns influencer mentions into ranked NewsItems"""

    def __init__(self, collector: TwitterCollector, cache: Optional[TTLCache] = None):
        self.collector = collector
        self.cache = cache if cache is not None else TTLCache()

    @staticmethod
    def _news_id(coin_id: str, mention: InfluencerMention) -> str:
        digest = hashlib.sha256(
            f"{coin_id}:{mention.username}:{mention.date}:{mention.text}".encode('utf-8')
        ).hexdigest()
        return f"twitter-{digest[:16]}"

    def _to_news_item(self, coin_id: str, mention: InfluencerMention) -> NewsItem:
        return NewsItem(
            id=self._news_id(coin_id, mention),
            title=f"{mention.name} on {coin_id.upper()}",
            content=mention.text,
            source="Twitter",
            date=mention.date,
            url=f"https://twitter.com/{mention.username}",
            sentiment=sentiment_from_engagement(mention.engagement),
            engagement_score=calculate_engagement_score(mention.engagement),
            engagement=mention.engagement,
            author=NewsAuthor(
                name=mention.name,
                username=mention.username,
                followers=mention.followers,
                avatar=f"https://unavatar.io/twitter/{mention.username}",
            ),
            url_to_image=TWITTER_NEWS_IMAGE,
        )

    async def ranked_news(self, coin_id: str) -> List[NewsItem]:
        """
        Influencer news for a coin, highest engagement first

        Args:
            coin_id: Coin id (also used as the search term)

        Returns:
            Ranked news items; empty on unexpected failure
        """
        cached = self.cache.get(coin_id)
        if cached is not None:
            return list(cached)

        try:
            metrics = await self.collector.fetch_metrics(coin_id)
            news = [self._to_news_item(coin_id, mention) for mention in metrics.influencers]
            news.sort(key=lambda item: item.engagement_score, reverse=True)
        except Exception as e:
            logger.error(f"Error fetching news for {coin_id}: {e}")
            return []

        self.cache.set(coin_id, news)
        return list(news)
