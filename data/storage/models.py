# data/storage/models.py

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

import orjson

from utils.constants import (
    Horizon, RiskLevel, Recommendation, ENGAGEMENT_WEIGHTS, SOCIAL_DIMENSIONS
)


@dataclass(frozen=True)
class SocialMetricPoint:
    """One calendar day of synthesized social signal, each dimension in [0, 100]."""
    date: str
    political: float
    twitter: float
    memes: float
    celebrity: float

    def values(self) -> List[float]:
        return [getattr(self, name) for name in SOCIAL_DIMENSIONS]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "political": self.political,
            "twitter": self.twitter,
            "memes": self.memes,
            "celebrity": self.celebrity,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SocialMetricPoint":
        return cls(
            date=str(data["date"]),
            political=float(data["political"]),
            twitter=float(data["twitter"]),
            memes=float(data["memes"]),
            celebrity=float(data["celebrity"]),
        )


@dataclass(frozen=True)
class HorizonMetric:
    """Score, risk and recommendation for one horizon of a coin."""
    horizon: Horizon
    social_score: int
    risk_level: RiskLevel
    recommendation: Recommendation

    def to_dict(self) -> Dict[str, Any]:
        return {
            "horizon": self.horizon.value,
            "social_score": self.social_score,
            "risk_level": self.risk_level.value,
            "recommendation": self.recommendation.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HorizonMetric":
        return cls(
            horizon=Horizon(data["horizon"]),
            social_score=int(data["social_score"]),
            risk_level=RiskLevel(data["risk_level"]),
            recommendation=Recommendation(data["recommendation"]),
        )


@dataclass(frozen=True)
class PricePrediction:
    """Social-score driven price projection for one horizon."""
    horizon: Horizon
    current_price: float
    predicted_price: float
    predicted_change: float
    risk_level: RiskLevel

    def to_dict(self) -> Dict[str, Any]:
        return {
            "horizon": self.horizon.value,
            "current_price": self.current_price,
            "predicted_price": self.predicted_price,
            "predicted_change": self.predicted_change,
            "risk_level": self.risk_level.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PricePrediction":
        return cls(
            horizon=Horizon(data["horizon"]),
            current_price=float(data["current_price"]),
            predicted_price=float(data["predicted_price"]),
            predicted_change=float(data["predicted_change"]),
            risk_level=RiskLevel(data["risk_level"]),
        )


@dataclass
class CoinRecord:
    """
    A listed meme-coin with its market snapshot and multi-horizon scoring.

    The top-level score fields mirror the 7d horizon metric.
    """
    id: str
    symbol: str
    name: str
    image: str

    # Market snapshot
    price: float
    change_24h: float
    market_cap: float

    # Default (7d) scoring
    social_score: int
    risk_level: RiskLevel
    recommendation: Recommendation
    strategy_confidence: int

    horizon_metrics: List[HorizonMetric] = field(default_factory=list)
    predictions: Optional[Dict[str, PricePrediction]] = None

    def metric_for(self, horizon: Horizon) -> Optional[HorizonMetric]:
        for metric in self.horizon_metrics:
            if metric.horizon == horizon:
                return metric
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "name": self.name,
            "image": self.image,
            "price": self.price,
            "change_24h": self.change_24h,
            "market_cap": self.market_cap,
            "social_score": self.social_score,
            "risk_level": self.risk_level.value,
            "recommendation": self.recommendation.value,
            "strategy_confidence": self.strategy_confidence,
            "horizon_metrics": [metric.to_dict() for metric in self.horizon_metrics],
            "predictions": (
                {key: prediction.to_dict() for key, prediction in self.predictions.items()}
                if self.predictions is not None else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CoinRecord":
        predictions = data.get("predictions")
        return cls(
            id=str(data["id"]),
            symbol=str(data["symbol"]),
            name=str(data["name"]),
            image=str(data["image"]),
            price=float(data["price"]),
            change_24h=float(data["change_24h"]),
            market_cap=float(data["market_cap"]),
            social_score=int(data["social_score"]),
            risk_level=RiskLevel(data["risk_level"]),
            recommendation=Recommendation(data["recommendation"]),
            strategy_confidence=int(data["strategy_confidence"]),
            horizon_metrics=[HorizonMetric.from_dict(m) for m in data.get("horizon_metrics", [])],
            predictions=(
                {key: PricePrediction.from_dict(p) for key, p in predictions.items()}
                if predictions is not None else None
            ),
        )

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict())

    @classmethod
    def from_json(cls, payload: bytes) -> "CoinRecord":
        return cls.from_dict(orjson.loads(payload))


@dataclass(frozen=True)
class TweetEngagement:
    likes: int = 0
    retweets: int = 0
    replies: int = 0

    @property
    def total(self) -> int:
        return self.likes + self.retweets + self.replies

    @property
    def score(self) -> float:
        """Weighted engagement: likes + 2*retweets + 1.5*replies"""
        return (
            self.likes * ENGAGEMENT_WEIGHTS["likes"]
            + self.retweets * ENGAGEMENT_WEIGHTS["retweets"]
            + self.replies * ENGAGEMENT_WEIGHTS["replies"]
        )

    def to_dict(self) -> Dict[str, int]:
        return {"likes": self.likes, "retweets": self.retweets, "replies": self.replies}


@dataclass(frozen=True)
class InfluencerMention:
    """Influencer post about a coin"""
    name: str
    username: str
    followers: int
    text: str
    date: str
    engagement: TweetEngagement


@dataclass
class TwitterMetrics:
    """Aggregated social metrics for a coin symbol"""
    tweet_count: int
    sentiment: int  # 0-100
    influencers: List[InfluencerMention]
    trending: bool
    engagement: TweetEngagement
    synthetic: bool = False

    @property
    def total_engagement(self) -> int:
        return self.engagement.total

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tweet_count": self.tweet_count,
            "sentiment": self.sentiment,
            "influencers": [
                {
                    "name": influencer.name,
                    "username": influencer.username,
                    "followers": influencer.followers,
                    "recent_tweet": {
                        "text": influencer.text,
                        "date": influencer.date,
                        "engagement": influencer.engagement.to_dict(),
                    },
                }
                for influencer in self.influencers
            ],
            "trending": self.trending,
            "engagement": dict(self.engagement.to_dict(), total=self.total_engagement),
            "synthetic": self.synthetic,
        }


@dataclass(frozen=True)
class NewsAuthor:
    name: str
    username: str
    followers: int
    avatar: Optional[str] = None


@dataclass(frozen=True)
class NewsItem:
    """Ranked influencer post presented as a news item"""
    id: str
    title: str
    content: str
    source: str
    date: str
    url: str
    sentiment: str  # positive / negative / neutral
    engagement_score: float
    engagement: TweetEngagement
    author: NewsAuthor
    url_to_image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "source": self.source,
            "date": self.date,
            "url": self.url,
            "sentiment": self.sentiment,
            "engagement_score": self.engagement_score,
            "engagement": self.engagement.to_dict(),
            "author": {
                "name": self.author.name,
                "username": self.author.username,
                "followers": self.author.followers,
                "avatar": self.author.avatar,
            },
            "url_to_image": self.url_to_image,
        }


__all__ = [
    'SocialMetricPoint', 'HorizonMetric', 'PricePrediction', 'CoinRecord',
    'TweetEngagement', 'InfluencerMention', 'TwitterMetrics',
    'NewsAuthor', 'NewsItem',
]
