# tests/fixtures/mock_data.py
"""
Mock data generators for testing
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
import random
import string


class MockDataGenerator:
    """Generate mock upstream payloads for testing"""

    @staticmethod
    def generate_market_row(
        coin_id: Optional[str] = None,
        price: float = None,
        change_24h: float = None
    ) -> Dict:
        """Generate one CoinGecko /coins/markets row"""
        if coin_id is None:
            coin_id = "".join(random.choices(string.ascii_lowercase, k=8))
        symbol = coin_id[:4]

        return {
            "id": coin_id,
            "symbol": symbol,
            "name": coin_id.capitalize(),
            "image": f"https://assets.coingecko.com/coins/images/1/large/{coin_id}.png",
            "current_price": price if price is not None else random.uniform(0.00001, 2),
            "market_cap": random.randint(1_000_000, 10_000_000_000),
            "price_change_percentage_24h": (
                change_24h if change_24h is not None else random.uniform(-25, 25)
            ),
        }

    @staticmethod
    def generate_market_page(count: int = 20) -> List[Dict]:
        """Generate a page of market rows with unique ids"""
        return [
            MockDataGenerator.generate_market_row(coin_id=f"memecoin-{i}")
            for i in range(count)
        ]

    @staticmethod
    def generate_twitter_search(
        tweet_count: int = 3,
        base_likes: int = 500
    ) -> Dict:
        """Generate a Twitter recent-search payload with author expansion"""
        created = datetime.now(timezone.utc)
        tweets = []
        users = []

        for i in range(tweet_count):
            user_id = str(1000 + i)
            tweets.append({
                "id": str(9000 + i),
                "text": f"Tweet {i} about $DOGE",
                "author_id": user_id,
                "created_at": (created - timedelta(minutes=i)).isoformat(),
                "public_metrics": {
                    "like_count": base_likes * (i + 1),
                    "retweet_count": 10 * (i + 1),
                    "reply_count": 5 * (i + 1),
                    "quote_count": 0,
                },
            })
            users.append({
                "id": user_id,
                "name": f"Influencer {i}",
                "username": f"influencer{i}",
                "public_metrics": {"followers_count": 10000 * (i + 1)},
            })

        return {
            "data": tweets,
            "includes": {"users": users},
            "meta": {"result_count": tweet_count},
        }


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
