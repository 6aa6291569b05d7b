# tests/conftest.py
"""
Global pytest configuration and fixtures
"""
import pytest
import pytest_asyncio
from datetime import date
from unittest.mock import AsyncMock
import sys
from pathlib import Path

import numpy as np

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.config_manager import EngineConfig, RetryConfig
from config.rate_limiter import RateLimiter
from utils.helpers import TTLCache
from data.collectors.coingecko import CoinGeckoCollector
from data.collectors.social_signals import SocialSignalSynthesizer
from data.processors.aggregator import CoinAggregator
from core.engine import MemeCoinEngine
from tests.fixtures.mock_data import FakeClock, MockDataGenerator

FIXED_TODAY = date(2024, 3, 15)


@pytest.fixture
def clock():
    """Manually advanced clock shared by caches and limiters"""
    return FakeClock()


@pytest.fixture
def rng():
    """Seeded random source"""
    return np.random.default_rng(42)


@pytest.fixture
def synthesizer(clock, rng):
    return SocialSignalSynthesizer(TTLCache(clock=clock), rng=rng, today=lambda: FIXED_TODAY)


@pytest.fixture
def fast_retry():
    """Retry policy without sleeping"""
    return RetryConfig(max_retries=3, base_delay=0)


@pytest.fixture
def mock_collector():
    """Market collector whose fetch_markets is an AsyncMock"""
    collector = CoinGeckoCollector(retry=RetryConfig(max_retries=3, base_delay=0))
    collector.fetch_markets = AsyncMock(return_value=MockDataGenerator.generate_market_page(20))
    return collector


@pytest.fixture
def aggregator(mock_collector, synthesizer, clock):
    return CoinAggregator(mock_collector, synthesizer, cache=TTLCache(clock=clock))


@pytest.fixture
def rate_limiter(clock):
    return RateLimiter({"twitter": (3, 900)}, clock=clock)


@pytest_asyncio.fixture
async def engine(clock, rng):
    """Isolated engine with a seeded random source"""
    engine = MemeCoinEngine(EngineConfig(), rng=rng, clock=clock, today=lambda: FIXED_TODAY)
    yield engine
    await engine.close()


@pytest.fixture
def sample_market_rows():
    return MockDataGenerator.generate_market_page(20)


@pytest.fixture
def twitter_payload():
    return MockDataGenerator.generate_twitter_search()
