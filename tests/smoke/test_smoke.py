# tests/smoke/test_smoke.py
"""
Smoke tests for quick validation of core functionality
"""
import logging
import pytest
from unittest.mock import AsyncMock, MagicMock

import orjson

from config.config_manager import EngineConfig
from core.engine import EngineState, MemeCoinEngine
from utils.constants import Horizon, RiskLevel
from tests.fixtures.mock_data import MockDataGenerator
import main


@pytest.mark.smoke
class TestSmoke:
    """Quick validation tests"""

    @pytest.mark.asyncio
    async def test_engine_construction(self, engine):
        assert engine.state == EngineState.CREATED
        assert engine.market_cache is not engine.social_cache
        assert engine.twitter_collector.rate_limiter is engine.rate_limiter
        assert engine.aggregator.synthesizer is engine.synthesizer

    def test_engines_are_isolated(self):
        first, second = MemeCoinEngine(), MemeCoinEngine()
        first.market_cache.set("k", 1)
        first.rate_limiter.record_call("twitter")

        assert second.market_cache.get("k") is None
        assert second.rate_limiter.remaining("twitter") == 450

    @pytest.mark.asyncio
    async def test_listing_and_predictions(self, engine):
        engine.market_collector.fetch_markets = AsyncMock(
            return_value=MockDataGenerator.generate_market_page(20)
        )

        coins, has_more = await engine.list_page(1)
        assert len(coins) == 20
        assert has_more is True

        annotated = await engine.list_all_for_predictions()
        assert all(set(coin.predictions) == {"7d", "30d", "90d"} for coin in annotated)

        ranked = await engine.top_predictions(Horizon.D30, limit=3)
        assert len(ranked) <= 3
        changes = [prediction.predicted_change for _, prediction in ranked]
        assert changes == sorted(changes, reverse=True)

        high = await engine.top_predictions("7d", RiskLevel.HIGH)
        assert all(prediction.risk_level == RiskLevel.HIGH for _, prediction in high)

        stats = engine.stats()
        assert stats["caches"]["market"] == 2

    @pytest.mark.asyncio
    async def test_news_and_metrics_without_credentials(self, engine):
        news = await engine.ranked_news("dogecoin")
        assert len(news) == 2

        twitter = await engine.twitter_metrics("DOGE")
        assert twitter.synthetic is True

        series = await engine.social_metrics("dogecoin", "24h")
        assert len(series) == 2

    @pytest.mark.asyncio
    async def test_context_manager_keeps_injected_session(self):
        session = MagicMock()
        session.close = AsyncMock()

        async with MemeCoinEngine(EngineConfig(), session=session) as engine:
            assert engine.state == EngineState.RUNNING
            assert engine.market_collector.session is session

        assert engine.state == EngineState.CLOSED
        session.close.assert_not_awaited()

    def test_cli_metrics_command(self, capsys):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            exit_code = main.main(["metrics", "pepe", "--horizon", "7d"])
        finally:
            root.handlers = saved_handlers
            root.setLevel(saved_level)

        assert exit_code == 0
        output = orjson.loads(capsys.readouterr().out)
        assert output["horizon"] == "7d"
        assert len(output["series"]) == 8

    @pytest.mark.asyncio
    async def test_close_releases_lazily_created_sessions(self, monkeypatch):
        sessions = []

        def fake_session(*args, **kwargs):
            session = MagicMock()
            session.close = AsyncMock()
            sessions.append(session)
            return session

        monkeypatch.setattr("aiohttp.ClientSession", fake_session)
        engine = MemeCoinEngine(EngineConfig())
        await engine.market_collector.initialize()
        await engine.twitter_collector.initialize()

        await engine.close()

        assert len(sessions) == 2
        for session in sessions:
            session.close.assert_awaited_once()
        assert engine.market_collector.session is None
        assert engine.twitter_collector.session is None
        assert engine.state == EngineState.CLOSED

    def test_cli_reads_dotenv_from_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("ENGINE_CONFIG_FILE=/nonexistent/engine.yaml\n")
        monkeypatch.chdir(tmp_path)
        # Registers the variable so whatever .env loads is undone after the test
        monkeypatch.setenv("ENGINE_CONFIG_FILE", "unused")
        monkeypatch.delenv("ENGINE_CONFIG_FILE")

        assert main.main(["metrics", "pepe"]) == 1

    def test_cli_debug_forces_debug_logging(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            exit_code = main.main(["metrics", "pepe"])
            level = root.level
        finally:
            root.handlers = saved_handlers
            root.setLevel(saved_level)

        assert exit_code == 0
        assert level == logging.DEBUG
