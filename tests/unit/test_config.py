# tests/unit/test_config.py
"""
Unit tests for ConfigManager and logging setup
"""
import logging
import pytest

from config.config_manager import ConfigManager, EngineConfig, LoggingConfig
from config.settings import Settings
from utils.errors import ConfigurationError
from monitoring.logger import JsonFormatter, StructuredLogger


@pytest.mark.unit
class TestConfigManager:
    """Test cases for configuration loading"""

    def test_defaults(self):
        config = ConfigManager(environ={}).load()

        assert config.cache.ttl_seconds == 300
        assert config.cache.max_size is None
        assert config.retry.max_retries == 3
        assert config.rate_limit.as_limits() == {"twitter": (450, 900)}
        assert config.market_data.category == "meme-token"
        assert config.twitter.has_credentials is False

    def test_yaml_file_then_environment(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text(
            "cache:\n"
            "  ttl_seconds: 60\n"
            "retry:\n"
            "  max_retries: 5\n"
            "unknown_section:\n"
            "  foo: bar\n"
        )

        manager = ConfigManager(path, environ={"MAX_RETRIES": "2", "TWITTER_BEARER_TOKEN": "secret"})
        config = manager.load()

        assert config.cache.ttl_seconds == 60
        assert config.retry.max_retries == 2
        assert config.twitter.has_credentials is True
        assert "secret" not in repr(config.twitter)

    def test_proxy_flag_counts_as_credentials(self):
        config = ConfigManager(environ={"TWITTER_PROXY_INJECTS_CREDENTIALS": "true"}).load()
        assert config.twitter.has_credentials is True

    def test_invalid_values_raise(self):
        with pytest.raises(ConfigurationError):
            ConfigManager(environ={"CACHE_TTL": "-1"}).load()
        with pytest.raises(ConfigurationError):
            ConfigManager(environ={"LOG_LEVEL": "chatty"}).load()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ConfigManager(tmp_path / "absent.yaml", environ={}).load()

    def test_malformed_yaml_raises(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("cache: [unclosed\n")
        with pytest.raises(ConfigurationError):
            ConfigManager(path, environ={}).load()


@pytest.mark.unit
class TestStructuredLogger:

    def test_console_and_file_handlers(self, tmp_path):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            config = LoggingConfig(log_level="debug", log_format="json",
                                   log_dir=str(tmp_path), outputs=["console", "file"])
            StructuredLogger("engine_test", config).setup_logging()

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 3
            assert isinstance(root.handlers[1].formatter, JsonFormatter)
            assert (tmp_path / "engine_test.log").exists()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers = saved_handlers
            root.setLevel(saved_level)

    def test_engine_config_has_logging_section(self):
        assert EngineConfig().logging.outputs == ["console"]


@pytest.mark.unit
class TestSettings:

    def test_config_file_read_at_call_time(self, monkeypatch, tmp_path):
        path = tmp_path / "engine.yaml"
        monkeypatch.setenv("ENGINE_CONFIG_FILE", str(path))
        assert Settings.default_config_file() == path

        monkeypatch.delenv("ENGINE_CONFIG_FILE")
        default = Settings.CONFIG_DIR / "engine.yaml"
        assert Settings.default_config_file() == (default if default.exists() else None)

    def test_debug_flag(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "true")
        assert Settings.debug() is True
        monkeypatch.setenv("DEBUG", "false")
        assert Settings.debug() is False
