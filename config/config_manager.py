"""
Configuration Manager for the Meme-Coin Metrics Engine
Schema-validated configuration merged from defaults, a YAML file and the environment
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Union

import os
import logging
from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from utils import constants
from utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


class ConfigType(Enum):
    """Configuration sections"""
    MARKET_DATA = "market_data"
    RETRY = "retry"
    CACHE = "cache"
    RATE_LIMIT = "rate_limit"
    TWITTER = "twitter"
    LOGGING = "logging"


class MarketDataConfig(BaseModel):
    """CoinGecko market data source"""
    base_url: str = constants.COINGECKO_API_URL
    api_key: Optional[SecretStr] = None
    vs_currency: str = "usd"
    category: str = constants.MEME_CATEGORY
    order: str = "market_cap_desc"
    request_timeout: float = constants.REQUEST_TIMEOUT_SECONDS
    default_page_size: int = constants.DEFAULT_PAGE_SIZE
    predictions_page_size: int = constants.PREDICTIONS_PAGE_SIZE

    @field_validator('default_page_size', 'predictions_page_size')
    @classmethod
    def validate_page_size(cls, v):
        if v <= 0:
            raise ValueError('page size must be positive')
        return v


class RetryConfig(BaseModel):
    max_retries: int = Field(default=constants.MAX_RETRIES, ge=1)
    base_delay: float = Field(default=constants.RETRY_DELAY_SECONDS, ge=0)
    exponential_backoff: bool = False

    def as_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``retry_async``"""
        return {
            "max_retries": self.max_retries,
            "delay": self.base_delay,
            "exponential_backoff": self.exponential_backoff,
        }


class CacheConfig(BaseModel):
    ttl_seconds: float = Field(default=constants.CACHE_TTL_SECONDS, gt=0)
    max_size: Optional[int] = Field(default=None, gt=0)


class RateLimitConfig(BaseModel):
    """Per-source sliding windows"""
    twitter_max_calls: int = Field(default=constants.API_RATE_LIMITS["twitter"]["calls"], gt=0)
    twitter_window_seconds: float = Field(default=constants.API_RATE_LIMITS["twitter"]["period"], gt=0)

    def as_limits(self) -> Dict[str, tuple]:
        return {"twitter": (self.twitter_max_calls, self.twitter_window_seconds)}


class TwitterConfig(BaseModel):
    """Influencer/news source; api_url may be a proxy that injects credentials"""
    api_url: str = constants.TWITTER_API_URL
    bearer_token: Optional[SecretStr] = None
    proxy_injects_credentials: bool = False
    max_results: int = Field(default=100, ge=10, le=100)
    request_timeout: float = constants.REQUEST_TIMEOUT_SECONDS

    @property
    def has_credentials(self) -> bool:
        if self.proxy_injects_credentials:
            return True
        return bool(self.bearer_token and self.bearer_token.get_secret_value())


class LoggingConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "text"
    log_dir: str = "logs"
    outputs: List[str] = Field(default_factory=lambda: ["console"])
    max_file_size: int = 10 * 1024 * 1024
    backup_count: int = 5

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        level = str(v).upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'invalid log level: {v}')
        return level

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        if v not in ('text', 'json'):
            raise ValueError('log_format must be "text" or "json"')
        return v


class EngineConfig(BaseModel):
    """Root configuration for MemeCoinEngine"""
    market_data: MarketDataConfig = Field(default_factory=MarketDataConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    twitter: TwitterConfig = Field(default_factory=TwitterConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# Environment variable -> (section, field)
ENV_OVERRIDES = {
    'COINGECKO_API_URL': (ConfigType.MARKET_DATA, 'base_url'),
    'COINGECKO_API_KEY': (ConfigType.MARKET_DATA, 'api_key'),
    'REQUEST_TIMEOUT': (ConfigType.MARKET_DATA, 'request_timeout'),
    'MAX_RETRIES': (ConfigType.RETRY, 'max_retries'),
    'RETRY_DELAY': (ConfigType.RETRY, 'base_delay'),
    'CACHE_TTL': (ConfigType.CACHE, 'ttl_seconds'),
    'CACHE_MAX_SIZE': (ConfigType.CACHE, 'max_size'),
    'TWITTER_RATE_LIMIT': (ConfigType.RATE_LIMIT, 'twitter_max_calls'),
    'TWITTER_RATE_WINDOW': (ConfigType.RATE_LIMIT, 'twitter_window_seconds'),
    'TWITTER_API_URL': (ConfigType.TWITTER, 'api_url'),
    'TWITTER_BEARER_TOKEN': (ConfigType.TWITTER, 'bearer_token'),
    'TWITTER_PROXY_INJECTS_CREDENTIALS': (ConfigType.TWITTER, 'proxy_injects_credentials'),
    'LOG_LEVEL': (ConfigType.LOGGING, 'log_level'),
    'LOG_FORMAT': (ConfigType.LOGGING, 'log_format'),
    'LOG_DIR': (ConfigType.LOGGING, 'log_dir'),
}


class ConfigManager:
    """
    Centralized configuration management with:
    - Schema validation using Pydantic
    - Optional YAML configuration file
    - Environment variable override
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None,
                 environ: Optional[Dict[str, str]] = None):
        self.config_path = Path(config_path) if config_path else None
        self.environ = os.environ if environ is None else environ
        self.config: Optional[EngineConfig] = None

    def load(self) -> EngineConfig:
        """Load, merge and validate configuration"""
        raw: Dict[str, Dict[str, Any]] = {}

        if self.config_path:
            raw = self._load_file(self.config_path)

        for section, values in self._load_environment_config().items():
            raw.setdefault(section, {}).update(values)

        try:
            self.config = EngineConfig(**raw)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        logger.info(f"Configuration loaded (file={self.config_path or 'none'})")
        return self.config

    def _load_file(self, path: Path) -> Dict[str, Dict[str, Any]]:
        """Read a YAML configuration file"""
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {path}")

        known = {config_type.value for config_type in ConfigType}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown configuration sections: {sorted(unknown)}")
        return {key: dict(value or {}) for key, value in data.items() if key in known}

    def _load_environment_config(self) -> Dict[str, Dict[str, Any]]:
        """Collect overrides from environment variables"""
        env_config: Dict[str, Dict[str, Any]] = {}
        for var, (config_type, field) in ENV_OVERRIDES.items():
            value = self.environ.get(var)
            if value is None or value in ('', 'null', 'None'):
                continue
            if field == 'proxy_injects_credentials':
                value = value.lower() in ('1', 'true', 'yes')
            env_config.setdefault(config_type.value, {})[field] = value
        return env_config
