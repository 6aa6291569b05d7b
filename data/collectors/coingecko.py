"""
CoinGecko API Integration
Meme-token market rows with bounded retry and payload sanitization
"""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
from loguru import logger

from config.config_manager import MarketDataConfig, RetryConfig
from utils.errors import UpstreamError
from utils.helpers import measure_time, retry_async, sanitize_value


class CoinGeckoCollector:
    """CoinGecko market data collector"""

    def __init__(
        self,
        config: Optional[MarketDataConfig] = None,
        retry: Optional[RetryConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize CoinGecko collector

        Args:
            config: Market data source configuration
            retry: Retry policy applied to every request
            session: Shared HTTP session; one is created on initialize() if absent
        """
        self.config = config or MarketDataConfig()
        self.retry = retry or RetryConfig()
        self.base_url = self.config.base_url.rstrip('/')

        self.session = session
        self._owns_session = session is None

        self._request_with_retry = retry_async(**self.retry.as_kwargs())(self._make_request)

        # Statistics
        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
            'rows_fetched': 0,
        }

    async def initialize(self):
        """Initialize the collector"""
        if not self.session:
            timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)
            self.session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True

    async def close(self):
        """Close the collector"""
        if self.session and self._owns_session:
            await self.session.close()
            self.session = None

    def _headers(self) -> Dict[str, str]:
        headers = {'Accept': 'application/json'}
        if self.config.api_key:
            headers['x-cg-demo-api-key'] = self.config.api_key.get_secret_value()
        return headers

    async def _make_request(self, endpoint: str, params: Optional[Dict] = None) -> Any:
        """
        Single GET against the API; raises on transport errors and non-200 statuses

        Args:
            endpoint: API endpoint (without base URL)
            params: Query parameters
        """
        if self.session is None:
            await self.initialize()

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        self.stats['total_requests'] += 1

        try:
            async with self.session.get(url, params=params, headers=self._headers()) as response:
                if response.status != 200:
                    raise aiohttp.ClientResponseError(
                        response.request_info,
                        response.history,
                        status=response.status,
                        message=f"Unexpected status {response.status} from {url}",
                    )
                data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError):
            self.stats['failed_requests'] += 1
            raise

        self.stats['successful_requests'] += 1
        return data

    @measure_time
    async def fetch_markets(self, page: int = 1, per_page: int = 20) -> List[Dict[str, Any]]:
        """
        Fetch one page of meme-token market rows

        Args:
            page: 1-based page number
            per_page: Rows per page

        Returns:
            Sanitized rows ``{id, symbol, name, current_price, market_cap,
            price_change_percentage_24h, image}``

        Raises:
            UpstreamError: when every attempt failed or the payload is not a list
        """
        params = {
            'vs_currency': self.config.vs_currency,
            'category': self.config.category,
            'order': self.config.order,
            'per_page': per_page,
            'page': page,
            'sparkline': 'false',
        }

        data = await self._request_with_retry('coins/markets', params)
        rows = sanitize_value(data)

        if not isinstance(rows, list):
            raise UpstreamError(f"Unexpected markets payload type: {type(rows).__name__}")

        rows = [row for row in rows if isinstance(row, dict)]
        self.stats['rows_fetched'] += len(rows)
        logger.debug(f"Fetched {len(rows)} market rows (page={page}, per_page={per_page})")
        return rows
