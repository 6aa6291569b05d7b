"""
Utility Helper Functions for the Meme-Coin Metrics Engine
Core utilities for retries, numeric sanitization and TTL caching
"""

import asyncio
import logging
import math
import threading
import time
from functools import wraps
from typing import Any, Awaitable, Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

from .constants import MAX_RETRIES, RETRY_DELAY_SECONDS, CACHE_TTL_SECONDS
from .errors import RateLimitedError, UpstreamError

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

# ============= Retry =============

async def call_with_retry(
    func: Callable[..., Awaitable[Any]],
    *args,
    max_retries: int = MAX_RETRIES,
    delay: float = RETRY_DELAY_SECONDS,
    exponential_backoff: bool = False,
    **kwargs
) -> Any:
    """
    Await ``func`` up to ``max_retries`` times.

    The wait before attempt k (k >= 2) is ``delay * (k - 1)``, or
    ``delay * 2 ** (k - 2)`` with exponential backoff. There is no wait after
    the final attempt; its error is raised as ``UpstreamError``.
    ``RateLimitedError`` is never retried and propagates unchanged.
    """
    last_exception: Optional[BaseException] = None
    for attempt in range(1, max_retries + 1):
        try:
            return await func(*args, **kwargs)
        except RateLimitedError:
            raise
        except Exception as e:
            last_exception = e
            if attempt == max_retries:
                break
            wait_time = delay * (2 ** (attempt - 1)) if exponential_backoff else delay * attempt
            logger.warning(f"Attempt {attempt} failed: {e}. Retrying in {wait_time}s...")
            await asyncio.sleep(wait_time)

    name = getattr(func, "__name__", repr(func))
    raise UpstreamError(
        f"{name} failed after {max_retries} attempts: {last_exception}",
        cause=last_exception,
    ) from last_exception


def retry_async(max_retries: int = MAX_RETRIES, delay: float = RETRY_DELAY_SECONDS,
                exponential_backoff: bool = False):
    """Async retry decorator with linear backoff"""
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            return await call_with_retry(
                func, *args,
                max_retries=max_retries,
                delay=delay,
                exponential_backoff=exponential_backoff,
                **kwargs
            )
        return wrapper
    return decorator


def measure_time(func):
    """Measure execution time decorator"""
    @wraps(func)
    async def async_wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start
            logger.debug(f"{func.__name__} took {elapsed:.4f} seconds")

    @wraps(func)
    def sync_wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start
            logger.debug(f"{func.__name__} took {elapsed:.4f} seconds")

    return async_wrapper if asyncio.iscoroutinefunction(func) else sync_wrapper

# ============= Numeric Utilities =============

def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves away from zero for positives (Math.round semantics)"""
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def to_finite_float(value: Any, default: float = 0.0) -> float:
    """Coerce a loosely-typed upstream value to a finite float"""
    if isinstance(value, bool) or value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]"""
    return min(upper, max(lower, value))

# ============= Data Sanitization =============

def sanitize_value(value: Any) -> Any:
    """
    Make a decoded payload losslessly JSON-serializable.

    Missing values become ``None``, non-finite numbers become ``0``,
    containers are walked recursively and anything that is not a plain JSON
    scalar is stringified.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    if isinstance(value, (int, str)):
        return value
    if isinstance(value, dict):
        return {str(key): sanitize_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize_value(item) for item in value]
    return str(value)

# ============= Cache Utilities =============

class TTLCache(Generic[K, V]):
    """
    Keyed cache with a fixed time-to-live.

    Expired entries read as a miss but stay in place until overwritten.
    There is no background sweep. ``max_size`` is optional; when set, the
    oldest entry is evicted on insert once the bound is reached.
    """

    def __init__(self, ttl: float = CACHE_TTL_SECONDS, max_size: Optional[int] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self.max_size = max_size
        self.clock = clock
        self.cache: Dict[K, V] = {}
        self.timestamps: Dict[K, float] = {}
        self._lock = threading.Lock()

    def get(self, key: K) -> Optional[V]:
        """Get value from cache if not expired"""
        with self._lock:
            if key in self.cache and self.clock() - self.timestamps[key] < self.ttl:
                return self.cache[key]
        return None

    def set(self, key: K, value: V) -> None:
        """Set value in cache"""
        with self._lock:
            if self.max_size is not None and key not in self.cache and len(self.cache) >= self.max_size:
                oldest = min(self.timestamps, key=self.timestamps.get)
                del self.cache[oldest]
                del self.timestamps[oldest]
            self.cache[key] = value
            self.timestamps[key] = self.clock()

    put = set

    def entry(self, key: K) -> Optional[Tuple[V, float]]:
        """Raw (value, created_at) pair, ignoring expiry"""
        with self._lock:
            if key not in self.cache:
                return None
            return self.cache[key], self.timestamps[key]

    def clear(self) -> None:
        """Clear all cache"""
        with self._lock:
            self.cache.clear()
            self.timestamps.clear()

    def __contains__(self, key: object) -> bool:
        return key in self.cache

    def __len__(self) -> int:
        return len(self.cache)

# ============= Export All Utilities =============

__all__ = [
    # Retry
    'call_with_retry', 'retry_async', 'measure_time',

    # Numeric
    'round_half_up', 'to_finite_float', 'clamp',

    # Sanitization
    'sanitize_value',

    # Cache
    'TTLCache',
]
