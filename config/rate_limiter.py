"""
Upstream Source Rate Limiter

Tracks a sliding window of call timestamps per upstream source and answers
"may I call now?". It never blocks or queues: a denied caller is expected to
fall back to synthetic data.

One instance is owned by the engine and shared by every collector it builds,
so isolated engines (e.g. in tests) never see each other's windows.
"""
import logging
import threading
import time
from collections import defaultdict
from typing import Callable, Dict, List, Optional, Tuple

from utils.constants import API_RATE_LIMITS

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Sliding-window rate limiter keyed by source id.

    Features:
    - Per-source (max_calls, window_seconds) limits
    - Windows pruned lazily on every check
    - Lock around each mutation for multi-threaded callers
    """

    def __init__(
        self,
        limits: Optional[Dict[str, Tuple[int, float]]] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        if limits is None:
            limits = {
                source: (cfg["calls"], cfg["period"])
                for source, cfg in API_RATE_LIMITS.items()
            }
        self.limits = dict(limits)
        self.clock = clock
        self._windows: Dict[str, List[float]] = defaultdict(list)
        self._lock = threading.Lock()

        # Statistics for monitoring
        self._total_calls: Dict[str, int] = defaultdict(int)
        self._total_denied: Dict[str, int] = defaultdict(int)

        logger.debug(f"Rate limiter initialized: {self.limits}")

    def _prune(self, source_id: str, now: float) -> List[float]:
        """Drop timestamps that fell out of the trailing window."""
        _, window = self.limits[source_id]
        calls = [t for t in self._windows[source_id] if now - t < window]
        self._windows[source_id] = calls
        return calls

    def allow(self, source_id: str) -> bool:
        """
        Check whether another call to ``source_id`` fits in its window.

        Args:
            source_id: Upstream source identifier (e.g. "twitter")

        Returns:
            True if the caller may issue a request now
        """
        if source_id not in self.limits:
            return True

        with self._lock:
            max_calls, _ = self.limits[source_id]
            calls = self._prune(source_id, self.clock())
            allowed = len(calls) < max_calls
            if not allowed:
                self._total_denied[source_id] += 1

        if not allowed:
            logger.warning(f"Rate limit reached for {source_id} ({max_calls} calls in window)")
        return allowed

    def record_call(self, source_id: str) -> None:
        """Record one attempted call; successful or not."""
        with self._lock:
            self._total_calls[source_id] += 1
            # Unlimited sources are counted but keep no window
            if source_id in self.limits:
                self._windows[source_id].append(self.clock())

    def remaining(self, source_id: str) -> Optional[int]:
        """Calls left in the current window, None for unlimited sources."""
        if source_id not in self.limits:
            return None
        with self._lock:
            max_calls, _ = self.limits[source_id]
            return max(0, max_calls - len(self._prune(source_id, self.clock())))

    def stats(self) -> Dict[str, Dict[str, int]]:
        """Per-source call and denial counters."""
        with self._lock:
            return {
                source: {
                    "total_calls": self._total_calls[source],
                    "denied": self._total_denied[source],
                    "in_window": len(self._windows.get(source, [])),
                }
                for source in set(self.limits) | set(self._total_calls)
            }
