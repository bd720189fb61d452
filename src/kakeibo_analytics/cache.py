"""Time-boxed memoization cache for analytics results.

Entries live for a fixed time-to-live measured from ``set``. Expired entries
are evicted lazily, on the next ``get`` of their key. There is no capacity
bound and no LRU policy.

The cache is an ordinary object: whoever needs one constructs it and passes
it to the components that share it. The clock is injectable so expiry can
be tested without sleeping.
"""

import threading
import time
from collections.abc import Callable
from typing import Any, Optional, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 60 * 60


class AnalyticsCache:
    """In-memory key/value cache with per-entry expiry.

    Args:
        ttl_seconds: Lifetime of an entry, counted from when it was stored.
        clock: Callable returning the current time in seconds. Defaults to
            ``time.monotonic``.

    Example:
        cache = AnalyticsCache(ttl_seconds=600)
        report = cache.get_or_compute("analysis-2024-09-no-budget", compute)
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()
        # One lock per key, held while that key is computed; never removed.
        self._key_locks: dict[str, threading.Lock] = {}

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, restarting its lifetime."""
        with self._lock:
            self._entries[key] = (value, self._clock())

    def get(self, key: str) -> Optional[Any]:
        """Return the live value for ``key``, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            value, stored_at = entry
            if self._clock() - stored_at > self.ttl_seconds:
                del self._entries[key]
                logger.debug("cache_evicted", key=key)
                return None
            return value

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def get_or_compute(self, key: str, compute: Callable[[], T]) -> T:
        """Return the cached value for ``key``, computing and storing it on a miss.

        ``compute`` runs at most once per miss; concurrent callers asking for
        the same key wait for the first computation instead of repeating it.
        Callers asking for other keys are not held up.
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        with self._lock:
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            cached = self.get(key)
            if cached is not None:
                return cached
            value = compute()
            self.set(key, value)
            return value

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
