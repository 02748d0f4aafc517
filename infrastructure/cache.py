"""In-memory TTL cache owned by its caller.

Replaces process-wide "last fetched at" globals with an explicit object:
whoever needs caching creates a ``TTLCache``, chooses the TTL, and can
inject a clock. Tests get an isolated cache and control time without
sleeping.

Usage::

    from infrastructure.cache import TTLCache

    cache: TTLCache[CatalogSnapshot] = TTLCache(ttl_seconds=300)
    snapshot = cache.get_or_load("catalog", lambda: load_catalog_file(path))
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from threading import Lock
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

# Five minutes: the storefront revalidated catalog data on the same cadence.
_DEFAULT_TTL_SECONDS = 300.0
_DEFAULT_MAX_SIZE = 128


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """Cached value with the clock reading at which it was stored."""

    value: V
    stored_at: float


class TTLCache(Generic[V]):
    """
    Thread-safe cache with TTL expiry and LRU eviction.

    Args:
        ttl_seconds: Time-to-live per entry (default: 300 = 5 minutes).
        max_size: Maximum number of entries before LRU eviction (default: 128).
        clock: Zero-argument callable returning seconds. Defaults to
            ``time.monotonic``; tests pass a fake.
    """

    def __init__(
        self,
        ttl_seconds: float = _DEFAULT_TTL_SECONDS,
        max_size: int = _DEFAULT_MAX_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty cache."""
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self._clock = clock
        self._entries: OrderedDict[Hashable, CacheEntry[V]] = OrderedDict()
        self._lock = Lock()
        self.hits = 0
        self.misses = 0

    def _expired(self, entry: CacheEntry[V]) -> bool:
        return self._clock() - entry.stored_at >= self.ttl_seconds

    def get(self, key: Hashable) -> V | None:
        """
        Return the cached value, or None if absent or expired.

        Expired entries are removed on access.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            if self._expired(entry):
                del self._entries[key]
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
        logger.debug("TTLCache HIT: %s", key)
        return entry.value

    def put(self, key: Hashable, value: V) -> None:
        """Store a value, evicting the least recently used entry if full."""
        with self._lock:
            if len(self._entries) >= self.max_size and key not in self._entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("TTLCache evicted LRU entry: %s", evicted)
            self._entries[key] = CacheEntry(value=value, stored_at=self._clock())
            self._entries.move_to_end(key)

    def get_or_load(self, key: Hashable, loader: Callable[[], V]) -> V:
        """Return the cached value or call ``loader`` and cache its result.

        Exceptions from ``loader`` propagate and nothing is cached.
        """
        cached = self.get(key)
        if cached is not None:
            return cached
        value = loader()
        self.put(key, value)
        return value

    def invalidate(self, key: Hashable) -> bool:
        """Drop one entry. Returns True if it was present."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def evict_expired(self) -> int:
        """Remove every expired entry and return how many were removed."""
        with self._lock:
            expired = [key for key, entry in self._entries.items() if self._expired(entry)]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def stats(self) -> dict[str, Any]:
        """Return basic cache statistics.

        Returns:
            Dict with keys: entries, hits, misses, ttl_seconds.
        """
        with self._lock:
            return {
                "entries": len(self._entries),
                "hits": self.hits,
                "misses": self.misses,
                "ttl_seconds": self.ttl_seconds,
            }
