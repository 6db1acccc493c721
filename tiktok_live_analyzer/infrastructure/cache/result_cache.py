"""In-memory TTL cache for upstream page resolutions."""

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from cachetools import LRUCache

from ...domain.ports.stores import CacheLookup, ResultCachePort

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 6 * 60 * 60
DEFAULT_MAXSIZE = 1000


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Cached value and the time it was fetched."""
    value: T
    fetched_at: float


class TTLResultCache(ResultCachePort[T]):
    """Key to result cache with a fixed freshness window.

    Stale entries are not purged; they are reported as stale and replaced on
    the next ``put``. Entries and per-key locks are both bounded by
    least-recently-used eviction.
    Not durable across restarts.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        maxsize: int = DEFAULT_MAXSIZE,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            ttl_seconds: Freshness window in seconds
            maxsize: Maximum number of retained keys
            clock: Time source in seconds, injectable for tests
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: LRUCache = LRUCache(maxsize=maxsize)
        self._mutex = threading.Lock()
        # Locks are bounded like the entries; a key evicted here gets a fresh lock
        self._key_locks: LRUCache = LRUCache(maxsize=maxsize)

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> Optional[CacheLookup[T]]:
        with self._mutex:
            entry: Optional[CacheEntry[T]] = self._entries.get(key)
        if entry is None:
            return None
        is_fresh = (self._clock() - entry.fetched_at) < self._ttl
        return CacheLookup(value=entry.value, is_fresh=is_fresh)

    def put(self, key: str, value: T) -> None:
        entry = CacheEntry(value=value, fetched_at=self._clock())
        with self._mutex:
            self._entries[key] = entry

    def lock_for(self, key: str) -> asyncio.Lock:
        with self._mutex:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = asyncio.Lock()
                self._key_locks[key] = lock
            return lock

    def lock_count(self) -> int:
        """Number of per-key locks currently retained."""
        with self._mutex:
            return len(self._key_locks)

    def clear(self) -> None:
        """Drop every entry."""
        with self._mutex:
            self._entries.clear()
        logger.info("🧹 Result cache cleared")

    def __len__(self) -> int:
        with self._mutex:
            return len(self._entries)
