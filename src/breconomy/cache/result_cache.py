"""Expiring key-value cache for serialized indicator snapshots.

ResultCache is the contract the refresh jobs and read endpoints depend on.
MemoryResultCache is the in-process implementation: async-safe via
asyncio.Lock, with per-entry absolute expiration.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import timedelta

from breconomy.logging import get_logger

logger = get_logger(__name__)


class ResultCache(ABC):
    """Abstract expiring byte cache.

    Backends raise CacheError when they cannot be reached; callers treat that
    as a miss on read and as a skipped write on set.
    """

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Return the live value for ``key`` or None on miss/expiry."""
        ...

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl: timedelta) -> None:
        """Store ``value`` under ``key``, expiring after ``ttl``."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        ...

    @abstractmethod
    async def ping(self) -> None:
        """Raise CacheError if the cache is unreachable."""
        ...


class MemoryResultCache(ResultCache):
    """Shared in-memory cache with lazy expiry.

    Stores (value, expires_at) per key. Expired entries are dropped when
    read or during a sweep on write. Same-key races are last-write-wins.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: dict[str, tuple[bytes, float]] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    async def get(self, key: str) -> bytes | None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    async def set(self, key: str, value: bytes, ttl: timedelta) -> None:
        seconds = ttl.total_seconds()
        if seconds <= 0:
            raise ValueError(f"cache ttl must be positive, got {ttl}")
        async with self._lock:
            now = self._clock()
            self._sweep(now)
            self._entries[key] = (value, now + seconds)

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    async def ping(self) -> None:
        # in-process, so reachable whenever the lock can be taken
        async with self._lock:
            pass

    def _sweep(self, now: float) -> None:
        expired = [k for k, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("cache_entries_expired", count=len(expired))
