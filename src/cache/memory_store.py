# src/cache/memory_store.py - v1
"""In-process TTL cache for lookup results (CACHE_BACKEND=memory).

Expiry is lazy: an entry past its ttl is deleted when read. Once the map
holds more than ``max_entries`` a write triggers one sweep of expired
entries. There is no LRU eviction, so the map may stay above the bound
while every entry is still fresh.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from catalogref.cache.base_cache_store import BaseCacheStore
from catalogref.cache.models import CacheEntry
from catalogref.core.models import LookupResult

logger = logging.getLogger(__name__)


class MemoryCacheStore(BaseCacheStore):
    """Dict-backed cache. Single event loop, no locking."""

    def __init__(
        self,
        ttl_seconds: float = 60.0,
        max_entries: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if max_entries <= 0:
            raise ValueError("max_entries must be > 0")
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    async def get(self, key: str) -> LookupResult | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            logger.debug("Cache entry expired: %s", key)
            return None
        return entry.result.model_copy(deep=True)

    async def set(self, key: str, result: LookupResult) -> None:
        self._entries[key] = CacheEntry(
            result=result.model_copy(deep=True),
            created_at=self._clock(),
            ttl=self._ttl,
        )
        if len(self._entries) > self._max_entries:
            await self.sweep()

    async def sweep(self) -> int:
        now = self._clock()
        expired = [k for k, e in self._entries.items() if e.is_expired(now)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Cache sweep removed %d expired entr(ies)", len(expired))
        return len(expired)

    async def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
