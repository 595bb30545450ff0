# src/cache/null_store.py - v1
"""No-op cache (CACHE_ENABLED=false or CACHE_BACKEND=none)."""

from __future__ import annotations

from catalogref.cache.base_cache_store import BaseCacheStore
from catalogref.core.models import LookupResult


class NullCacheStore(BaseCacheStore):
    """Never stores anything; every read is a miss."""

    async def get(self, key: str) -> LookupResult | None:
        return None

    async def set(self, key: str, result: LookupResult) -> None:
        return None

    async def sweep(self) -> int:
        return 0

    async def clear(self) -> None:
        return None

    def __len__(self) -> int:
        return 0
