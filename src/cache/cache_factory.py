# src/cache/cache_factory.py - v3
"""Factory for lookup cache instantiation."""

from __future__ import annotations

from collections.abc import Callable

from catalogref.cache.base_cache_store import BaseCacheStore
from catalogref.config.models import LookupConfig


def create_cache_store(
    config: LookupConfig | None = None,
    clock: Callable[[], float] | None = None,
) -> BaseCacheStore:
    """Instantiate the cache described by the lookup configuration.

    Args:
        config: Lookup configuration. Defaults to an enabled 60s cache.
        clock: Monotonic clock override (tests).

    Returns:
        MemoryCacheStore when caching is enabled, NullCacheStore otherwise.
    """
    config = config or LookupConfig()

    if not config.cache_enabled:
        from catalogref.cache.null_store import NullCacheStore
        return NullCacheStore()

    from catalogref.cache.memory_store import MemoryCacheStore
    if clock is None:
        return MemoryCacheStore(
            ttl_seconds=config.cache_ttl_seconds,
            max_entries=config.cache_max_entries,
        )
    return MemoryCacheStore(
        ttl_seconds=config.cache_ttl_seconds,
        max_entries=config.cache_max_entries,
        clock=clock,
    )
