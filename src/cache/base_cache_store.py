# src/cache/base_cache_store.py - v2
"""Abstract result cache interface.

The lookup engine receives a store explicitly; tests swap in a no-op store
or a memory store driven by a fake clock.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from catalogref.core.models import LookupResult


class BaseCacheStore(ABC):
    """Unified interface for lookup result caches."""

    @abstractmethod
    async def get(self, key: str) -> LookupResult | None:
        """Cached result, or None when absent or expired."""

    @abstractmethod
    async def set(self, key: str, result: LookupResult) -> None:
        """Insert or replace the entry for ``key``."""

    @abstractmethod
    async def sweep(self) -> int:
        """Drop every expired entry. Returns how many were removed."""

    @abstractmethod
    async def clear(self) -> None:
        """Drop every entry."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of stored entries, expired ones included."""
