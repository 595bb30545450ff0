# src/cache/models.py - v3
"""Cache domain models: CacheEntry and the lookup cache key."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from catalogref.core.models import IdentifierType, LookupResult


class CacheEntry(BaseModel):
    """A cached lookup outcome. Replaced on write, never mutated."""

    model_config = ConfigDict(frozen=True)

    result: LookupResult
    created_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now > self.created_at + self.ttl


def lookup_cache_key(identifier: str, explicit_type: IdentifierType | None, limit: int) -> str:
    """Key for (identifier, explicit type or "auto", limit)."""
    return f"lookup:{identifier}:{explicit_type or 'auto'}:{limit}"
