# src/repository/base_repository.py - v1
"""Abstract product repository interface.

The lookup engine and the hydrators only talk to this interface. Adapters
raise RepositoryError for transport or API failures; "not found" is a
normal None / omitted result, never an exception.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from catalogref.core.models import Record
from catalogref.repository.models import FilterGroups, Pagination


class RepositoryError(Exception):
    """A repository call failed (transport error, bad status, bad payload)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class BaseProductRepository(ABC):
    """Read-only access to catalog product records."""

    @abstractmethod
    async def search_by_criteria(
        self,
        filter_groups: FilterGroups,
        attributes: list[str],
        pagination: Pagination,
    ) -> list[Record]:
        """Records matching any group (all conditions of that group), one page."""

    @abstractmethod
    async def get_by_id(self, product_id: str) -> Record | None:
        """Full record by internal ID, or None."""

    @abstractmethod
    async def get_by_ids(self, product_ids: list[str]) -> list[Record]:
        """Records for unique IDs; unresolvable IDs are silently omitted."""

    @abstractmethod
    async def get_by_sku(self, sku: str) -> Record | None:
        """Record whose ``sku`` equals the value, or None."""

    @abstractmethod
    async def get_by_skus(self, skus: list[str]) -> list[Record]:
        """Records for unique SKUs; unknown SKUs are silently omitted."""

    async def aclose(self) -> None:
        """Release resources held by the adapter."""
