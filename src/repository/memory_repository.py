# src/repository/memory_repository.py - v1
"""In-memory product repository (CATALOG_BACKEND=memory).

Evaluates the same filter model as the remote catalog over a list of
records held in memory. Used for local runs, fixtures and tests.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from typing import Any

from catalogref.core.models import Record
from catalogref.core.normalizer import tokenize
from catalogref.core.paths import MISSING, get_path
from catalogref.repository.base_repository import BaseProductRepository
from catalogref.repository.models import FilterCondition, FilterGroups, Pagination

logger = logging.getLogger(__name__)


class InMemoryProductRepository(BaseProductRepository):
    """Repository backed by a list of record dicts.

    Records are copied on the way in and on the way out. Every call is
    appended to ``calls`` as ``(method, argument)`` for inspection.
    """

    def __init__(self, records: Iterable[Record] = ()) -> None:
        self._records: list[Record] = []
        self.calls: list[tuple[str, Any]] = []
        for record in records:
            self.add(record)

    def add(self, record: Record) -> None:
        if not isinstance(record.get("id"), str):
            raise ValueError("Record must carry a string 'id'")
        self._records.append(copy.deepcopy(record))

    def __len__(self) -> int:
        return len(self._records)

    async def search_by_criteria(
        self,
        filter_groups: FilterGroups,
        attributes: list[str],
        pagination: Pagination,
    ) -> list[Record]:
        self.calls.append(("search_by_criteria", filter_groups))
        groups = [group for group in filter_groups if group]
        hits = [r for r in self._records if not groups or _matches_any(r, groups)]
        start = (pagination.page - 1) * pagination.page_size
        page = hits[start:start + pagination.page_size]
        logger.debug("Memory search: %d hit(s), returning %d", len(hits), len(page))
        return [copy.deepcopy(r) for r in page]

    async def get_by_id(self, product_id: str) -> Record | None:
        self.calls.append(("get_by_id", product_id))
        return self._find("id", product_id)

    async def get_by_ids(self, product_ids: list[str]) -> list[Record]:
        self.calls.append(("get_by_ids", list(product_ids)))
        return self._find_many("id", product_ids)

    async def get_by_sku(self, sku: str) -> Record | None:
        self.calls.append(("get_by_sku", sku))
        return self._find("sku", sku)

    async def get_by_skus(self, skus: list[str]) -> list[Record]:
        self.calls.append(("get_by_skus", list(skus)))
        return self._find_many("sku", skus)

    def count_calls(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    def _find(self, key: str, value: str) -> Record | None:
        for record in self._records:
            if record.get(key) == value:
                return copy.deepcopy(record)
        return None

    def _find_many(self, key: str, values: list[str]) -> list[Record]:
        found: list[Record] = []
        for value in dict.fromkeys(values):
            record = self._find(key, value)
            if record is not None:
                found.append(record)
        return found


def _matches_any(record: Record, groups: FilterGroups) -> bool:
    return any(all(_matches(record, cond) for cond in group) for group in groups)


def _matches(record: Record, cond: FilterCondition) -> bool:
    if cond.operator == "eq":
        value = get_path(record, cond.fields[0])
        return value is not MISSING and value == cond.value

    needle = str(cond.value).lower()
    if cond.operator == "like":
        text = _as_text(get_path(record, cond.fields[0]))
        return text is not None and needle in text.lower()

    # text_search: every query token appears in at least one of the fields.
    haystacks = [t.lower() for t in (_as_text(get_path(record, f)) for f in cond.fields) if t]
    tokens = [t.lower() for t in tokenize(str(cond.value))]
    if not tokens or not haystacks:
        return False
    return all(any(token in h for h in haystacks) for token in tokens)


def _as_text(value: Any) -> str | None:
    if isinstance(value, bool) or value is MISSING or value is None:
        return None
    if isinstance(value, (str, int, float)):
        return str(value)
    return None
