# tests/unit/repository/test_unit_memory_repository.py - v1
"""Tests for repository/memory_repository.py: filter evaluation and fetches."""

from __future__ import annotations

import pytest

from catalogref.repository.memory_repository import InMemoryProductRepository
from catalogref.repository.models import Pagination, eq, like, text_search

PAGE = Pagination(page=1, page_size=10)


def _ids(rows):
    return [r["id"] for r in rows]


class TestSearchByCriteria:
    @pytest.mark.asyncio
    async def test_eq_on_nested_path(self, memory_repository):
        rows = await memory_repository.search_by_criteria([[eq("attributes.mpn", "PD052")]], [], PAGE)
        assert _ids(rows) == ["b1"]

    @pytest.mark.asyncio
    async def test_like_is_case_insensitive(self, memory_repository):
        rows = await memory_repository.search_by_criteria([[like("label", "dome 06")]], [], PAGE)
        assert _ids(rows) == ["c1"]

    @pytest.mark.asyncio
    async def test_and_within_group(self, memory_repository):
        rows = await memory_repository.search_by_criteria(
            [[like("label", "Pressure"), like("label", "052")]], [], PAGE
        )
        assert _ids(rows) == ["b1"]

    @pytest.mark.asyncio
    async def test_or_across_groups(self, memory_repository):
        rows = await memory_repository.search_by_criteria(
            [[eq("sku", "LMI-PD052")], [eq("sku", "LMI-PD063")]], [], PAGE
        )
        assert _ids(rows) == ["b1", "c1"]

    @pytest.mark.asyncio
    async def test_text_search_tokens_across_fields(self, memory_repository):
        rows = await memory_repository.search_by_criteria(
            [[text_search(["sku", "attributes.name"], "pd052 dome")]], [], PAGE
        )
        assert _ids(rows) == ["b1"]

    @pytest.mark.asyncio
    async def test_no_groups_returns_everything_paginated(self, memory_repository):
        first = await memory_repository.search_by_criteria([], [], Pagination(page=1, page_size=2))
        second = await memory_repository.search_by_criteria([[]], [], Pagination(page=2, page_size=2))
        assert len(first) == 2
        assert len(second) == 1

    @pytest.mark.asyncio
    async def test_rows_are_copies(self, memory_repository):
        rows = await memory_repository.search_by_criteria([[eq("sku", "LMI-PD063")]], [], PAGE)
        rows[0]["sku"] = "changed"
        assert await memory_repository.get_by_sku("LMI-PD063") is not None


class TestFetches:
    @pytest.mark.asyncio
    async def test_get_by_id(self, memory_repository):
        assert (await memory_repository.get_by_id("b1"))["sku"] == "LMI-PD052"
        assert await memory_repository.get_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_get_by_ids_omits_unknown(self, memory_repository):
        rows = await memory_repository.get_by_ids(["c1", "missing", "b1"])
        assert _ids(rows) == ["c1", "b1"]

    @pytest.mark.asyncio
    async def test_get_by_skus(self, memory_repository):
        rows = await memory_repository.get_by_skus(["LMI-PD063", "NOPE"])
        assert _ids(rows) == ["c1"]

    @pytest.mark.asyncio
    async def test_calls_recorded(self, memory_repository):
        await memory_repository.get_by_ids(["b1"])
        assert memory_repository.count_calls("get_by_ids") == 1
        assert memory_repository.calls[-1] == ("get_by_ids", ["b1"])

    def test_record_requires_string_id(self):
        with pytest.raises(ValueError, match="id"):
            InMemoryProductRepository([{"sku": "x"}])
