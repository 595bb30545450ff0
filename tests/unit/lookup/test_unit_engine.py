# tests/unit/lookup/test_unit_engine.py - v1
"""Tests for lookup/engine.py against a mocked repository."""

from __future__ import annotations

import pytest

from catalogref.cache.memory_store import MemoryCacheStore
from catalogref.cache.null_store import NullCacheStore
from catalogref.config.models import LookupConfig
from catalogref.core.models import ProductCriteria
from catalogref.lookup.engine import LookupEngine
from catalogref.repository.base_repository import RepositoryError


class TestFindByIdentifier:
    @pytest.mark.asyncio
    async def test_direct_id_short_circuits(self, mock_repository, dome_041):
        mock_repository.get_by_id.return_value = dome_041
        engine = LookupEngine(mock_repository, cache=NullCacheStore())

        result = await engine.find_by_identifier(dome_041["id"])

        assert result.selected is not None
        assert result.selected.reason == "direct_id_lookup"
        assert result.selected.matched_field == "id"
        assert result.selected.confidence == 1.0
        assert result.plan == [
            "detected_type:internal_id(1.0)",
            "search_fields:sku,label,gtin",
            "direct_id_lookup",
        ]
        mock_repository.search_by_criteria.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_direct_id_not_found_falls_through(self, mock_repository):
        engine = LookupEngine(mock_repository, cache=NullCacheStore())

        result = await engine.find_by_identifier("507f1f77bcf86cd799439011")

        assert result.selected is None
        assert result.plan[2:] == [
            "direct_id_lookup", "direct_id_not_found", "text_search_multi", "broad_like_search",
        ]

    @pytest.mark.asyncio
    async def test_stage_failures_are_recorded_not_raised(self, mock_repository):
        mock_repository.search_by_criteria.side_effect = RepositoryError("boom", status_code=503)
        engine = LookupEngine(mock_repository, cache=NullCacheStore())

        result = await engine.find_by_identifier("LMI-PD041828SI")

        assert result.selected is None
        assert result.matches == []
        assert result.plan[2:] == [
            "sku_eq", "sku_eq_failed",
            "text_search_multi", "text_search_multi_failed",
            "broad_like_search", "broad_like_search_failed",
        ]

    @pytest.mark.asyncio
    async def test_direct_id_failure_recorded(self, mock_repository):
        mock_repository.get_by_id.side_effect = TimeoutError("slow")
        engine = LookupEngine(mock_repository, cache=NullCacheStore())

        result = await engine.find_by_identifier("507f1f77bcf86cd799439011")

        assert "direct_id_lookup_failed" in result.plan

    @pytest.mark.asyncio
    async def test_early_exit_on_exact_hit(self, mock_repository, dome_041):
        async def search(groups, attributes, pagination):
            cond = groups[0][0]
            return [dome_041] if cond.field == "attributes.mpn" else []

        mock_repository.search_by_criteria.side_effect = search
        engine = LookupEngine(mock_repository, cache=NullCacheStore())

        result = await engine.find_by_identifier("PD041-828SI", explicit_type="unknown")

        assert result.plan[0] == "detected_type:unknown(0.8)"
        assert result.plan[2:] == ["sku_eq", "attributes.mpn_eq"]
        assert result.selected is not None
        assert result.selected.matched_field == "attributes.mpn_eq"

    @pytest.mark.asyncio
    async def test_pagination_and_attributes_passed(self, mock_repository):
        engine = LookupEngine(mock_repository, LookupConfig(max_attributes=2), cache=NullCacheStore())

        await engine.find_by_identifier("LMI-1", limit=7)

        _, attributes, pagination = mock_repository.search_by_criteria.await_args_list[0].args
        assert attributes == ["sku", "label"]
        assert (pagination.page, pagination.page_size) == (1, 7)

    @pytest.mark.asyncio
    async def test_same_record_from_two_stages_is_not_ambiguous(self, mock_repository, dome_052):
        mock_repository.search_by_criteria.return_value = [dome_052]
        config = LookupConfig(mpn_fields=["mpn", "mpn_alt"])
        engine = LookupEngine(mock_repository, config, cache=NullCacheStore())

        result = await engine.find_by_identifier("PD05", explicit_type="mpn")

        assert len(result.matches) == 1
        assert result.selected is not None

    @pytest.mark.asyncio
    async def test_non_positive_limit_rejected(self, mock_repository):
        engine = LookupEngine(mock_repository, cache=NullCacheStore())
        with pytest.raises(ValueError, match="limit"):
            await engine.find_by_identifier("LMI-1", limit=0)

    @pytest.mark.asyncio
    async def test_cache_hit_skips_repository(self, mock_repository, clock):
        engine = LookupEngine(mock_repository, cache=MemoryCacheStore(clock=clock))

        first = await engine.find_by_identifier("LMI-1")
        calls = mock_repository.search_by_criteria.await_count
        second = await engine.find_by_identifier("LMI-1")

        assert second == first
        assert mock_repository.search_by_criteria.await_count == calls

    @pytest.mark.asyncio
    async def test_explicit_type_and_limit_are_part_of_cache_key(self, mock_repository, clock):
        engine = LookupEngine(mock_repository, cache=MemoryCacheStore(clock=clock))

        await engine.find_by_identifier("LMI-1")
        await engine.find_by_identifier("LMI-1", explicit_type="mpn")
        await engine.find_by_identifier("LMI-1", limit=9)

        assert len(engine.cache) == 3


class TestFindProducts:
    @pytest.mark.asyncio
    async def test_key_match_raises_confidence(self, mock_repository, dome_041, dome_052):
        mock_repository.search_by_criteria.return_value = [dome_052, dome_041]
        engine = LookupEngine(mock_repository, cache=NullCacheStore())

        result = await engine.find_products(ProductCriteria(sku="LMI-PD041828SI", label="Pressure Dome"))

        assert [m.confidence for m in result.matches] == [0.9, 0.5]
        assert result.selected is not None
        assert result.selected.sku == "LMI-PD041828SI"
        assert all(m.reason == "multi_criteria_match" for m in result.matches)
        assert result.plan == ["multi_criteria_search"]

    @pytest.mark.asyncio
    async def test_gtin_match(self, mock_repository, dome_041):
        mock_repository.search_by_criteria.return_value = [dome_041]
        engine = LookupEngine(mock_repository, cache=NullCacheStore())

        result = await engine.find_products(ProductCriteria(gtin="01234567890128"))

        assert result.matches[0].confidence == 0.9

    @pytest.mark.asyncio
    async def test_failure_returns_empty(self, mock_repository):
        mock_repository.search_by_criteria.side_effect = RepositoryError("down")
        engine = LookupEngine(mock_repository, cache=NullCacheStore())

        result = await engine.find_products(ProductCriteria(sku="X"))

        assert result.matches == []
        assert result.selected is None
        assert result.plan == ["multi_criteria_search", "multi_criteria_search_failed"]

    @pytest.mark.asyncio
    async def test_limit_used_as_page_size(self, mock_repository):
        engine = LookupEngine(mock_repository, cache=NullCacheStore())

        await engine.find_products(ProductCriteria(limit=3))

        groups, _, pagination = mock_repository.search_by_criteria.await_args.args
        assert groups == []
        assert pagination.page_size == 3
