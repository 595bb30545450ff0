# tests/unit/api/test_unit_facade.py - v2
"""Tests for api/facade.py and api/models.py."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from catalogref.api.facade import CatalogResolver
from catalogref.api.models import ProductRequest
from catalogref.cache.null_store import NullCacheStore
from catalogref.config.settings import Settings
from catalogref.core.models import HierarchyRefs, ProductCriteria, SummaryRef
from catalogref.repository.base_repository import RepositoryError
from catalogref.repository.memory_repository import InMemoryProductRepository


class TestProductRequest:
    @pytest.mark.parametrize(
        "resolve,relationships,hierarchy",
        [("none", False, False), ("relationships", True, False), ("hierarchy", False, True), ("all", True, True)],
    )
    def test_resolve_modes(self, resolve, relationships, hierarchy):
        request = ProductRequest(product_id="p", resolve=resolve)
        assert request.wants_relationships is relationships
        assert request.wants_hierarchy is hierarchy

    def test_rejects_unknown_mode(self):
        with pytest.raises(ValidationError):
            ProductRequest(product_id="p", resolve="everything")  # type: ignore[arg-type]

    def test_rejects_unknown_relationship(self):
        with pytest.raises(ValidationError):
            ProductRequest(product_id="p", relationship_filter=["siblings"])  # type: ignore[list-item]


class TestSyncHelpers:
    def test_describe(self, mock_repository):
        resolver = CatalogResolver(mock_repository)
        assert resolver.describe("PD041-828SI").type == "mpn"

    def test_normalize(self, mock_repository):
        result = CatalogResolver(mock_repository).normalize("pd041-828 si")
        assert (result.input, result.normalized) == ("pd041-828 si", "PD041828SI")

    def test_score(self, mock_repository, dome_041):
        score = CatalogResolver(mock_repository).score("PD041828SI", dome_041, ["attributes.mpn"])
        assert score.confidence == 1.0


class TestLookup:
    @pytest.mark.asyncio
    async def test_fetch_full_replaces_raw_record(self, mock_repository, dome_041):
        row = {"id": dome_041["id"], "sku": dome_041["sku"]}
        mock_repository.search_by_criteria.return_value = [row]
        mock_repository.get_by_id.return_value = dome_041
        resolver = CatalogResolver(mock_repository, cache=NullCacheStore())

        result = await resolver.lookup("LMI-PD041828SI", fetch_full=True)

        assert result.selected is not None
        assert result.selected.raw_record == dome_041
        assert result.matches[0].raw_record == dome_041

    @pytest.mark.asyncio
    async def test_fetch_full_failure_keeps_row(self, mock_repository, dome_041):
        row = {"id": dome_041["id"], "sku": dome_041["sku"]}
        mock_repository.search_by_criteria.return_value = [row]
        mock_repository.get_by_id.side_effect = RepositoryError("down")
        resolver = CatalogResolver(mock_repository, cache=NullCacheStore())

        result = await resolver.lookup("LMI-PD041828SI", fetch_full=True)

        assert result.selected is not None
        assert result.selected.raw_record == row

    @pytest.mark.asyncio
    async def test_find_products_keywords(self, mock_repository, dome_041):
        mock_repository.search_by_criteria.return_value = [dome_041]
        resolver = CatalogResolver(mock_repository)

        by_kw = await resolver.find_products(sku="LMI-PD041828SI")
        by_model = await resolver.find_products(ProductCriteria(sku="LMI-PD041828SI"))

        assert by_kw == by_model


class TestGetProduct:
    @pytest.mark.asyncio
    async def test_not_found(self, mock_repository):
        assert await CatalogResolver(mock_repository).get_product("nope") is None

    @pytest.mark.asyncio
    async def test_resolve_none_returns_raw(self, mock_repository, dome_041):
        mock_repository.get_by_id.return_value = dome_041
        product = await CatalogResolver(mock_repository).get_product(dome_041["id"])
        assert product == dome_041
        mock_repository.get_by_ids.assert_not_awaited()
        mock_repository.get_by_skus.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_resolve_all(self, memory_repository, dome_041):
        resolver = CatalogResolver(memory_repository)

        product = await resolver.get_product(dome_041["id"], resolve="all", include_brand=False)

        assert product is not None
        assert [ref.id for ref in product["includes"]] == ["b1", "c1"]
        assert product["replaces"][1] == SummaryRef.empty("gone")
        assert isinstance(product["hierarchy"], HierarchyRefs)
        assert product["hierarchy"].level is None
        assert memory_repository.count_calls("get_by_ids") == 1

    @pytest.mark.asyncio
    async def test_fetch_error_propagates(self, mock_repository):
        mock_repository.get_by_id.side_effect = RepositoryError("down", status_code=500)
        with pytest.raises(RepositoryError):
            await CatalogResolver(mock_repository).get_product("p")


class TestFromSettings:
    @pytest.mark.asyncio
    async def test_wires_configs(self):
        settings = Settings(
            _env_file=None,
            search_fields="sku,label",
            cache_enabled=False,
            label_attr_slug="title",
        )
        repo = InMemoryProductRepository([{"id": "1", "sku": "A-1", "attributes": {"title": "T"}}])

        resolver = CatalogResolver.from_settings(settings, repository=repo)
        result = await resolver.lookup("A-1")

        assert resolver.engine.config.search_fields == ["sku", "label"]
        assert isinstance(resolver.engine.cache, NullCacheStore)
        assert result.plan[1] == "search_fields:sku,label"
        product = await resolver.get_product("1", resolve="relationships")
        assert product == {"id": "1", "sku": "A-1", "attributes": {"title": "T"}}

    def test_applies_log_settings(self):
        settings = Settings(_env_file=None, log_level="ERROR", log_format="text")

        CatalogResolver.from_settings(settings, repository=InMemoryProductRepository())

        root = logging.getLogger("catalogref")
        assert root.level == logging.ERROR
        assert len(root.handlers) == 1

    def test_log_setup_can_be_skipped(self):
        root = logging.getLogger("catalogref")
        root.setLevel(logging.DEBUG)

        CatalogResolver.from_settings(
            Settings(_env_file=None, log_level="ERROR"),
            repository=InMemoryProductRepository(),
            setup_logs=False,
        )

        assert root.level == logging.DEBUG
        assert root.handlers == []
