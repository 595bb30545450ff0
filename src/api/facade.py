# src/api/facade.py - v3
"""Public API facade: single entry point for identifier resolution and hydration.

Usage:
    from catalogref.api.facade import CatalogResolver
    resolver = CatalogResolver.from_settings(load_settings())
    result = await resolver.lookup("PD041-828SI")
    product = await resolver.get_product(result.selected.id, resolve="all")
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from catalogref.api.models import NormalizedIdentifier, ProductRequest, ResolveMode
from catalogref.cache.base_cache_store import BaseCacheStore
from catalogref.config.models import HierarchyConfig, LookupConfig, RefMappingConfig
from catalogref.config.settings import Settings
from catalogref.core.models import (
    FieldScore,
    HierarchyName,
    IdentifierDescription,
    IdentifierType,
    LookupResult,
    ProductCriteria,
    Record,
    RelationshipName,
)
from catalogref.core.normalizer import normalize
from catalogref.hydration.hierarchy import hydrate_hierarchy
from catalogref.hydration.relationships import hydrate_relationships
from catalogref.logging.logger import configure_logging
from catalogref.lookup.engine import LookupEngine
from catalogref.lookup.identifier import describe_identifier
from catalogref.lookup.scoring import score_fields
from catalogref.repository.base_repository import BaseProductRepository
from catalogref.repository.repository_factory import create_repository

logger = logging.getLogger(__name__)


class CatalogResolver:
    """Owns the repository, the lookup engine and the hydration configuration.

    Args:
        repository: Product repository collaborator.
        lookup_config: Lookup configuration.
        hierarchy_config: Hierarchy attribute keys and patterns.
        mapping: Attribute aliases for SummaryRef mapping.
        cache: Result cache. Defaults to the one described by ``lookup_config``.
    """

    def __init__(
        self,
        repository: BaseProductRepository,
        lookup_config: LookupConfig | None = None,
        hierarchy_config: HierarchyConfig | None = None,
        mapping: RefMappingConfig | None = None,
        cache: BaseCacheStore | None = None,
    ) -> None:
        self._repository = repository
        self._engine = LookupEngine(repository, lookup_config, cache)
        self._hierarchy_config = hierarchy_config or HierarchyConfig()
        self._mapping = mapping or RefMappingConfig()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        repository: BaseProductRepository | None = None,
        cache: BaseCacheStore | None = None,
        setup_logs: bool = True,
    ) -> CatalogResolver:
        """Wire a resolver from application settings.

        With ``setup_logs`` the LOG_* settings configure the catalogref logger.
        """
        if setup_logs:
            configure_logging(settings)
        return cls(
            repository=repository or create_repository(settings),
            lookup_config=settings.to_lookup_config(),
            hierarchy_config=settings.to_hierarchy_config(),
            mapping=settings.to_mapping_config(),
            cache=cache,
        )

    @property
    def engine(self) -> LookupEngine:
        return self._engine

    @property
    def repository(self) -> BaseProductRepository:
        return self._repository

    # ------------------------------------------------------------------
    # Identifier resolution
    # ------------------------------------------------------------------

    async def lookup(
        self,
        identifier: str,
        explicit_type: IdentifierType | None = None,
        limit: int | None = None,
        fetch_full: bool = False,
    ) -> LookupResult:
        """Resolve an identifier; optionally re-fetch the selected record in full.

        Search rows only carry the requested attributes. With ``fetch_full``
        the selected match's ``raw_record`` is replaced by the full record;
        if that fetch fails the search row is kept.
        """
        result = await self._engine.find_by_identifier(identifier, explicit_type, limit)
        if not fetch_full or result.selected is None:
            return result

        selected = result.selected
        try:
            full = await self._repository.get_by_id(selected.id)
        except Exception as exc:
            logger.warning("Full fetch of %s failed, keeping search row: %s", selected.id, exc)
            return result
        if full is None:
            return result

        enriched = selected.model_copy(update={"raw_record": full})
        matches = [enriched if m.id == selected.id else m for m in result.matches]
        return result.model_copy(update={"selected": enriched, "matches": matches})

    async def find_products(self, criteria: ProductCriteria | None = None, **fields: Any) -> LookupResult:
        """Multi-criteria search. Accepts a ProductCriteria or its fields as keywords."""
        criteria = criteria or ProductCriteria(**fields)
        return await self._engine.find_products(criteria)

    def describe(self, value: str) -> IdentifierDescription:
        return describe_identifier(value)

    def normalize(self, value: str) -> NormalizedIdentifier:
        return NormalizedIdentifier(input=value, normalized=normalize(value))

    def score(
        self,
        identifier: str,
        product_data: Mapping[str, Any],
        fields: Sequence[str] | None = None,
    ) -> FieldScore:
        return score_fields(identifier, product_data, fields)

    # ------------------------------------------------------------------
    # Hydration
    # ------------------------------------------------------------------

    async def get_product(
        self,
        product_id: str,
        resolve: ResolveMode = "none",
        relationship_filter: Iterable[RelationshipName] | None = None,
        hierarchy_filter: Iterable[HierarchyName] | None = None,
        include_brand: bool | None = None,
    ) -> Record | None:
        """Fetch one product by ID and hydrate what ``resolve`` asks for.

        Args:
            product_id: Internal product ID.
            resolve: "none", "relationships", "hierarchy" or "all".
            relationship_filter: Relationship fields to expand (default all).
            hierarchy_filter: Hierarchy levels to resolve (default variant,
                parent, family).
            include_brand: Resolve the brand. Defaults to the configured flag.

        Returns:
            The product record, relationship arrays replaced by SummaryRef
            lists and the HierarchyRefs under ``"hierarchy"`` when requested.
            None when the product does not exist.

        Raises:
            RepositoryError: If the product fetch itself fails.
        """
        request = ProductRequest(
            product_id=product_id,
            resolve=resolve,
            relationship_filter=list(relationship_filter) if relationship_filter is not None else None,
            hierarchy_filter=list(hierarchy_filter) if hierarchy_filter is not None else None,
            include_brand=include_brand,
        )
        product = await self._repository.get_by_id(request.product_id)
        if product is None:
            logger.info("Product %s not found", request.product_id)
            return None

        if request.wants_relationships:
            product = await hydrate_relationships(
                product, self._repository, request.relationship_filter, self._mapping
            )
        if request.wants_hierarchy:
            product = dict(product)
            product["hierarchy"] = await hydrate_hierarchy(
                product,
                self._repository,
                self._hierarchy_config,
                self._mapping,
                request.hierarchy_filter,
                request.include_brand,
            )
        return product

    async def aclose(self) -> None:
        await self._repository.aclose()
