# src/api/models.py - v2
"""API-level models: ProductRequest, NormalizedIdentifier, ResolveMode."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from catalogref.core.models import HierarchyName, RelationshipName

ResolveMode = Literal["none", "relationships", "hierarchy", "all"]


class ProductRequest(BaseModel):
    """Fetch one product and optionally hydrate its references."""

    product_id: str = Field(min_length=1)
    resolve: ResolveMode = "none"
    relationship_filter: list[RelationshipName] | None = None
    hierarchy_filter: list[HierarchyName] | None = None
    include_brand: bool | None = None

    @property
    def wants_relationships(self) -> bool:
        return self.resolve in ("relationships", "all")

    @property
    def wants_hierarchy(self) -> bool:
        return self.resolve in ("hierarchy", "all")


class NormalizedIdentifier(BaseModel):
    """An identifier and its canonical comparison form."""

    input: str
    normalized: str
