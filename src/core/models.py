# src/core/models.py - v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Repository records are open maps. `id` is always present, `sku`, `label`
# and `gtin` are conventional top-level keys, everything else lives under
# the nested `attributes` map.
Record = dict[str, Any]


# === IDENTIFIERS ===


IdentifierType = Literal["internal_id", "sku", "mpn", "mno", "gtin", "label", "unknown"]


class DetectionResult(BaseModel):
    """Identifier type guess with a fixed per-rule confidence."""

    model_config = ConfigDict(frozen=True)

    type: IdentifierType
    confidence: float


class IdentifierDescription(BaseModel):
    """Detection result plus a readable description of the matched pattern."""

    input: str
    type: IdentifierType
    confidence: float
    pattern_matched: str


# === MATCHING ===


MatchReason = Literal[
    "direct_id_lookup",
    "normalized_exact_match",
    "prefix_match",
    "substring_match",
    "similarity_match",
    "no_match",
    "multi_criteria_match",
]


def clamp_confidence(value: float) -> float:
    """Clamp a confidence value into [0, 1]."""
    return max(0.0, min(1.0, float(value)))


class Match(BaseModel):
    """A candidate record scored against the lookup identifier."""

    id: str
    sku: str | None = None
    label: str | None = None
    gtin: str | None = None
    matched_field: str
    confidence: float
    reason: MatchReason
    raw_record: Record = Field(default_factory=dict)

    @field_validator("confidence")
    @classmethod
    def _clamp(cls, v: float) -> float:
        return clamp_confidence(v)


class LookupResult(BaseModel):
    """Outcome of one lookup: optional selection, ranked matches, audit plan."""

    selected: Match | None = None
    matches: list[Match] = Field(default_factory=list)
    plan: list[str] = Field(default_factory=list)

    @property
    def is_ambiguous(self) -> bool:
        """True when candidates exist but none could be selected."""
        return self.selected is None and len(self.matches) > 1


class FieldScore(BaseModel):
    """Best similarity between an identifier and an explicit set of fields."""

    confidence: float = 0.0
    matched_field: str | None = None
    matched_value: str | None = None
    reason: str = "No match found"
    fields_checked: list[str] = Field(default_factory=list)


class ProductCriteria(BaseModel):
    """Multi-criteria search input. Every supplied criterion widens the search."""

    sku: str | None = None
    mpn: str | None = None
    mno: str | None = None
    label: str | None = None
    gtin: str | None = None
    fuzzy_search: str | None = None
    limit: int = Field(default=5, gt=0)
    return_fields: list[str] = Field(default_factory=list)


# === HYDRATION ===


RelationshipName = Literal["replaces", "includes", "modules", "has_optional_accessory"]

RELATIONSHIP_FIELDS: tuple[str, ...] = (
    "replaces", "includes", "modules", "has_optional_accessory",
)

HierarchyName = Literal["family", "parent", "variant", "brand"]


class SummaryRef(BaseModel):
    """Lightweight reference to a related product. Unknown sub-fields are None."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    sku: str | None = None
    mpn: str | None = None
    label: str | None = None
    list_price: float | None = Field(default=None, alias="listPrice")

    @classmethod
    def empty(cls, ref_id: str) -> SummaryRef:
        """Reference for an ID the repository could not resolve."""
        return cls(id=ref_id, sku=None, mpn=None, label=None, list_price=None)


class HierarchyRefs(BaseModel):
    """Resolved family/parent/variant/brand pointers of a product.

    A level excluded by the caller's filter is never set and therefore
    absent from ``as_dict()``. A requested level that could not be derived
    or found is explicitly set to None.
    """

    level: int | None = None
    family: SummaryRef | None = None
    parent: SummaryRef | None = None
    variant: SummaryRef | None = None
    brand: SummaryRef | None = None

    def has(self, name: str) -> bool:
        """Whether the level was requested (set, possibly to None)."""
        return name in self.model_fields_set

    def as_dict(self) -> dict[str, Any]:
        """Serialize keeping the absent/null distinction."""
        data = self.model_dump(exclude_unset=True, by_alias=True)
        data["level"] = self.level
        return data
