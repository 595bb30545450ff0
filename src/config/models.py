# src/config/models.py - v2
"""Validated configuration structs consumed by the lookup and hydration core.

These are built once at startup (see config.settings) and passed in
explicitly; the core never reads environment state itself.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_SEARCH_FIELDS: tuple[str, ...] = ("sku", "label", "gtin")
DEFAULT_MPN_FIELDS: tuple[str, ...] = ("attributes.mpn",)
DEFAULT_MNO_FIELDS: tuple[str, ...] = ("attributes.model_no",)

ATTRIBUTE_PREFIX = "attributes."


def sanitize_fields(fields: Any) -> list[str]:
    """Keep string entries only, trimmed, non-empty and de-duplicated in order."""
    if not isinstance(fields, (list, tuple)):
        return []
    cleaned: list[str] = []
    for field in fields:
        if not isinstance(field, str):
            continue
        field = field.strip()
        if field and field not in cleaned:
            cleaned.append(field)
    return cleaned


def to_attribute_path(label: str) -> str:
    """``"mpn"`` -> ``"attributes.mpn"``; already-prefixed paths are kept."""
    label = label.strip()
    return label if label.startswith(ATTRIBUTE_PREFIX) else f"{ATTRIBUTE_PREFIX}{label}"


class LookupConfig(BaseModel):
    """Search fields, MPN/MNO aliases, paging and cache knobs for the lookup engine."""

    model_config = ConfigDict(frozen=True)

    search_fields: list[str] = Field(default_factory=lambda: list(DEFAULT_SEARCH_FIELDS))
    mpn_fields: list[str] = Field(default_factory=lambda: list(DEFAULT_MPN_FIELDS))
    mno_fields: list[str] = Field(default_factory=lambda: list(DEFAULT_MNO_FIELDS))
    page_size: int = Field(default=5, gt=0)
    max_attributes: int = Field(default=50, gt=0)
    broad_search_fields: int = Field(default=3, gt=0)
    cache_enabled: bool = True
    cache_ttl_seconds: float = Field(default=60.0, gt=0)
    cache_max_entries: int = Field(default=100, gt=0)

    @field_validator("search_fields", mode="before")
    @classmethod
    def _sanitize_search_fields(cls, v: Any) -> list[str]:
        return sanitize_fields(v) or list(DEFAULT_SEARCH_FIELDS)

    @field_validator("mpn_fields", mode="before")
    @classmethod
    def _normalize_mpn_fields(cls, v: Any) -> list[str]:
        return _alias_paths(v) or list(DEFAULT_MPN_FIELDS)

    @field_validator("mno_fields", mode="before")
    @classmethod
    def _normalize_mno_fields(cls, v: Any) -> list[str]:
        return _alias_paths(v) or list(DEFAULT_MNO_FIELDS)

    @property
    def attribute_search_fields(self) -> list[str]:
        """Configured search fields that address custom attributes."""
        return [f for f in self.search_fields if f.startswith(ATTRIBUTE_PREFIX)]


def _alias_paths(v: Any) -> list[str]:
    paths: list[str] = []
    for label in sanitize_fields(v):
        path = to_attribute_path(label)
        if path not in paths:
            paths.append(path)
    return paths


class HierarchyConfig(BaseModel):
    """Attribute keys and SKU patterns used to derive hierarchy targets."""

    model_config = ConfigDict(frozen=True)

    level_attribute: str = "sku_level"
    family_attribute: str | None = None
    parent_attribute: str = "parent_sku"
    variant_attribute: str = "variant_sku"
    brand_attribute: str = "brand_sku"
    family_pattern: str | None = None
    parent_pattern: str | None = None
    variant_pattern: str | None = None
    include_brand: bool = False


class RefMappingConfig(BaseModel):
    """Attribute aliases read when mapping a record into a SummaryRef.

    Each list is tried in order; the first present value wins.
    """

    model_config = ConfigDict(frozen=True)

    sku_attributes: list[str] = Field(default_factory=lambda: ["sku"])
    mpn_attributes: list[str] = Field(default_factory=lambda: ["mpn"])
    label_attributes: list[str] = Field(default_factory=lambda: ["name"])
    list_price_attributes: list[str] = Field(default_factory=lambda: ["list_price"])

    @field_validator(
        "sku_attributes", "mpn_attributes", "label_attributes", "list_price_attributes",
        mode="before",
    )
    @classmethod
    def _sanitize(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            v = [v]
        return sanitize_fields(v)

    @property
    def fetch_attributes(self) -> list[str]:
        """Record attributes a catalog query must return for SummaryRef mapping."""
        aliases = [
            *self.sku_attributes, *self.mpn_attributes,
            *self.label_attributes, *self.list_price_attributes,
        ]
        return list(dict.fromkeys(["sku", *(to_attribute_path(a) for a in aliases)]))
