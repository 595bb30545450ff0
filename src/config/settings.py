# src/config/settings.py - v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for deployment-specific settings. Settings is read
once at startup and turned into the frozen structs of config.models; the
lookup and hydration code only ever sees those structs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from catalogref.config.models import HierarchyConfig, LookupConfig, RefMappingConfig


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Catalog backend ===
    catalog_backend: Literal["memory", "http"] = "memory"
    catalog_api_base: str = ""
    catalog_api_token: str = ""
    catalog_timeout_seconds: float = 15.0

    # === Lookup ===
    search_fields: str = "sku,label,gtin"
    mpn_labels: str = "mpn"
    mno_labels: str = "model_no"
    lookup_page_size: int = 5
    max_search_attributes: int = 50
    broad_search_fields: int = 3

    # === Cache ===
    cache_enabled: bool = True
    cache_backend: Literal["memory", "none"] = "memory"
    cache_ttl_seconds: float = 60.0
    cache_max_entries: int = 100

    # === Hierarchy ===
    sku_level_attr_slug: str = "sku_level"
    family_sku_attr_slug: str = ""
    parent_sku_attr_slug: str = "parent_sku"
    variant_sku_attr_slug: str = "variant_sku"
    brand_sku_attr_slug: str = "brand_sku"
    family_sku_regex: str = ""
    parent_sku_regex: str = ""
    variant_sku_regex: str = ""
    include_brand: bool = False

    # === Summary reference mapping ===
    mpn_attr_slug: str = "mpn"
    label_attr_slug: str = "name"
    list_price_attr_slug: str = "list_price"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("lookup_page_size", "max_search_attributes", "broad_search_fields", "cache_max_entries")
    @classmethod
    def validate_positive_int(cls, v: int, info) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @field_validator("cache_ttl_seconds", "catalog_timeout_seconds")
    @classmethod
    def validate_positive_seconds(cls, v: float, info) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.catalog_backend == "http" and not self.catalog_api_base:
            errors.append("CATALOG_BACKEND=http requires CATALOG_API_BASE")

        if not self.search_fields_list:
            errors.append("SEARCH_FIELDS must name at least one field")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def search_fields_list(self) -> list[str]:
        """Parse comma-separated search fields."""
        return _split(self.search_fields)

    @property
    def mpn_labels_list(self) -> list[str]:
        """Parse comma-separated MPN attribute labels."""
        return _split(self.mpn_labels)

    @property
    def mno_labels_list(self) -> list[str]:
        """Parse comma-separated MNO attribute labels."""
        return _split(self.mno_labels)

    def to_lookup_config(self) -> LookupConfig:
        return LookupConfig(
            search_fields=self.search_fields_list,
            mpn_fields=self.mpn_labels_list,
            mno_fields=self.mno_labels_list,
            page_size=self.lookup_page_size,
            max_attributes=self.max_search_attributes,
            broad_search_fields=self.broad_search_fields,
            cache_enabled=self.cache_enabled and self.cache_backend != "none",
            cache_ttl_seconds=self.cache_ttl_seconds,
            cache_max_entries=self.cache_max_entries,
        )

    def to_hierarchy_config(self) -> HierarchyConfig:
        return HierarchyConfig(
            level_attribute=self.sku_level_attr_slug or "sku_level",
            family_attribute=self.family_sku_attr_slug or None,
            parent_attribute=self.parent_sku_attr_slug or "parent_sku",
            variant_attribute=self.variant_sku_attr_slug or "variant_sku",
            brand_attribute=self.brand_sku_attr_slug or "brand_sku",
            family_pattern=self.family_sku_regex or None,
            parent_pattern=self.parent_sku_regex or None,
            variant_pattern=self.variant_sku_regex or None,
            include_brand=self.include_brand,
        )

    def to_mapping_config(self) -> RefMappingConfig:
        return RefMappingConfig(
            mpn_attributes=[self.mpn_attr_slug or "mpn"],
            label_attributes=[self.label_attr_slug or "name"],
            list_price_attributes=[self.list_price_attr_slug or "list_price"],
        )


def _split(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
