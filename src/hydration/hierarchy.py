# src/hydration/hierarchy.py - v1
"""Hierarchy resolver: family, parent, variant and brand of a product.

A level is only considered when the product's own level qualifies for it.
The target SKU comes from a configured attribute when that holds a string,
otherwise from the first capture group of the level's pattern applied to
the product SKU. Brand is attribute-only and opt-in.

Levels left out of the request are never set on the result (absent);
requested levels with no derivable SKU or no record are set to None.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from catalogref.config.models import HierarchyConfig, RefMappingConfig
from catalogref.core.models import HierarchyName, HierarchyRefs, Record, SummaryRef
from catalogref.core.paths import attribute_map
from catalogref.core.patterns import compile_or_default, first_group
from catalogref.hydration.mapper import to_summary_ref
from catalogref.repository.base_repository import BaseProductRepository

logger = logging.getLogger(__name__)

DEFAULT_FAMILY_PATTERN = r"^([^-]+-[^-]+)"
DEFAULT_PARENT_PATTERN = r"^(.*?)-[^-]+$"
DEFAULT_VARIANT_PATTERN = r"^(.*?)-[^-]+$"

DEFAULT_HIERARCHY_FILTER: tuple[HierarchyName, ...] = ("variant", "parent", "family")

_QUALIFYING_LEVELS: dict[str, frozenset[int]] = {
    "family": frozenset({1, 2, 3, 4}),
    "parent": frozenset({3, 4}),
    "variant": frozenset({4}),
}


def parse_level(value: Any) -> int | None:
    """Hierarchy level from an int or numeric string; None unless integral in 0..4."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, (int, float)) and float(value).is_integer() and 0 <= value <= 4:
        return int(value)
    return None


def product_sku(product: Mapping[str, Any]) -> str | None:
    sku = product.get("sku")
    if isinstance(sku, str) and sku:
        return sku
    sku = attribute_map(product).get("sku")
    return sku if isinstance(sku, str) and sku else None


def derive_targets(
    product: Mapping[str, Any],
    config: HierarchyConfig,
    levels: Iterable[str],
    include_brand: bool,
) -> dict[str, str | None]:
    """Target SKU per requested, qualifying level (None when not derivable)."""
    attrs = attribute_map(product)
    level = parse_level(attrs.get(config.level_attribute))
    sku = product_sku(product)
    wanted = set(levels)

    slots: dict[str, tuple[str | None, str | None, str]] = {
        "family": (config.family_attribute, config.family_pattern, DEFAULT_FAMILY_PATTERN),
        "parent": (config.parent_attribute, config.parent_pattern, DEFAULT_PARENT_PATTERN),
        "variant": (config.variant_attribute, config.variant_pattern, DEFAULT_VARIANT_PATTERN),
    }

    targets: dict[str, str | None] = {}
    for name, (attribute, pattern, default) in slots.items():
        if name not in wanted or level not in _QUALIFYING_LEVELS[name]:
            continue
        value = attrs.get(attribute) if attribute else None
        if isinstance(value, str) and value:
            targets[name] = value
        else:
            targets[name] = first_group(compile_or_default(pattern, default), sku)

    if include_brand:
        brand = attrs.get(config.brand_attribute)
        targets["brand"] = brand if isinstance(brand, str) and brand else None

    return targets


async def hydrate_hierarchy(
    product: Mapping[str, Any],
    repository: BaseProductRepository,
    config: HierarchyConfig | None = None,
    mapping: RefMappingConfig | None = None,
    hierarchy_filter: Iterable[HierarchyName] | None = None,
    include_brand: bool | None = None,
) -> HierarchyRefs:
    """Resolve the product's hierarchy with one batch fetch by SKU.

    Args:
        product: Product record (``sku`` plus ``attributes``).
        repository: Repository used for the batch SKU fetch.
        config: Attribute keys and patterns. Defaults to HierarchyConfig().
        mapping: Attribute aliases for SummaryRef mapping.
        hierarchy_filter: Levels to resolve. None or empty means
            variant, parent and family.
        include_brand: Resolve the brand too. Defaults to ``config.include_brand``.

    Returns:
        HierarchyRefs where excluded levels are unset and unresolved ones None.
    """
    config = config or HierarchyConfig()
    levels = list(hierarchy_filter or ()) or list(DEFAULT_HIERARCHY_FILTER)
    brand = config.include_brand if include_brand is None else include_brand

    level = parse_level(attribute_map(product).get(config.level_attribute))
    targets = derive_targets(product, config, levels, brand)

    skus = list(dict.fromkeys(s for s in targets.values() if s))
    by_sku: dict[str, Record] = {}
    if skus:
        logger.debug("Hierarchy batch fetch for %d SKU(s)", len(skus))
        try:
            found = await repository.get_by_skus(skus)
        except Exception as exc:
            logger.warning("Hierarchy batch fetch failed: %s", exc)
            found = []
        for record in found:
            record_sku = record.get("sku")
            if isinstance(record_sku, str) and record_sku and record_sku not in by_sku:
                by_sku[record_sku] = record

    resolved: dict[str, SummaryRef | None] = {}
    for name, target in targets.items():
        record = by_sku.get(target) if target else None
        resolved[name] = to_summary_ref(record, mapping) if record is not None else None

    return HierarchyRefs(level=level, **resolved)
