# src/lookup/planner.py - v1
"""Search plan: which repository queries to run for an identifier, in order.

Stages are pure data (tag, filter groups, extra attributes). The engine
executes them; nothing here touches the repository.

Order:
  1. Exact field matches for fields compatible with the identifier type
  2. One multi-field text search (only when stage 1 found nothing)
  3. Broad LIKE on the first token (only when stage 2 found nothing)
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from catalogref.config.models import LookupConfig
from catalogref.core.models import IdentifierType, ProductCriteria
from catalogref.core.normalizer import tokenize
from catalogref.repository.models import FilterGroups, eq, like, text_search

DIRECT_ID_TAG = "direct_id_lookup"
TEXT_SEARCH_TAG = "text_search_multi"
BROAD_SEARCH_TAG = "broad_like_search"
CRITERIA_TAG = "multi_criteria_search"

_ATTRIBUTE_TYPES: frozenset[str] = frozenset({"mpn", "mno", "unknown"})


class SearchStage(BaseModel):
    """One repository search and the tag recorded for it in the plan."""

    tag: str
    filter_groups: FilterGroups
    extra_attributes: list[str] = Field(default_factory=list)
    matched_field: str | None = None


def plan_exact_stages(
    identifier: str,
    id_type: IdentifierType,
    config: LookupConfig,
) -> list[SearchStage]:
    """Exact-match stages for the configured search fields and aliases.

    Args:
        identifier: Raw identifier.
        id_type: Resolved identifier type.
        config: Lookup configuration.

    Returns:
        Stages in execution order; attribute stages come last.
    """
    stages: list[SearchStage] = []
    attribute_fields: list[str] = []

    for field in config.search_fields:
        if field == "sku" and id_type in ("sku", "unknown"):
            stages.append(SearchStage(
                tag="sku_eq", filter_groups=[[eq("sku", identifier)]], matched_field="sku",
            ))
        elif field == "gtin" and id_type == "gtin":
            stages.append(SearchStage(
                tag="gtin_eq", filter_groups=[[eq("gtin", identifier)]], matched_field="gtin",
            ))
        elif field == "label" and id_type == "label":
            tokens = tokenize(identifier)
            if tokens:
                stages.append(SearchStage(
                    tag="label_like_tokens",
                    filter_groups=[[like("label", token) for token in tokens]],
                    matched_field="label",
                ))
        elif field.startswith("attributes.") and id_type in _ATTRIBUTE_TYPES:
            attribute_fields.append(field)

    if id_type in ("mpn", "unknown"):
        attribute_fields.extend(config.mpn_fields)
    if id_type in ("mno", "unknown"):
        attribute_fields.extend(config.mno_fields)

    for field in dict.fromkeys(attribute_fields):
        stages.append(SearchStage(
            tag=f"{field}_eq",
            filter_groups=[[eq(field, identifier)]],
            extra_attributes=[field],
            matched_field=field,
        ))
    return stages


def plan_text_stage(identifier: str, config: LookupConfig) -> SearchStage:
    """Single text search across search fields plus MPN/MNO aliases."""
    fields = list(dict.fromkeys([*config.search_fields, *config.mpn_fields, *config.mno_fields]))
    return SearchStage(
        tag=TEXT_SEARCH_TAG,
        filter_groups=[[text_search(fields, identifier)]],
        extra_attributes=[*config.mpn_fields, *config.mno_fields],
    )


def plan_broad_stage(identifier: str, config: LookupConfig) -> SearchStage:
    """LIKE on the first token, OR-ed over the first few search fields."""
    tokens = tokenize(identifier)
    first = tokens[0] if tokens else identifier.strip()
    fields = config.search_fields[: config.broad_search_fields]
    return SearchStage(
        tag=BROAD_SEARCH_TAG,
        filter_groups=[[like(field, first)] for field in fields],
    )


def request_attributes(config: LookupConfig, *extra: list[str]) -> list[str]:
    """Search fields plus extras, de-duplicated and capped at ``max_attributes``."""
    merged: list[str] = list(config.search_fields)
    for group in extra:
        merged.extend(group)
    return list(dict.fromkeys(merged))[: config.max_attributes]


def plan_criteria_search(
    criteria: ProductCriteria,
    config: LookupConfig,
) -> tuple[FilterGroups, list[str]]:
    """Filter groups (one per supplied criterion) and attributes for find_products."""
    groups: FilterGroups = []
    alias_fields: list[str] = []

    if criteria.sku:
        groups.append([eq("sku", criteria.sku)])
    if criteria.gtin:
        groups.append([eq("gtin", criteria.gtin)])
    if criteria.label:
        tokens = tokenize(criteria.label)
        if tokens:
            groups.append([like("label", token) for token in tokens])
    if criteria.mpn:
        groups.extend([eq(field, criteria.mpn)] for field in config.mpn_fields)
        alias_fields.extend(config.mpn_fields)
    if criteria.mno:
        groups.extend([eq(field, criteria.mno)] for field in config.mno_fields)
        alias_fields.extend(config.mno_fields)
    if criteria.fuzzy_search:
        groups.append([text_search(list(config.search_fields), criteria.fuzzy_search)])

    return groups, request_attributes(config, criteria.return_fields, alias_fields)
