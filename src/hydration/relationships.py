# src/hydration/relationships.py - v1
"""Relationship hydrator: expand foreign-ID arrays into SummaryRefs.

IDs from every targeted field are pooled and fetched in one batch call.
Each targeted field keeps its length and order; an ID the repository does
not return becomes an all-None SummaryRef.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from catalogref.config.models import RefMappingConfig
from catalogref.core.models import RELATIONSHIP_FIELDS, Record, SummaryRef
from catalogref.hydration.mapper import to_summary_ref
from catalogref.repository.base_repository import BaseProductRepository

logger = logging.getLogger(__name__)


def target_relationship_fields(requested: Iterable[str] | None = None) -> list[str]:
    """Requested fields intersected with the known ones, or all known fields."""
    if requested is None:
        return list(RELATIONSHIP_FIELDS)
    wanted = set(requested)
    return [name for name in RELATIONSHIP_FIELDS if name in wanted]


async def hydrate_relationships(
    product: Mapping[str, Any],
    repository: BaseProductRepository,
    fields: Iterable[str] | None = None,
    mapping: RefMappingConfig | None = None,
) -> Record:
    """Replace relationship ID arrays with SummaryRef lists.

    Args:
        product: Product record holding arrays of related product IDs.
        repository: Repository used for the single batch fetch.
        fields: Relationship fields to hydrate. None means all known ones.
        mapping: Attribute aliases for SummaryRef mapping.

    Returns:
        A shallow copy of ``product`` with the targeted non-empty fields
        replaced; the input itself when there is nothing to hydrate.
    """
    field_ids: dict[str, list[str]] = {}
    for name in target_relationship_fields(fields):
        value = product.get(name)
        if isinstance(value, list) and value:
            ids = [item for item in value if isinstance(item, str)]
            if ids:
                field_ids[name] = ids

    unique_ids = list(dict.fromkeys(i for ids in field_ids.values() for i in ids))
    if not unique_ids:
        return dict(product)

    logger.debug("Hydrating %d relationship field(s), %d unique ID(s)", len(field_ids), len(unique_ids))
    by_id: dict[str, SummaryRef] = {}
    try:
        fetched = await repository.get_by_ids(unique_ids)
    except Exception as exc:
        logger.warning("Relationship batch fetch failed: %s", exc)
        fetched = []

    for record in fetched:
        record_id = record.get("id")
        if isinstance(record_id, str):
            by_id[record_id] = to_summary_ref(record, mapping)

    hydrated: Record = dict(product)
    for name, ids in field_ids.items():
        hydrated[name] = [by_id.get(i) or SummaryRef.empty(i) for i in ids]
    return hydrated
