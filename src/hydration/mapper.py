# src/hydration/mapper.py - v1
"""Map a fetched catalog record into a SummaryRef."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

from catalogref.config.models import RefMappingConfig
from catalogref.core.models import SummaryRef
from catalogref.core.paths import attribute_map


def to_number_or_none(value: Any) -> float | None:
    """Finite number from an int, float or numeric string; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return float(value)
    return None


def _text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _first(attrs: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = attrs.get(key)
        if value is not None:
            return value
    return None


def to_summary_ref(record: Mapping[str, Any], mapping: RefMappingConfig | None = None) -> SummaryRef:
    """Build a SummaryRef; every sub-field is set, None when unknown.

    The SKU is read from the record's top level first, then from the
    configured attribute aliases. MPN, label and list price only come from
    attributes.
    """
    mapping = mapping or RefMappingConfig()
    attrs = attribute_map(record)

    sku = _text(record.get("sku"))
    if sku is None:
        sku = _text(_first(attrs, mapping.sku_attributes))

    return SummaryRef(
        id=str(record.get("id", "")),
        sku=sku,
        mpn=_text(_first(attrs, mapping.mpn_attributes)),
        label=_text(_first(attrs, mapping.label_attributes)),
        list_price=to_number_or_none(_first(attrs, mapping.list_price_attributes)),
    )
