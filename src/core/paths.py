# src/core/paths.py - v1
"""Dotted-path access on loosely-typed repository records.

``attributes.mpn`` walks nested mappings one segment at a time. A missing
key, a ``None`` or a non-mapping intermediate (lists included, there is no
implicit traversal) yields "not found" instead of raising. Some catalog
APIs flatten custom attributes into the top level, so a literal
``"attributes.mpn"`` key is tried as a fallback.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

MISSING: Any = object()


def get_path(record: Mapping[str, Any], path: str) -> Any:
    """Resolve a dotted path.

    Args:
        record: Record (or any mapping) to read from.
        path: Dotted path such as ``"sku"`` or ``"attributes.mpn"``.

    Returns:
        The value found, or ``MISSING`` when any segment is absent.
    """
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            current = MISSING
            break
        current = current[part]

    if (current is MISSING or current is None) and "." in path:
        flat = record.get(path, MISSING)
        if flat is not MISSING and flat is not None:
            return flat
    return current


def get_string(record: Mapping[str, Any], path: str) -> str | None:
    """Resolve a dotted path and return the value only if it is a string."""
    value = get_path(record, path)
    return value if isinstance(value, str) else None


def attribute_map(record: Mapping[str, Any]) -> Mapping[str, Any]:
    """The record's nested ``attributes`` mapping, or an empty one."""
    attrs = record.get("attributes")
    return attrs if isinstance(attrs, Mapping) else {}
