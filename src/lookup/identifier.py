# src/lookup/identifier.py - v1
"""Identifier classifier: guess what kind of identifier a raw string is.

Rules are tried in priority order and the first one that fires wins, each
with a fixed confidence. The confidence is a heuristic, not a probability.
"""

from __future__ import annotations

import re

from catalogref.core.models import DetectionResult, IdentifierDescription

_INTERNAL_ID = re.compile(r"^[0-9a-f]{24}$", re.IGNORECASE)
_GTIN = re.compile(r"^(?:[0-9]{8}|[0-9]{12}|[0-9]{13}|[0-9]{14})$")
_WHITESPACE = re.compile(r"\s")
_DASHED = re.compile(r"^[A-Z0-9]+(?:-[A-Z0-9]+)+$", re.IGNORECASE)
# "LMI-..." style vendor prefix: a SKU, not a manufacturer part number.
_VENDOR_PREFIX = re.compile(r"^[A-Z]{3,}-", re.IGNORECASE)
_SKU = re.compile(r"^[A-Z0-9][A-Z0-9._-]*$", re.IGNORECASE)
_ALNUM = re.compile(r"^[A-Z0-9]+$", re.IGNORECASE)

PATTERN_DESCRIPTIONS: dict[str, str] = {
    "internal_id": "Internal object ID (24-character hex)",
    "gtin": "GTIN/UPC/EAN (8/12/13/14 digits)",
    "label": "Product label (contains spaces)",
    "mpn": "Manufacturer part number (dashed alphanumeric)",
    "sku": "SKU (alphanumeric with separators)",
    "mno": "Model number (pure alphanumeric)",
    "unknown": "Unrecognized format",
}

_UNKNOWN = DetectionResult(type="unknown", confidence=0.0)


def detect_identifier_type(raw: str) -> DetectionResult:
    """Classify a raw identifier.

    Args:
        raw: Identifier as typed by the caller. Surrounding whitespace is ignored.

    Returns:
        DetectionResult with the type of the first rule that fired.
    """
    s = raw.strip() if isinstance(raw, str) else ""
    if not s:
        return _UNKNOWN

    if _INTERNAL_ID.match(s):
        return DetectionResult(type="internal_id", confidence=1.0)
    if _GTIN.match(s):
        return DetectionResult(type="gtin", confidence=0.95)
    if _WHITESPACE.search(s):
        return DetectionResult(type="label", confidence=0.9)
    if _DASHED.match(s) and not _VENDOR_PREFIX.match(s):
        return DetectionResult(type="mpn", confidence=0.8)
    if _SKU.match(s):
        return DetectionResult(type="sku", confidence=0.7)
    # Unreachable for ASCII input: the SKU rule is a superset.
    if _ALNUM.match(s):
        return DetectionResult(type="mno", confidence=0.6)
    return _UNKNOWN


def describe_identifier(value: str) -> IdentifierDescription:
    """Detection result plus a readable description of the pattern that fired."""
    result = detect_identifier_type(value)
    return IdentifierDescription(
        input=value,
        type=result.type,
        confidence=result.confidence,
        pattern_matched=PATTERN_DESCRIPTIONS[result.type],
    )
