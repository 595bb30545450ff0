# src/lookup/scoring.py - v1
"""Candidate scoring and best-match selection.

``score_match`` grades one record against the identifier using cheap
normalized comparisons; ``select_best`` applies the fixed ambiguity margin.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, NamedTuple

from catalogref.core.models import FieldScore, Match, MatchReason
from catalogref.core.normalizer import normalize, similarity
from catalogref.core.paths import attribute_map, get_string

STANDARD_FIELDS: tuple[str, ...] = ("sku", "label", "gtin")

EXACT_SCORE = 1.0
PREFIX_SCORE = 0.9
SUBSTRING_SCORE = 0.75
SIMILARITY_THRESHOLD = 0.6
# Floor for a record returned by the repository that matched nothing.
# Indistinguishable from a genuine 0.1 similarity; reason stays "no_match".
NO_MATCH_FLOOR = 0.1
SELECTION_MARGIN = 0.15


class Score(NamedTuple):
    confidence: float
    reason: MatchReason


def candidate_values(record: Mapping[str, Any], matched_field: str | None = None) -> list[str]:
    """String values worth comparing: standard fields, the searched field, string attributes."""
    values: list[str] = []
    for field in STANDARD_FIELDS:
        value = get_string(record, field)
        if value:
            values.append(value)

    if matched_field:
        value = get_string(record, matched_field)
        if value:
            values.append(value)

    for value in attribute_map(record).values():
        if isinstance(value, str) and value:
            values.append(value)
    return values


def score_match(
    identifier: str,
    record: Mapping[str, Any],
    matched_field: str | None = None,
) -> Score:
    """Score a repository record against the identifier.

    Args:
        identifier: Raw identifier being resolved.
        record: Candidate record returned by a search stage.
        matched_field: Dotted path the stage searched, if any.

    Returns:
        Score of the best candidate value; an exact normalized match
        returns immediately.
    """
    id_norm = normalize(identifier)
    best = 0.0
    reason: MatchReason = "no_match"

    for value in candidate_values(record, matched_field):
        value_norm = normalize(value)

        if id_norm and value_norm == id_norm:
            return Score(EXACT_SCORE, "normalized_exact_match")
        if not id_norm or not value_norm:
            continue

        if value_norm.startswith(id_norm) or id_norm.startswith(value_norm):
            if PREFIX_SCORE > best:
                best, reason = PREFIX_SCORE, "prefix_match"

        if id_norm in value_norm or value_norm in id_norm:
            if SUBSTRING_SCORE > best:
                best, reason = SUBSTRING_SCORE, "substring_match"

        ratio = similarity(identifier, value)
        if ratio > best and ratio > SIMILARITY_THRESHOLD:
            best, reason = ratio, "similarity_match"

    if best <= 0.0:
        return Score(NO_MATCH_FLOOR, "no_match")
    return Score(best, reason)


def rank_matches(matches: Iterable[Match]) -> list[Match]:
    """Collapse duplicates by record id (highest confidence wins), sort descending.

    The sort is stable, so equal confidences keep stage order.
    """
    best_by_id: dict[str, Match] = {}
    for match in matches:
        current = best_by_id.get(match.id)
        if current is None or match.confidence > current.confidence:
            best_by_id[match.id] = match
    return sorted(best_by_id.values(), key=lambda m: m.confidence, reverse=True)


def select_best(matches: Sequence[Match]) -> Match | None:
    """Top match when it is alone or clears the runner-up by SELECTION_MARGIN.

    Args:
        matches: Matches sorted by confidence, descending.
    """
    if not matches:
        return None
    if len(matches) == 1:
        return matches[0]
    margin = round(matches[0].confidence - matches[1].confidence, 9)
    return matches[0] if margin >= SELECTION_MARGIN else None


def score_fields(
    identifier: str,
    record: Mapping[str, Any],
    fields: Sequence[str] | None = None,
) -> FieldScore:
    """Best containment similarity of ``identifier`` over explicit fields.

    Args:
        identifier: Identifier to compare.
        record: Product data; nested values are addressed by dotted path.
        fields: Fields to check, defaults to sku, label and gtin.

    Returns:
        FieldScore for the best field, or a zero score when nothing matched.
    """
    checked = list(fields) if fields else list(STANDARD_FIELDS)
    best = FieldScore(fields_checked=checked)

    for field in checked:
        value = get_string(record, field)
        if value is None:
            continue
        ratio = similarity(identifier, value)
        if ratio > best.confidence:
            best = FieldScore(
                confidence=ratio,
                matched_field=field,
                matched_value=value,
                reason="Exact match (normalized)" if ratio == 1.0 else "Partial match (substring)",
                fields_checked=checked,
            )
    return best
