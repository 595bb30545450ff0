# src/core/normalizer.py - v1
"""Identifier canonicalization and containment similarity.

``normalize`` keeps only ASCII letters and digits and upper-cases them, so
"pd041-828si" and "PD041 828 SI" compare equal. ``similarity`` is a cheap
containment ratio, not an edit distance.
"""

from __future__ import annotations

import re

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")
_TOKEN_SPLIT = re.compile(r"[^A-Za-z0-9]+")


def normalize(value: str) -> str:
    """Strip every non-alphanumeric character and upper-case the rest."""
    return _NON_ALNUM.sub("", value).upper()


def similarity(a: str, b: str) -> float:
    """Containment similarity of two strings after normalization.

    Returns:
        1.0 for equal normalized forms, len(shorter) / len(longer) when one
        normalized form contains the other, otherwise 0.0 (also when either
        side normalizes to the empty string).
    """
    norm_a = normalize(a)
    norm_b = normalize(b)

    if not norm_a or not norm_b:
        return 0.0
    if norm_a == norm_b:
        return 1.0

    if len(norm_a) > len(norm_b):
        longer, shorter = norm_a, norm_b
    else:
        longer, shorter = norm_b, norm_a

    if shorter in longer:
        return len(shorter) / len(longer)
    return 0.0


def tokenize(value: str) -> list[str]:
    """Split on runs of non-alphanumerics, dropping empty tokens."""
    return [t for t in _TOKEN_SPLIT.split(value) if t]
