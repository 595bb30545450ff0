# src/core/patterns.py - v1
"""Compile-or-default helper for externally configured regular expressions.

Patterns come from configuration and may be invalid. A bad or empty
pattern is replaced by the built-in default for that slot; callers always
receive a compiled pattern and the fallback policy lives here only.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache

logger = logging.getLogger(__name__)


@lru_cache(maxsize=64)
def compile_or_default(pattern: str | None, default: str) -> re.Pattern[str]:
    """Compile ``pattern``, falling back to ``default`` when it is empty or invalid.

    Args:
        pattern: Configured regex source (may be None, empty or malformed).
        default: Built-in regex source, assumed valid.

    Returns:
        A compiled pattern, never raises for a bad ``pattern``.
    """
    if not pattern:
        return re.compile(default)
    try:
        return re.compile(pattern)
    except re.error as exc:
        logger.debug("Invalid pattern %r (%s), using default %r", pattern, exc, default)
        return re.compile(default)


def first_group(pattern: re.Pattern[str], value: str | None) -> str | None:
    """First capture group of ``pattern`` searched in ``value``.

    Returns None when ``value`` is empty, nothing matches, the pattern has
    no capture group or the group did not participate in the match.
    """
    if not value or pattern.groups < 1:
        return None
    match = pattern.search(value)
    if match is None:
        return None
    return match.group(1) or None
