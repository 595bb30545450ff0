# src/lookup/engine.py - v1
"""Lookup engine: resolve an identifier to catalog records.

Flow of ``find_by_identifier``:
  1. Cache read
  2. Type detection (or the caller's explicit type)
  3. Direct ID fetch for internal IDs, returning immediately on success
  4. Staged searches from lookup.planner, run one after another
  5. Dedupe, rank and select under the ambiguity margin
  6. Cache write

A failing repository call never escapes: the stage is recorded as
``<tag>_failed`` in the plan and the next stage runs.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import Any

from catalogref.cache.base_cache_store import BaseCacheStore
from catalogref.cache.cache_factory import create_cache_store
from catalogref.cache.models import lookup_cache_key
from catalogref.config.models import LookupConfig
from catalogref.core.models import (
    IdentifierType,
    LookupResult,
    Match,
    MatchReason,
    ProductCriteria,
    Record,
)
from catalogref.core.paths import get_string
from catalogref.logging.context import clear_context, set_lookup_context, set_stage_context
from catalogref.lookup.identifier import detect_identifier_type
from catalogref.lookup.planner import (
    CRITERIA_TAG,
    DIRECT_ID_TAG,
    SearchStage,
    plan_broad_stage,
    plan_criteria_search,
    plan_exact_stages,
    plan_text_stage,
    request_attributes,
)
from catalogref.lookup.scoring import rank_matches, score_match, select_best
from catalogref.repository.base_repository import BaseProductRepository
from catalogref.repository.models import Pagination

logger = logging.getLogger(__name__)

# A stage hit at or above this confidence ends the exact-match stages.
EARLY_EXIT_CONFIDENCE = 0.99
CRITERIA_BASE_CONFIDENCE = 0.5
CRITERIA_KEY_CONFIDENCE = 0.9


def build_match(
    record: Mapping[str, Any],
    matched_field: str,
    confidence: float,
    reason: MatchReason,
) -> Match:
    """Wrap a repository record into a Match."""
    return Match(
        id=str(record.get("id", "")),
        sku=get_string(record, "sku"),
        label=get_string(record, "label"),
        gtin=get_string(record, "gtin"),
        matched_field=matched_field,
        confidence=confidence,
        reason=reason,
        raw_record=dict(record),
    )


class LookupEngine:
    """Staged identifier resolution against a product repository.

    Args:
        repository: Product repository collaborator.
        config: Lookup configuration. Defaults to LookupConfig().
        cache: Result cache. Defaults to the store described by ``config``.
    """

    def __init__(
        self,
        repository: BaseProductRepository,
        config: LookupConfig | None = None,
        cache: BaseCacheStore | None = None,
    ) -> None:
        self._repository = repository
        self._config = config or LookupConfig()
        self._cache = cache if cache is not None else create_cache_store(self._config)

    @property
    def config(self) -> LookupConfig:
        return self._config

    @property
    def cache(self) -> BaseCacheStore:
        return self._cache

    async def find_by_identifier(
        self,
        identifier: str,
        explicit_type: IdentifierType | None = None,
        limit: int | None = None,
    ) -> LookupResult:
        """Resolve ``identifier`` to ranked matches and an optional selection.

        Args:
            identifier: Raw identifier (ID, SKU, MPN, MNO, GTIN or label).
            explicit_type: Skip detection and search as this type.
            limit: Page size per search stage. Defaults to the configured page size.

        Returns:
            LookupResult; ``selected`` is None when nothing or several
            indistinguishable candidates were found.

        Raises:
            ValueError: If ``limit`` is not positive.
        """
        limit = self._config.page_size if limit is None else limit
        if limit <= 0:
            raise ValueError("limit must be > 0")

        key = lookup_cache_key(identifier, explicit_type, limit)
        cached = await self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %r", identifier)
            return cached

        set_lookup_context(uuid.uuid4().hex[:12], identifier)
        try:
            result = await self._resolve(identifier, explicit_type, limit)
        finally:
            clear_context()

        await self._cache.set(key, result)
        return result

    async def find_products(self, criteria: ProductCriteria) -> LookupResult:
        """Multi-criteria search: records matching any supplied criterion.

        Every record scores 0.5, raised to 0.9 when its SKU or GTIN equals
        the supplied one. The first match is always selected.
        """
        plan = [CRITERIA_TAG]
        groups, attributes = plan_criteria_search(criteria, self._config)

        try:
            rows = await self._repository.search_by_criteria(
                groups, attributes, Pagination(page=1, page_size=criteria.limit)
            )
        except Exception as exc:
            logger.warning("Multi-criteria search failed: %s", exc)
            plan.append(f"{CRITERIA_TAG}_failed")
            return LookupResult(plan=plan)

        matches: list[Match] = []
        for row in rows:
            confidence = CRITERIA_BASE_CONFIDENCE
            if criteria.sku and row.get("sku") == criteria.sku:
                confidence = CRITERIA_KEY_CONFIDENCE
            if criteria.gtin and get_string(row, "gtin") == criteria.gtin:
                confidence = CRITERIA_KEY_CONFIDENCE
            matches.append(build_match(row, "multi_criteria", confidence, "multi_criteria_match"))

        matches.sort(key=lambda m: m.confidence, reverse=True)
        return LookupResult(selected=matches[0] if matches else None, matches=matches, plan=plan)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _resolve(
        self,
        identifier: str,
        explicit_type: IdentifierType | None,
        limit: int,
    ) -> LookupResult:
        detection = detect_identifier_type(identifier)
        id_type: IdentifierType = explicit_type or detection.type
        plan = [
            f"detected_type:{id_type}({detection.confidence})",
            f"search_fields:{','.join(self._config.search_fields)}",
        ]

        if id_type == "internal_id":
            direct = await self._direct_lookup(identifier, plan)
            if direct is not None:
                logger.info("Resolved %r by direct ID lookup", identifier)
                return LookupResult(selected=direct, matches=[direct], plan=plan)

        matches: list[Match] = []
        for stage in plan_exact_stages(identifier, id_type, self._config):
            found = await self._run_stage(identifier, stage, limit, plan)
            matches.extend(found)
            if any(m.confidence >= EARLY_EXIT_CONFIDENCE for m in found):
                break

        if not matches:
            matches.extend(
                await self._run_stage(identifier, plan_text_stage(identifier, self._config), limit, plan)
            )

        if not matches:
            matches.extend(
                await self._run_stage(identifier, plan_broad_stage(identifier, self._config), limit, plan)
            )

        ranked = rank_matches(matches)
        selected = select_best(ranked)
        logger.info(
            "Lookup of %r (%s): %d match(es), %s",
            identifier, id_type, len(ranked),
            f"selected {selected.id}" if selected else "no selection",
        )
        return LookupResult(selected=selected, matches=ranked, plan=plan)

    async def _direct_lookup(self, identifier: str, plan: list[str]) -> Match | None:
        plan.append(DIRECT_ID_TAG)
        set_stage_context(DIRECT_ID_TAG)
        try:
            record = await self._repository.get_by_id(identifier.strip())
        except Exception as exc:
            logger.warning("Stage %s failed: %s", DIRECT_ID_TAG, exc)
            plan.append(f"{DIRECT_ID_TAG}_failed")
            return None
        finally:
            set_stage_context(None)

        if record is None:
            plan.append("direct_id_not_found")
            return None
        return build_match(record, "id", 1.0, "direct_id_lookup")

    async def _run_stage(
        self,
        identifier: str,
        stage: SearchStage,
        limit: int,
        plan: list[str],
    ) -> list[Match]:
        """Execute one stage and score its rows. Failures yield no matches."""
        plan.append(stage.tag)
        set_stage_context(stage.tag)
        try:
            rows: list[Record] = await self._repository.search_by_criteria(
                stage.filter_groups,
                request_attributes(self._config, stage.extra_attributes),
                Pagination(page=1, page_size=limit),
            )
        except Exception as exc:
            logger.warning("Stage %s failed: %s", stage.tag, exc)
            plan.append(f"{stage.tag}_failed")
            return []
        finally:
            set_stage_context(None)

        matches: list[Match] = []
        for row in rows:
            score = score_match(identifier, row, stage.matched_field)
            matches.append(build_match(row, stage.tag, score.confidence, score.reason))
        logger.debug("Stage %s returned %d row(s)", stage.tag, len(rows))
        return matches
