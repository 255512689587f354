"""Two-stage driver turning pending items into places.

Stage one analyses every item concurrently and touches no shared state. Stage
two folds over the analysis results in their original order, one item at a
time, and is the only place where duplicates are resolved, places are created,
and items are linked or marked. Places created while folding are appended to
``ProcessingContext.existing_places`` right away, so later items in the same
batch converge onto them instead of creating twins.
"""

from __future__ import annotations

import asyncio
from contextlib import nullcontext
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING, Any

from tripmarks.config.processing import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_PLACE_CATEGORIES,
    DEFAULT_PROXIMITY_THRESHOLD_M,
)
from tripmarks.domain.errors import AnalysisError, CommitError
from tripmarks.domain.extraction_pipeline.deduplication import find_duplicate
from tripmarks.domain.extraction_pipeline.outcomes import (
    BatchSummary,
    ItemMessages,
    ItemOutcome,
    empty_summary,
    summarize,
)
from tripmarks.domain.model import NewPlace, PlaceCategory, ProcessingStatus

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from tripmarks.config.processing import ProcessingConfig
    from tripmarks.domain.extraction_pipeline.context import ProcessingContext
    from tripmarks.domain.extraction_pipeline.item_kinds import ItemKind
    from tripmarks.domain.model import AnalysisResult, ExtractedCandidate, ProcessableItem
    from tripmarks.domain.ports import (
        AnalysisService,
        ItemRepository,
        PlaceRepository,
        ProcessingRepositories,
    )

log = getLogger(__name__)


@dataclass(slots=True)
class _Analysis:
    item: ProcessableItem
    result: AnalysisResult | None = None
    error: Exception | None = None


@dataclass(slots=True)
class _CandidateTally:
    seen_names: set[str] = field(default_factory=set[str])
    linked: list[UUID] = field(default_factory=list["UUID"])
    created: list[UUID] = field(default_factory=list["UUID"])
    soft_error: str | None = None

    @property
    def success_count(self) -> int:
        return len(self.seen_names)


class ExtractionPipeline:
    """Extract, resolve, deduplicate and commit places for one kind of item."""

    def __init__(
        self,
        *,
        kind: ItemKind[Any],
        analysis: AnalysisService,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        proximity_threshold_m: float = DEFAULT_PROXIMITY_THRESHOLD_M,
        categories: Sequence[str] = DEFAULT_PLACE_CATEGORIES,
        max_concurrency: int | None = None,
        messages: ItemMessages | None = None,
    ) -> None:
        self.kind = kind
        self.confidence_threshold = confidence_threshold
        self.proximity_threshold_m = proximity_threshold_m
        self.categories = frozenset(category.lower() for category in categories)
        self.max_concurrency = max_concurrency
        self.messages = messages or ItemMessages()
        self._analysis = analysis

    @classmethod
    def from_config(
        cls,
        config: ProcessingConfig,
        *,
        kind: ItemKind[Any],
        analysis: AnalysisService,
        messages: ItemMessages | None = None,
    ) -> ExtractionPipeline:
        return cls(
            kind=kind,
            analysis=analysis,
            confidence_threshold=config.confidence_threshold,
            proximity_threshold_m=config.proximity_threshold_m,
            categories=config.categories,
            max_concurrency=config.max_concurrency,
            messages=messages,
        )

    async def execute(
        self,
        pending_items: Sequence[ProcessableItem],
        context: ProcessingContext,
        committer: ProcessingRepositories,
    ) -> BatchSummary:
        if not pending_items:
            return empty_summary(self.kind)

        log.info("Starting analysis for %d %s", len(pending_items), self.kind.plural)
        analyses = await self._analyze_all(pending_items, context)

        items = self.kind.repository(committer)
        outcomes: list[ItemOutcome] = []
        for analysis in analyses:
            outcome = await self._settle(analysis, context, committer.places, items)
            outcomes.append(self._record(items, outcome))

        summary = summarize(len(pending_items), outcomes)
        log.info(
            "Finished %s batch: total=%d, processed=%d, failed=%d",
            self.kind.plural,
            summary.total,
            summary.processed,
            summary.failed,
        )
        return summary

    async def _analyze_all(
        self,
        pending_items: Sequence[ProcessableItem],
        context: ProcessingContext,
    ) -> list[_Analysis]:
        limiter = (
            asyncio.Semaphore(self.max_concurrency) if self.max_concurrency is not None else None
        )

        async def analyze_one(item: ProcessableItem) -> _Analysis:
            if item.payload is None:
                return _Analysis(item, error=AnalysisError("No content to analyze"))
            try:
                async with limiter or nullcontext():
                    result = await self._analysis.analyze(
                        item.payload, context.destination, context.country
                    )
            except Exception as exc:  # noqa: BLE001
                log.warning("Analysis failed for %s %s: %s", self.kind.source_type, item.id, exc)
                return _Analysis(item, error=exc)
            log.debug(
                "Analysis for %s yielded %d candidate(s)", item.id, len(result.candidates)
            )
            return _Analysis(item, result=result)

        return list(await asyncio.gather(*(analyze_one(item) for item in pending_items)))

    async def _settle(
        self,
        analysis: _Analysis,
        context: ProcessingContext,
        places: PlaceRepository,
        items: ItemRepository[Any],
    ) -> ItemOutcome:
        item = analysis.item
        try:
            return await self._process_item(analysis, context, places, items)
        except CommitError as exc:
            log.warning("Store rejected a write for %s: %s", item.id, exc)
        except Exception:
            log.exception("Unexpected error while processing %s", item.id)
        return ItemOutcome(
            item_id=item.id,
            status=ProcessingStatus.FAILED,
            error_message=self.messages.processing_error,
        )

    async def _process_item(
        self,
        analysis: _Analysis,
        context: ProcessingContext,
        places: PlaceRepository,
        items: ItemRepository[Any],
    ) -> ItemOutcome:
        item = analysis.item
        result = analysis.result
        if analysis.error is not None or result is None:
            return ItemOutcome(
                item_id=item.id,
                status=ProcessingStatus.FAILED,
                error_message=self.kind.analysis_error_message,
            )

        if not result.candidates:
            log.info("No places found for %s", item.id)
            return ItemOutcome(
                item_id=item.id,
                status=ProcessingStatus.FAILED,
                raw_text=result.raw_text,
                error_message=self.messages.no_places_recognized,
            )

        tally = await self._process_candidates(item, result.candidates, context, places, items)
        if tally.success_count:
            log.info("Item %s processed with %d place(s)", item.id, tally.success_count)
            return ItemOutcome(
                item_id=item.id,
                status=ProcessingStatus.PROCESSED,
                raw_text=result.raw_text,
                linked_place_ids=tuple(tally.linked),
                created_place_ids=tuple(tally.created),
            )

        log.info("Item %s failed: no valid places", item.id)
        return ItemOutcome(
            item_id=item.id,
            status=ProcessingStatus.FAILED,
            raw_text=result.raw_text,
            error_message=tally.soft_error or self.messages.no_valid_places,
        )

    async def _process_candidates(
        self,
        item: ProcessableItem,
        candidates: Sequence[ExtractedCandidate],
        context: ProcessingContext,
        places: PlaceRepository,
        items: ItemRepository[Any],
    ) -> _CandidateTally:
        tally = _CandidateTally()
        for index, candidate in enumerate(candidates, start=1):
            log.debug("Candidate %d/%d for %s: %r", index, len(candidates), item.id, candidate.name)

            if candidate.confidence < self.confidence_threshold:
                log.info("Low confidence for %r: %.2f", candidate.name, candidate.confidence)
                tally.soft_error = self.messages.low_confidence
                continue

            lowered = candidate.name.lower()
            if lowered in tally.seen_names:
                log.debug("Skipping repeated %r within %s", candidate.name, item.id)
                continue

            geocode = await context.resolve(candidate)
            if geocode is None:
                log.info("Could not locate %r", candidate.name)
                tally.soft_error = self.messages.location_not_found
                continue

            duplicate = find_duplicate(
                context.existing_places,
                candidate.name,
                geocode.external_place_id,
                geocode.coordinates,
                proximity_threshold_m=self.proximity_threshold_m,
            )
            if duplicate.match is not None:
                log.info(
                    "Linking %s to existing place %r (%s)",
                    item.id,
                    duplicate.match.name,
                    duplicate.reason,
                )
                items.link_to_place(item.id, duplicate.match.id)
                place_id = duplicate.match.id
            else:
                place = places.create(
                    NewPlace.from_geocode(
                        project_id=item.project_id,
                        name=candidate.name,
                        category=self._category(candidate.category),
                        note=candidate.note,
                        geocode=geocode,
                    )
                )
                context.remember(place)
                log.info("Created place %r (%s)", place.name, place.id)
                items.link_to_place(item.id, place.id)
                tally.created.append(place.id)
                place_id = place.id

            if place_id not in tally.linked:
                tally.linked.append(place_id)
            tally.seen_names.add(lowered)
        return tally

    def _category(self, raw: str) -> str:
        normalized = raw.strip().lower()
        return normalized if normalized in self.categories else PlaceCategory.OTHER.value

    def _record(self, items: ItemRepository[Any], outcome: ItemOutcome) -> ItemOutcome:
        try:
            items.update(
                outcome.item_id,
                status=outcome.status,
                raw_text=outcome.raw_text,
                error_message=outcome.error_message,
            )
        except CommitError:
            log.exception("Could not record status for %s", outcome.item_id)
            return replace(
                outcome,
                status=ProcessingStatus.FAILED,
                error_message=self.messages.processing_error,
            )
        return outcome
