"""Per-item outcomes and the batch summary folded from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from tripmarks.domain.model import ProcessingStatus

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from tripmarks.domain.extraction_pipeline.item_kinds import ItemKind


@dataclass(frozen=True, slots=True)
class ItemMessages:
    """Human-readable messages attached to item records.

    Override the defaults to localise what users see next to failed items.
    """

    no_places_recognized: str = "No places could be recognized."
    low_confidence: str = "The places found were too uncertain to add."
    location_not_found: str = "Some places could not be located."
    no_valid_places: str = "No valid places found."
    processing_error: str = "An error occurred during processing."


@dataclass(frozen=True, slots=True, kw_only=True)
class ItemOutcome:
    item_id: UUID
    status: ProcessingStatus
    raw_text: str | None = None
    error_message: str | None = None
    linked_place_ids: tuple[UUID, ...] = ()
    created_place_ids: tuple[UUID, ...] = ()

    @property
    def succeeded(self) -> bool:
        return self.status is ProcessingStatus.PROCESSED


@dataclass(frozen=True, slots=True)
class BatchSummary:
    total: int
    processed: int
    failed: int
    message: str
    outcomes: tuple[ItemOutcome, ...] = field(default_factory=tuple)

    @property
    def created_place_ids(self) -> tuple[UUID, ...]:
        return tuple(pid for outcome in self.outcomes for pid in outcome.created_place_ids)


PROCESSING_COMPLETE = "Processing complete"


def empty_summary(kind: ItemKind[Any]) -> BatchSummary:
    return BatchSummary(total=0, processed=0, failed=0, message=f"No pending {kind.plural}")


def summarize(total: int, outcomes: Sequence[ItemOutcome]) -> BatchSummary:
    processed = sum(1 for outcome in outcomes if outcome.succeeded)
    return BatchSummary(
        total=total,
        processed=processed,
        failed=len(outcomes) - processed,
        message=PROCESSING_COMPLETE,
        outcomes=tuple(outcomes),
    )
