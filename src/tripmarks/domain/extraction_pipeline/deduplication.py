"""Match a resolved candidate against the places a project already knows."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from tripmarks.config.processing import DEFAULT_PROXIMITY_THRESHOLD_M
from tripmarks.domain.model import Coordinates, are_near

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

log = getLogger(__name__)


class ExistingPlace(Protocol):
    """Shape of a known place as far as duplicate detection is concerned."""

    @property
    def id(self) -> UUID: ...

    @property
    def name(self) -> str: ...

    @property
    def latitude(self) -> float: ...

    @property
    def longitude(self) -> float: ...

    @property
    def external_place_id(self) -> str | None: ...


@dataclass(frozen=True, slots=True)
class DuplicateMatch[TPlace: ExistingPlace]:
    match: TPlace | None = None
    reason: str | None = None

    @property
    def is_duplicate(self) -> bool:
        return self.match is not None


def find_duplicate[TPlace: ExistingPlace](
    existing_places: Sequence[TPlace],
    candidate_name: str,
    candidate_external_id: str | None,
    candidate_coords: Coordinates,
    *,
    proximity_threshold_m: float = DEFAULT_PROXIMITY_THRESHOLD_M,
) -> DuplicateMatch[TPlace]:
    """Return the first known place matching by external id, then name, then distance.

    Each criterion is checked across the whole list before the next one, so an
    external id match anywhere beats a nearby place earlier in the list. A name
    match wins even when the two places are far apart.
    """

    if candidate_external_id:
        for place in existing_places:
            if place.external_place_id and place.external_place_id == candidate_external_id:
                log.debug("Duplicate of %s by external id %s", place.id, candidate_external_id)
                return DuplicateMatch(place, "external_id")

    lowered = candidate_name.lower()
    for place in existing_places:
        if place.name.lower() == lowered:
            log.debug("Duplicate of %s by name %r", place.id, candidate_name)
            return DuplicateMatch(place, "name")

    for place in existing_places:
        if are_near(
            Coordinates(place.latitude, place.longitude),
            candidate_coords,
            proximity_threshold_m,
        ):
            log.debug("Duplicate of %s by proximity", place.id)
            return DuplicateMatch(place, "proximity")

    return DuplicateMatch()
