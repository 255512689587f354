"""Per-batch state shared between the pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tripmarks.domain.extraction_pipeline.geocoding import GeocodeCache

if TYPE_CHECKING:
    from tripmarks.domain.model import ExtractedCandidate, GeocodeResult, Place, Project
    from tripmarks.domain.ports import GeocodeFetcher


@dataclass(slots=True)
class ProcessingContext:
    """Everything one batch needs; never shared between batches.

    ``existing_places`` only grows during a run, and only the sequential stage
    appends to it.
    """

    project: Project
    existing_places: list[Place]
    geocode_fetcher: GeocodeFetcher
    geocode_cache: GeocodeCache = field(default_factory=GeocodeCache)

    @property
    def destination(self) -> str:
        return self.project.destination

    @property
    def country(self) -> str | None:
        return self.project.country or None

    async def resolve(self, candidate: ExtractedCandidate) -> GeocodeResult | None:
        return await self.geocode_cache.get_or_fetch(
            candidate.name,
            candidate.name_en,
            self.destination,
            self.country,
            self.geocode_fetcher,
        )

    def remember(self, place: Place) -> None:
        self.existing_places.append(place)
