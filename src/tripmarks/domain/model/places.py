"""Places known to a project and the geocoding results that seed them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from tripmarks.domain.model.base import Entity
from tripmarks.domain.model.enums import PlaceStatus
from tripmarks.domain.model.geo import Coordinates

if TYPE_CHECKING:
    from uuid import UUID


def maps_url_for(place_id: str) -> str:
    return f"https://www.google.com/maps/place/?q=place_id:{place_id}"


@dataclass(frozen=True, slots=True, kw_only=True)
class GeocodeResult:
    latitude: float
    longitude: float
    formatted_address: str
    external_place_id: str | None = None
    maps_url: str | None = None
    rating: float | None = None
    rating_count: int | None = None
    price_level: int | None = None

    def __post_init__(self) -> None:
        # validates WGS84 ranges
        Coordinates(self.latitude, self.longitude)

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.latitude, self.longitude)


@dataclass(frozen=True, slots=True, kw_only=True)
class NewPlace:
    """Payload for creating a place the pipeline discovered."""

    project_id: UUID
    name: str
    category: str
    note: str | None
    latitude: float
    longitude: float
    status: PlaceStatus = PlaceStatus.AUTO
    external_place_id: str | None = None
    formatted_address: str | None = None
    maps_url: str | None = None
    rating: float | None = None
    rating_count: int | None = None
    price_level: int | None = None

    @classmethod
    def from_geocode(
        cls,
        *,
        project_id: UUID,
        name: str,
        category: str,
        note: str | None,
        geocode: GeocodeResult,
    ) -> NewPlace:
        return cls(
            project_id=project_id,
            name=name,
            category=category,
            note=note,
            latitude=geocode.latitude,
            longitude=geocode.longitude,
            external_place_id=geocode.external_place_id,
            formatted_address=geocode.formatted_address,
            maps_url=geocode.maps_url,
            rating=geocode.rating,
            rating_count=geocode.rating_count,
            price_level=geocode.price_level,
        )


@dataclass(eq=False, kw_only=True)
class Place(Entity):
    project_id: UUID
    name: str
    category: str
    latitude: float
    longitude: float
    note: str | None = None
    status: PlaceStatus = PlaceStatus.AUTO
    external_place_id: str | None = None
    formatted_address: str | None = None
    maps_url: str | None = None
    rating: float | None = None
    rating_count: int | None = None
    price_level: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_new(cls, data: NewPlace) -> Place:
        return cls(
            project_id=data.project_id,
            name=data.name,
            category=data.category,
            latitude=data.latitude,
            longitude=data.longitude,
            note=data.note,
            status=data.status,
            external_place_id=data.external_place_id,
            formatted_address=data.formatted_address,
            maps_url=data.maps_url,
            rating=data.rating,
            rating_count=data.rating_count,
            price_level=data.price_level,
        )

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.latitude, self.longitude)
