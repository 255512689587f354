"""Translate Google Maps payloads into domain geocode results."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tripmarks.domain.model import GeocodeResult, maps_url_for

if TYPE_CHECKING:
    from .schema import GeocodeResponse, TextSearchResponse


def translate_text_search(response: TextSearchResponse) -> GeocodeResult | None:
    """Return the most relevant result that carries a location."""

    for result in response.results:
        if result.geometry is None:
            continue
        location = result.geometry.location
        return GeocodeResult(
            latitude=location.lat,
            longitude=location.lng,
            formatted_address=result.formatted_address or result.name or "",
            external_place_id=result.place_id,
            maps_url=maps_url_for(result.place_id) if result.place_id else None,
            rating=result.rating,
            rating_count=result.user_ratings_total,
            price_level=result.price_level,
        )
    return None


def translate_geocode(response: GeocodeResponse) -> GeocodeResult | None:
    if not response.results:
        return None
    result = response.results[0]
    location = result.geometry.location
    return GeocodeResult(
        latitude=location.lat,
        longitude=location.lng,
        formatted_address=result.formatted_address,
        external_place_id=result.place_id,
        maps_url=maps_url_for(result.place_id) if result.place_id else None,
    )
