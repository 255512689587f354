"""Minimal Pydantic models for the Google Maps Places and Geocoding APIs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GoogleMapsBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class LatLng(GoogleMapsBaseModel):
    lat: float
    lng: float


class Geometry(GoogleMapsBaseModel):
    location: LatLng


class PlaceSearchResult(GoogleMapsBaseModel):
    place_id: str | None = None
    name: str | None = None
    formatted_address: str | None = None
    geometry: Geometry | None = None
    rating: float | None = None
    user_ratings_total: int | None = None
    price_level: int | None = None


class GeocodeAddressResult(GoogleMapsBaseModel):
    place_id: str | None = None
    formatted_address: str
    geometry: Geometry


class MapsResponse(GoogleMapsBaseModel):
    status: str
    error_message: str | None = None


class TextSearchResponse(MapsResponse):
    results: list[PlaceSearchResult] = Field(default_factory=list["PlaceSearchResult"])


class GeocodeResponse(MapsResponse):
    results: list[GeocodeAddressResult] = Field(default_factory=list["GeocodeAddressResult"])
