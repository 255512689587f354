"""Google Maps geocoding adapter."""

from __future__ import annotations

from .client import GoogleMapsAPIError, GoogleMapsGeocodingProvider
from .schema import GeocodeResponse, TextSearchResponse
from .translator import translate_geocode, translate_text_search

__all__ = [
    "GeocodeResponse",
    "GoogleMapsAPIError",
    "GoogleMapsGeocodingProvider",
    "TextSearchResponse",
    "translate_geocode",
    "translate_text_search",
]
