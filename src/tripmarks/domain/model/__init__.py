"""Public domain model surface."""

from __future__ import annotations

from tripmarks.domain.model.base import Entity, new_id
from tripmarks.domain.model.enums import (
    PlaceCategory,
    PlaceStatus,
    ProcessingStatus,
    SourceType,
    TextInputType,
)
from tripmarks.domain.model.extraction import AnalysisResult, ExtractedCandidate
from tripmarks.domain.model.geo import Coordinates, are_near, haversine_distance_m
from tripmarks.domain.model.items import (
    CrawledPage,
    Image,
    ImagePayload,
    ItemPayload,
    ProcessableItem,
    Project,
    TextInput,
    TextPayload,
)
from tripmarks.domain.model.places import GeocodeResult, NewPlace, Place, maps_url_for

__all__ = [
    "AnalysisResult",
    "Coordinates",
    "CrawledPage",
    "Entity",
    "ExtractedCandidate",
    "GeocodeResult",
    "Image",
    "ImagePayload",
    "ItemPayload",
    "NewPlace",
    "Place",
    "PlaceCategory",
    "PlaceStatus",
    "ProcessableItem",
    "ProcessingStatus",
    "Project",
    "SourceType",
    "TextInput",
    "TextInputType",
    "TextPayload",
    "are_near",
    "haversine_distance_m",
    "maps_url_for",
    "new_id",
]
