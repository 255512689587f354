"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ProcessingStatus(StrEnum):
    PENDING = "pending"
    PROCESSED = "processed"
    FAILED = "failed"


class PlaceStatus(StrEnum):
    AUTO = "auto"
    MANUAL = "manual"


class PlaceCategory(StrEnum):
    RESTAURANT = "restaurant"
    CAFE = "cafe"
    ATTRACTION = "attraction"
    SHOPPING = "shopping"
    ACCOMMODATION = "accommodation"
    OTHER = "other"


class SourceType(StrEnum):
    """Discriminator for the kind of item a place was extracted from."""

    IMAGE = "image"
    TEXT = "text"


class TextInputType(StrEnum):
    TEXT = "text"
    URL = "url"
