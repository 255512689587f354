"""Pydantic models for the JSON contract the extraction prompts ask for."""

from __future__ import annotations

import re
from logging import getLogger
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

log = getLogger(__name__)

_FENCE = re.compile(r"```(?:json)?\s*")


class ClaudeBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ExtractedPlacePayload(ClaudeBaseModel):
    place_name: str = Field(min_length=1)
    place_name_en: str | None = None
    category: str = "other"
    comment: str | None = None
    confidence: float = 0.0

    @field_validator("place_name", "place_name_en", "comment", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        if isinstance(value, str):
            stripped = value.strip()
            return stripped or None
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _default_category(cls, value: object) -> object:
        return value or "other"

    @field_validator("confidence", mode="before")
    @classmethod
    def _missing_confidence(cls, value: object) -> object:
        return 0.0 if value is None else value

    @field_validator("confidence", mode="after")
    @classmethod
    def _clamp(cls, value: float) -> float:
        return min(max(value, 0.0), 1.0)


class PlaceExtractionPayload(ClaudeBaseModel):
    """Top-level reply; entries of ``places`` are validated one by one."""

    places: list[Any] = Field(default_factory=list[Any])
    raw_text: str = ""

    def valid_places(self) -> list[ExtractedPlacePayload]:
        valid: list[ExtractedPlacePayload] = []
        for index, entry in enumerate(self.places):
            try:
                valid.append(ExtractedPlacePayload.model_validate(entry))
            except ValidationError as exc:
                log.warning("Skipping malformed place entry %d: %s", index, exc.errors()[0]["msg"])
        return valid

    @field_validator("raw_text", mode="before")
    @classmethod
    def _coerce_raw_text(cls, value: object) -> object:
        return "" if value is None else value


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences the model sometimes wraps JSON in."""

    return _FENCE.sub("", text).strip()
