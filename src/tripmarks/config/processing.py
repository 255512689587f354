"""Defaults for the place extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass

from tripmarks.domain.model.enums import PlaceCategory

from .env import parse_env_number
from .errors import ConfigurationError

DEFAULT_CONFIDENCE_THRESHOLD = 0.5
DEFAULT_PROXIMITY_THRESHOLD_M = 100.0
DEFAULT_PLACE_CATEGORIES: tuple[str, ...] = tuple(category.value for category in PlaceCategory)


@dataclass(frozen=True, slots=True)
class ProcessingConfig:
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    proximity_threshold_m: float = DEFAULT_PROXIMITY_THRESHOLD_M
    categories: tuple[str, ...] = DEFAULT_PLACE_CATEGORIES
    max_concurrency: int | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ConfigurationError(
                f"Confidence threshold must be within [0, 1], got {self.confidence_threshold}"
            )
        if self.proximity_threshold_m <= 0:
            raise ConfigurationError("Proximity threshold must be positive")
        if PlaceCategory.OTHER.value not in self.categories:
            raise ConfigurationError(f"Categories must include {PlaceCategory.OTHER.value!r}")
        if self.max_concurrency is not None and self.max_concurrency < 1:
            raise ConfigurationError("Max concurrency must be at least 1")


def get_processing_config() -> ProcessingConfig:
    threshold = parse_env_number("TRIPMARKS_CONFIDENCE_THRESHOLD", float)
    proximity = parse_env_number("TRIPMARKS_PROXIMITY_METERS", float)
    concurrency = parse_env_number("TRIPMARKS_MAX_CONCURRENCY", int)
    return ProcessingConfig(
        confidence_threshold=(
            DEFAULT_CONFIDENCE_THRESHOLD if threshold is None else threshold
        ),
        proximity_threshold_m=DEFAULT_PROXIMITY_THRESHOLD_M if proximity is None else proximity,
        max_concurrency=concurrency,
    )
