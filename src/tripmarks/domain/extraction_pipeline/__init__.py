"""Place extraction pipeline: analyse items, resolve places, commit links."""

from __future__ import annotations

from .context import ProcessingContext
from .deduplication import DuplicateMatch, ExistingPlace, find_duplicate
from .geocoding import GeocodeCache, GeocodingCascade, Strategy
from .item_kinds import IMAGE_KIND, TEXT_INPUT_KIND, ItemKind
from .orchestrator import ExtractionPipeline
from .outcomes import BatchSummary, ItemMessages, ItemOutcome, empty_summary, summarize
from .runner import run_extraction_batch

__all__ = [
    "IMAGE_KIND",
    "TEXT_INPUT_KIND",
    "BatchSummary",
    "DuplicateMatch",
    "ExistingPlace",
    "ExtractionPipeline",
    "GeocodeCache",
    "GeocodingCascade",
    "ItemKind",
    "ItemMessages",
    "ItemOutcome",
    "ProcessingContext",
    "Strategy",
    "empty_summary",
    "find_duplicate",
    "run_extraction_batch",
    "summarize",
]
