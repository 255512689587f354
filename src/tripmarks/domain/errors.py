"""Errors raised across the extraction pipeline boundary."""

from __future__ import annotations


class ExtractionError(RuntimeError):
    """Base class for failures while turning source items into places."""


class AnalysisError(ExtractionError):
    """Raised when the analysis service fails or returns unparseable content."""


class GeocodingProviderError(ExtractionError):
    """Raised when the geocoding provider cannot answer (transport or service error)."""


class CommitError(ExtractionError):
    """Raised when the store rejects a place, link, or status write."""


class ProjectNotFoundError(ExtractionError, LookupError):
    """Raised when a batch is requested for a project that does not exist."""


class CrawlError(ExtractionError):
    """Raised when a web page cannot be fetched or holds no readable text."""
