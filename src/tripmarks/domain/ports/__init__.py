"""Domain port definitions for adapters."""

from __future__ import annotations

from .analysis import AnalysisService
from .crawling import PageCrawler
from .geocoding import GeocodeFetcher, GeocodingProvider
from .persistence import (
    ImageRepository,
    ItemRepository,
    PlaceRepository,
    ProjectRepository,
    Repository,
    TextInputRepository,
)
from .unit_of_work import (
    ProcessingRepositories,
    ProcessingUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "AnalysisService",
    "GeocodeFetcher",
    "GeocodingProvider",
    "ImageRepository",
    "ItemRepository",
    "PageCrawler",
    "PlaceRepository",
    "ProcessingRepositories",
    "ProcessingUnitOfWork",
    "ProjectRepository",
    "Repository",
    "RepositoryCollection",
    "TextInputRepository",
    "UnitOfWork",
]
