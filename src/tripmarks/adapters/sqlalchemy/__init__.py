"""SQLAlchemy adapter package for tripmarks."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyImageRepository,
    SqlAlchemyItemRepository,
    SqlAlchemyPlaceRepository,
    SqlAlchemyProjectRepository,
    SqlAlchemyTextInputRepository,
)
from .unit_of_work import SqlAlchemyProcessingUnitOfWork, shutdown, startup

__all__ = [
    "SqlAlchemyImageRepository",
    "SqlAlchemyItemRepository",
    "SqlAlchemyPlaceRepository",
    "SqlAlchemyProcessingUnitOfWork",
    "SqlAlchemyProjectRepository",
    "SqlAlchemyTextInputRepository",
    "create_all_tables",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
