"""SQLAlchemy mapping metadata for the tripmarks domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from tripmarks.domain.model import (
    Image,
    Place,
    PlaceStatus,
    ProcessingStatus,
    Project,
    TextInput,
    TextInputType,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _project_fk() -> Column[uuid.UUID]:
    return Column(
        "project_id",
        UUIDColumnType,
        ForeignKey("project.id", ondelete="CASCADE"),
        nullable=False,
    )


project_table = Table(
    "project",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
    Column("destination", String, nullable=False),
    Column("country", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
)

place_table = Table(
    "place",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    _project_fk(),
    Column("name", String, nullable=False),
    Column("category", String(32), nullable=False),
    Column("note", Text, nullable=True),
    Column("latitude", Float, nullable=False),
    Column("longitude", Float, nullable=False),
    Column("status", Enum(PlaceStatus, native_enum=False), nullable=False),
    Column("external_place_id", String, nullable=True),
    Column("formatted_address", String, nullable=True),
    Column("maps_url", String, nullable=True),
    Column("rating", Float, nullable=True),
    Column("rating_count", Integer, nullable=True),
    Column("price_level", Integer, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_place_project_id", "project_id"),
)

image_table = Table(
    "image",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    _project_fk(),
    Column("url", String, nullable=False),
    Column("status", Enum(ProcessingStatus, native_enum=False), nullable=False),
    Column("raw_text", Text, nullable=True),
    Column("error_message", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_image_project_status", "project_id", "status"),
)

text_input_table = Table(
    "text_input",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    _project_fk(),
    Column("input_type", Enum(TextInputType, native_enum=False), nullable=False),
    Column("content", Text, nullable=False),
    Column("extracted_text", Text, nullable=True),
    Column("title", String, nullable=True),
    Column("status", Enum(ProcessingStatus, native_enum=False), nullable=False),
    Column("raw_text", Text, nullable=True),
    Column("error_message", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_text_input_project_status", "project_id", "status"),
)

# Link tables: the composite primary key makes re-linking a no-op.

place_image_table = Table(
    "place_image",
    mapper_registry.metadata,
    Column(
        "place_id", UUIDColumnType, ForeignKey("place.id", ondelete="CASCADE"), primary_key=True
    ),
    Column(
        "item_id", UUIDColumnType, ForeignKey("image.id", ondelete="CASCADE"), primary_key=True
    ),
)

place_text_input_table = Table(
    "place_text_input",
    mapper_registry.metadata,
    Column(
        "place_id", UUIDColumnType, ForeignKey("place.id", ondelete="CASCADE"), primary_key=True
    ),
    Column(
        "item_id",
        UUIDColumnType,
        ForeignKey("text_input.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Project, project_table)
    mapper_registry.map_imperatively(Place, place_table)
    mapper_registry.map_imperatively(Image, image_table)
    mapper_registry.map_imperatively(TextInput, text_input_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
