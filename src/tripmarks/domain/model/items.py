"""Projects and the source items (images, text inputs) collected for them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from tripmarks.domain.model.base import Entity
from tripmarks.domain.model.enums import ProcessingStatus, SourceType, TextInputType

if TYPE_CHECKING:
    from uuid import UUID


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class Project(Entity):
    name: str
    destination: str
    country: str | None = None
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(eq=False, kw_only=True)
class Image(Entity):
    project_id: UUID
    url: str
    status: ProcessingStatus = ProcessingStatus.PENDING
    raw_text: str | None = None
    error_message: str | None = None
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(eq=False, kw_only=True)
class TextInput(Entity):
    """Free text pasted by a user, or a URL whose page text was extracted."""

    project_id: UUID
    content: str
    input_type: TextInputType = TextInputType.TEXT
    extracted_text: str | None = None
    title: str | None = None
    status: ProcessingStatus = ProcessingStatus.PENDING
    raw_text: str | None = None
    error_message: str | None = None
    created_at: datetime = field(default_factory=_utcnow)

    @property
    def text_to_analyze(self) -> str | None:
        text = self.extracted_text if self.input_type is TextInputType.URL else self.content
        if text is None or not text.strip():
            return None
        return text


@dataclass(frozen=True, slots=True)
class CrawledPage:
    """Readable text and title scraped from a web page."""

    text: str
    title: str | None = None


@dataclass(frozen=True, slots=True)
class ImagePayload:
    url: str


@dataclass(frozen=True, slots=True)
class TextPayload:
    text: str


type ItemPayload = ImagePayload | TextPayload


@dataclass(frozen=True, slots=True, kw_only=True)
class ProcessableItem:
    """Immutable snapshot of one pending item handed to a batch run."""

    id: UUID
    project_id: UUID
    source_type: SourceType
    payload: ItemPayload | None
