"""Capabilities that let one pipeline process images and text inputs alike."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from tripmarks.domain.model import (
    Image,
    ImagePayload,
    ItemPayload,
    ProcessableItem,
    SourceType,
    TextInput,
    TextPayload,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from tripmarks.domain.ports import ItemRepository, ProcessingRepositories


class SourceItem(Protocol):
    @property
    def id(self) -> UUID: ...

    @property
    def project_id(self) -> UUID: ...


@dataclass(frozen=True, slots=True)
class ItemKind[TItem: SourceItem]:
    """How a kind of item yields its payload and which link table it writes."""

    source_type: SourceType
    plural: str
    analysis_error_message: str
    payload_of: Callable[[TItem], ItemPayload | None]
    repository_of: Callable[[ProcessingRepositories], ItemRepository[TItem]]

    def to_processable(self, item: TItem) -> ProcessableItem:
        return ProcessableItem(
            id=item.id,
            project_id=item.project_id,
            source_type=self.source_type,
            payload=self.payload_of(item),
        )

    def repository(self, repositories: ProcessingRepositories) -> ItemRepository[TItem]:
        return self.repository_of(repositories)


def _image_payload(image: Image) -> ItemPayload | None:
    return ImagePayload(image.url) if image.url else None


def _text_payload(text_input: TextInput) -> ItemPayload | None:
    text = text_input.text_to_analyze
    return TextPayload(text) if text is not None else None


IMAGE_KIND: ItemKind[Image] = ItemKind(
    source_type=SourceType.IMAGE,
    plural="images",
    analysis_error_message="An error occurred while analyzing the image.",
    payload_of=_image_payload,
    repository_of=lambda repositories: repositories.images,
)

TEXT_INPUT_KIND: ItemKind[TextInput] = ItemKind(
    source_type=SourceType.TEXT,
    plural="text inputs",
    analysis_error_message="An error occurred while analyzing the text.",
    payload_of=_text_payload,
    repository_of=lambda repositories: repositories.text_inputs,
)
