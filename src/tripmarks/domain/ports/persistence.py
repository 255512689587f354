"""Persistence-related domain ports."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from tripmarks.domain.model import (
        Image,
        NewPlace,
        Place,
        ProcessingStatus,
        Project,
        TextInput,
    )


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal add-only repository contract."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ProjectRepository(Repository["Project"], Protocol):
    def get(self, project_id: UUID) -> Project | None: ...


@runtime_checkable
class PlaceRepository(Protocol):
    def create(self, data: NewPlace) -> Place: ...

    def find_by_project(self, project_id: UUID) -> list[Place]: ...


@runtime_checkable
class ItemRepository[TItem](Repository[TItem], Protocol):
    """Status updates and place links for one kind of source item."""

    def find_pending_by_project(self, project_id: UUID) -> list[TItem]: ...

    def update(
        self,
        item_id: UUID,
        *,
        status: ProcessingStatus,
        raw_text: str | None = None,
        error_message: str | None = None,
    ) -> None: ...

    def reset_to_pending(self, item_ids: Iterable[UUID]) -> int: ...

    def link_to_place(self, item_id: UUID, place_id: UUID) -> None: ...

    def linked_place_ids(self, item_id: UUID) -> list[UUID]: ...


type ImageRepository = ItemRepository[Image]
type TextInputRepository = ItemRepository[TextInput]
