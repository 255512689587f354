"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from tripmarks.adapters.sqlalchemy.mappings import (
    image_table,
    place_image_table,
    place_table,
    place_text_input_table,
    text_input_table,
)
from tripmarks.domain.errors import CommitError
from tripmarks.domain.model import Image, Place, ProcessingStatus, Project, TextInput

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from sqlalchemy import Executable, Table
    from sqlalchemy.orm import Session

    from tripmarks.domain.model import NewPlace


class _SessionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def _write(self, statement: Executable, description: str) -> Any:
        """Execute ``statement`` in a savepoint so a rejected write leaves the batch intact."""

        try:
            with self.session.begin_nested():
                return self.session.execute(statement)
        except SQLAlchemyError as exc:
            raise CommitError(f"Could not {description}") from exc


class SqlAlchemyProjectRepository(_SessionRepository):
    def add(self, entity: Project) -> None:
        self.session.add(entity)

    def get(self, project_id: UUID) -> Project | None:
        return self.session.get(Project, project_id)


class SqlAlchemyPlaceRepository(_SessionRepository):
    def add(self, entity: Place) -> None:
        self.session.add(entity)

    def create(self, data: NewPlace) -> Place:
        place = Place.from_new(data)
        try:
            with self.session.begin_nested():
                self.session.add(place)
        except SQLAlchemyError as exc:
            raise CommitError(f"Could not create place {data.name!r}") from exc
        return place

    def find_by_project(self, project_id: UUID) -> list[Place]:
        stmt = (
            select(Place)
            .where(place_table.c.project_id == project_id)
            .order_by(place_table.c.created_at)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyItemRepository[TItem: (Image, TextInput)](_SessionRepository):
    """Status updates and idempotent place links for one item table."""

    def __init__(
        self,
        session: Session,
        *,
        entity_cls: type[TItem],
        table: Table,
        link_table: Table,
    ) -> None:
        super().__init__(session)
        self._entity_cls = entity_cls
        self._table = table
        self._link_table = link_table

    def add(self, entity: TItem) -> None:
        self.session.add(entity)

    def get(self, item_id: UUID) -> TItem | None:
        return self.session.get(self._entity_cls, item_id)

    def find_pending_by_project(self, project_id: UUID) -> list[TItem]:
        stmt = (
            select(self._entity_cls)
            .where(self._table.c.project_id == project_id)
            .where(self._table.c.status == ProcessingStatus.PENDING)
            .order_by(self._table.c.created_at)
        )
        return list(self.session.execute(stmt).scalars())

    def update(
        self,
        item_id: UUID,
        *,
        status: ProcessingStatus,
        raw_text: str | None = None,
        error_message: str | None = None,
    ) -> None:
        values: dict[str, object] = {"status": status, "error_message": error_message}
        if raw_text is not None:
            values["raw_text"] = raw_text
        stmt = update(self._entity_cls).where(self._table.c.id == item_id).values(values)
        self._write(stmt, f"update {self._table.name} {item_id}")

    def reset_to_pending(self, item_ids: Iterable[UUID]) -> int:
        ids = list(item_ids)
        if not ids:
            return 0
        stmt = (
            update(self._entity_cls)
            .where(self._table.c.id.in_(ids))
            .values(status=ProcessingStatus.PENDING, error_message=None)
        )
        result = self._write(stmt, f"reset {len(ids)} {self._table.name} row(s)")
        return int(result.rowcount or 0)

    def link_to_place(self, item_id: UUID, place_id: UUID) -> None:
        stmt = (
            self._link_table.insert()
            .prefix_with("OR IGNORE")
            .values(place_id=place_id, item_id=item_id)
        )
        self._write(stmt, f"link {self._table.name} {item_id} to place {place_id}")

    def linked_place_ids(self, item_id: UUID) -> list[UUID]:
        stmt = select(self._link_table.c.place_id).where(self._link_table.c.item_id == item_id)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyImageRepository(SqlAlchemyItemRepository[Image]):
    def __init__(self, session: Session) -> None:
        super().__init__(
            session,
            entity_cls=Image,
            table=image_table,
            link_table=place_image_table,
        )


class SqlAlchemyTextInputRepository(SqlAlchemyItemRepository[TextInput]):
    def __init__(self, session: Session) -> None:
        super().__init__(
            session,
            entity_cls=TextInput,
            table=text_input_table,
            link_table=place_text_input_table,
        )
