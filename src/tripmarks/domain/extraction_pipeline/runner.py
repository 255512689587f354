"""Entry point running one extraction batch inside a unit of work."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from tripmarks.domain.errors import ProjectNotFoundError
from tripmarks.domain.extraction_pipeline.context import ProcessingContext

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from uuid import UUID

    from tripmarks.domain.extraction_pipeline.orchestrator import ExtractionPipeline
    from tripmarks.domain.extraction_pipeline.outcomes import BatchSummary
    from tripmarks.domain.ports import GeocodeFetcher, ProcessingUnitOfWork

log = getLogger(__name__)


async def run_extraction_batch(
    *,
    project_id: UUID,
    pipeline: ExtractionPipeline,
    geocode_fetcher: GeocodeFetcher,
    unit_of_work_factory: Callable[[], ProcessingUnitOfWork],
    retry_item_ids: Iterable[UUID] = (),
) -> BatchSummary:
    """Process every pending item of the pipeline's kind for ``project_id``.

    Items listed in ``retry_item_ids`` are reset to pending first. Pending items
    and the project's known places are loaded once, before the run starts.
    """

    kind = pipeline.kind
    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        items = kind.repository(repositories)

        retry_ids = tuple(retry_item_ids)
        if retry_ids:
            reset = items.reset_to_pending(retry_ids)
            log.info("Reset %d %s to pending for retry", reset, kind.plural)

        project = repositories.projects.get(project_id)
        if project is None:
            raise ProjectNotFoundError(f"Project not found: {project_id}")

        pending = [kind.to_processable(item) for item in items.find_pending_by_project(project_id)]
        context = ProcessingContext(
            project=project,
            existing_places=list(repositories.places.find_by_project(project_id)),
            geocode_fetcher=geocode_fetcher,
        )

        summary = await pipeline.execute(pending, context, repositories)
        uow.commit()

    return summary
