"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from contextlib import AsyncExitStack
from logging import getLogger
from typing import TYPE_CHECKING, Any

from tripmarks.adapters.claude import ClaudeAnalysisService
from tripmarks.adapters.crawler import WebPageCrawler
from tripmarks.adapters.google_maps import GoogleMapsGeocodingProvider
from tripmarks.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyProcessingUnitOfWork,
    is_started,
    startup,
)
from tripmarks.config import (
    get_claude_config,
    get_crawler_config,
    get_google_maps_config,
    get_processing_config,
)
from tripmarks.domain.errors import CrawlError, ProjectNotFoundError
from tripmarks.domain.extraction_pipeline import (
    IMAGE_KIND,
    TEXT_INPUT_KIND,
    ExtractionPipeline,
    GeocodingCascade,
    run_extraction_batch,
)
from tripmarks.domain.model import Image, ProcessingStatus, Project, TextInput, TextInputType
from tripmarks.domain.ports.unit_of_work import ProcessingUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from tripmarks.config import ProcessingConfig
    from tripmarks.domain.extraction_pipeline import BatchSummary, ItemKind, ItemMessages
    from tripmarks.domain.model import CrawledPage
    from tripmarks.domain.ports import AnalysisService, GeocodingProvider, PageCrawler

UnitOfWorkFactory = Callable[[], ProcessingUnitOfWork]


log = getLogger(__name__)


def _unit_of_work_factory(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemyProcessingUnitOfWork


def create_project(
    *,
    name: str,
    destination: str,
    country: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Project:
    """Persist a new travel project."""

    project = Project(name=name, destination=destination, country=country)
    with _unit_of_work_factory(unit_of_work_factory)() as uow:
        uow.repositories.projects.add(project)
        uow.commit()
    log.info("Created project %s (%s)", project.id, destination)
    return project


def _require_project(uow: ProcessingUnitOfWork, project_id: UUID) -> None:
    if uow.repositories.projects.get(project_id) is None:
        raise ProjectNotFoundError(f"Project not found: {project_id}")


def add_image(
    *,
    project_id: UUID,
    url: str,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Image:
    """Register a screenshot for later analysis."""

    image = Image(project_id=project_id, url=url)
    with _unit_of_work_factory(unit_of_work_factory)() as uow:
        _require_project(uow, project_id)
        uow.repositories.images.add(image)
        uow.commit()
    log.info("Added image %s to project %s", image.id, project_id)
    return image


def add_text_input(
    *,
    project_id: UUID,
    content: str,
    input_type: TextInputType = TextInputType.TEXT,
    extracted_text: str | None = None,
    crawler: PageCrawler | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> TextInput:
    """Register pasted text or a URL for later analysis.

    A URL given without ``extracted_text`` is crawled right away. When the page
    cannot be read the input is still stored, marked failed with the crawl error,
    so batch runs skip it.
    """

    text_input = TextInput(
        project_id=project_id,
        content=content,
        input_type=input_type,
        extracted_text=extracted_text,
    )
    if input_type is TextInputType.URL and extracted_text is None:
        try:
            page = _crawl(content, crawler)
        except CrawlError as exc:
            log.warning(f"Could not crawl {content}: {exc}")
            text_input.status = ProcessingStatus.FAILED
            text_input.error_message = str(exc)
        else:
            text_input.extracted_text = page.text
            text_input.title = page.title

    with _unit_of_work_factory(unit_of_work_factory)() as uow:
        _require_project(uow, project_id)
        uow.repositories.text_inputs.add(text_input)
        uow.commit()
    log.info("Added %s input %s to project %s", input_type, text_input.id, project_id)
    return text_input


def _crawl(url: str, crawler: PageCrawler | None) -> CrawledPage:
    async def run() -> CrawledPage:
        if crawler is not None:
            return await crawler.crawl(url)
        async with WebPageCrawler(config=get_crawler_config()) as web_crawler:
            return await web_crawler.crawl(url)

    return asyncio.run(run())


def process_project_images(
    project_id: UUID,
    *,
    retry_item_ids: Iterable[UUID] = (),
    analysis: AnalysisService | None = None,
    geocoder: GeocodingProvider | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ProcessingConfig | None = None,
    messages: ItemMessages | None = None,
) -> BatchSummary:
    """Extract places from every pending image of ``project_id``."""

    return _process(
        IMAGE_KIND,
        project_id,
        retry_item_ids=retry_item_ids,
        analysis=analysis,
        geocoder=geocoder,
        unit_of_work_factory=unit_of_work_factory,
        config=config,
        messages=messages,
    )


def process_project_text_inputs(
    project_id: UUID,
    *,
    retry_item_ids: Iterable[UUID] = (),
    analysis: AnalysisService | None = None,
    geocoder: GeocodingProvider | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ProcessingConfig | None = None,
    messages: ItemMessages | None = None,
) -> BatchSummary:
    """Extract places from every pending text input of ``project_id``."""

    return _process(
        TEXT_INPUT_KIND,
        project_id,
        retry_item_ids=retry_item_ids,
        analysis=analysis,
        geocoder=geocoder,
        unit_of_work_factory=unit_of_work_factory,
        config=config,
        messages=messages,
    )


def _process(
    kind: ItemKind[Any],
    project_id: UUID,
    *,
    retry_item_ids: Iterable[UUID],
    analysis: AnalysisService | None,
    geocoder: GeocodingProvider | None,
    unit_of_work_factory: UnitOfWorkFactory | None,
    config: ProcessingConfig | None,
    messages: ItemMessages | None,
) -> BatchSummary:
    effective_config = config or get_processing_config()
    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    log.info(
        "Starting %s batch for project %s: threshold=%s, max_concurrency=%s",
        kind.plural,
        project_id,
        effective_config.confidence_threshold,
        effective_config.max_concurrency,
    )

    async def run() -> BatchSummary:
        async with AsyncExitStack() as stack:
            analysis_service = analysis or await stack.enter_async_context(
                ClaudeAnalysisService(
                    config=get_claude_config(), categories=effective_config.categories
                )
            )
            provider = geocoder or await stack.enter_async_context(
                GoogleMapsGeocodingProvider(config=get_google_maps_config())
            )
            pipeline = ExtractionPipeline.from_config(
                effective_config, kind=kind, analysis=analysis_service, messages=messages
            )
            return await run_extraction_batch(
                project_id=project_id,
                pipeline=pipeline,
                geocode_fetcher=GeocodingCascade(provider),
                unit_of_work_factory=effective_uow,
                retry_item_ids=retry_item_ids,
            )

    summary = asyncio.run(run())
    log.info(
        f"Finished {kind.plural} batch: {summary.message} "
        f"(total={summary.total}, processed={summary.processed}, failed={summary.failed})"
    )
    return summary
