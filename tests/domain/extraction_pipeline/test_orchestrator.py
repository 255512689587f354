from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import pytest

from tripmarks.domain.errors import AnalysisError, ProjectNotFoundError
from tripmarks.domain.extraction_pipeline import (
    IMAGE_KIND,
    TEXT_INPUT_KIND,
    ExtractionPipeline,
    GeocodeCache,
    GeocodingCascade,
    ItemMessages,
    ProcessingContext,
    run_extraction_batch,
)
from tripmarks.domain.model import Image, ProcessingStatus, TextInput, TextInputType
from tripmarks.domain.model.base import new_id
from tests.helpers.extraction import (
    FakeAnalysisService,
    FakeGeocodingProvider,
    FakeUnitOfWork,
    InMemoryItemRepository,
    InMemoryPlaceRepository,
    always_resolve,
    make_candidate,
    make_geocode,
    make_place,
    make_project,
    make_repositories,
    make_result,
)

if TYPE_CHECKING:
    from tripmarks.domain.extraction_pipeline import BatchSummary, ItemKind
    from tripmarks.domain.model import AnalysisResult, Project
    from tripmarks.domain.ports import GeocodeFetcher, ProcessingRepositories

SENSOJI = make_geocode(35.7148, 139.7967, place_id="ChIJ-sensoji")
SKYTREE = make_geocode(35.7101, 139.8107, place_id="ChIJ-skytree")


def _image(project: Project, url: str) -> Image:
    return Image(project_id=project.id, url=url)


def _run(
    project: Project,
    repositories: ProcessingRepositories,
    results: dict[str, AnalysisResult | Exception],
    fetcher: GeocodeFetcher,
    *,
    kind: ItemKind[Any] = IMAGE_KIND,
    **pipeline_options: Any,
) -> BatchSummary:
    pipeline = ExtractionPipeline(
        kind=kind,
        analysis=FakeAnalysisService(results),
        **pipeline_options,
    )
    return asyncio.run(
        run_extraction_batch(
            project_id=project.id,
            pipeline=pipeline,
            geocode_fetcher=fetcher,
            unit_of_work_factory=lambda: FakeUnitOfWork(repositories),
        )
    )


def _places(repositories: ProcessingRepositories) -> InMemoryPlaceRepository:
    places = repositories.places
    assert isinstance(places, InMemoryPlaceRepository)
    return places


def _images(repositories: ProcessingRepositories) -> InMemoryItemRepository[Image]:
    images = repositories.images
    assert isinstance(images, InMemoryItemRepository)
    return images


def test_same_place_from_two_items_is_created_once_and_linked_twice() -> None:
    project = make_project()
    first, second = _image(project, "https://img/1"), _image(project, "https://img/2")
    repositories = make_repositories(project, images=[first, second])
    candidate = make_candidate("Sensoji", confidence=0.9)
    fetcher = always_resolve(SENSOJI)

    summary = _run(
        project,
        repositories,
        {"https://img/1": make_result(candidate), "https://img/2": make_result(candidate)},
        fetcher,
    )

    assert (summary.total, summary.processed, summary.failed) == (2, 2, 0)
    assert summary.message == "Processing complete"
    assert fetcher.calls == [("Sensoji", None)]
    places = _places(repositories)
    assert len(places.created) == 1
    place_id = places.created[0].id
    assert _images(repositories).links == {(place_id, first.id), (place_id, second.id)}
    assert summary.created_place_ids == (place_id,)
    assert summary.outcomes[1].linked_place_ids == (place_id,)
    assert summary.outcomes[1].created_place_ids == ()


@pytest.mark.parametrize(
    ("name_en", "expected_calls"),
    [(None, 3), ("Sensoji", 3), ("Senso-ji Temple", 5)],
)
def test_shared_candidate_runs_one_cascade_per_batch(
    name_en: str | None, expected_calls: int
) -> None:
    project = make_project()
    first, second = _image(project, "https://img/1"), _image(project, "https://img/2")
    repositories = make_repositories(project, images=[first, second])
    candidate = make_candidate("Sensoji", name_en=name_en)
    provider = FakeGeocodingProvider(searches={"Sensoji Tokyo Japan": SENSOJI})

    summary = _run(
        project,
        repositories,
        {"https://img/1": make_result(candidate), "https://img/2": make_result(candidate)},
        GeocodingCascade(provider),
    )

    assert summary.processed == 2
    assert len(provider.calls) == expected_calls
    assert len(_places(repositories).created) == 1
    assert len(_images(repositories).links) == 2


def test_low_confidence_candidate_fails_item_without_creating_places() -> None:
    project = make_project()
    image = _image(project, "https://img/1")
    repositories = make_repositories(project, images=[image])
    fetcher = always_resolve(SENSOJI)

    summary = _run(
        project,
        repositories,
        {"https://img/1": make_result(make_candidate("Sensoji", confidence=0.3))},
        fetcher,
        confidence_threshold=0.5,
    )

    assert (summary.processed, summary.failed) == (0, 1)
    assert _places(repositories).created == []
    assert fetcher.calls == []
    recorded = _images(repositories).statuses[image.id]
    assert recorded.status is ProcessingStatus.FAILED
    assert recorded.error_message == ItemMessages().low_confidence
    assert recorded.raw_text == "raw"


def test_candidate_that_cannot_be_located_fails_item() -> None:
    project = make_project()
    image = _image(project, "https://img/1")
    repositories = make_repositories(project, images=[image])
    provider = FakeGeocodingProvider()

    summary = _run(
        project,
        repositories,
        {"https://img/1": make_result(make_candidate("浅草寺", name_en="Sensoji"))},
        GeocodingCascade(provider),
    )

    assert summary.failed == 1
    assert len(provider.calls) == 5
    recorded = _images(repositories).statuses[image.id]
    assert recorded.status is ProcessingStatus.FAILED
    assert recorded.error_message == ItemMessages().location_not_found
    assert _places(repositories).created == []


def test_item_succeeds_when_any_candidate_resolves() -> None:
    project = make_project()
    image = _image(project, "https://img/1")
    repositories = make_repositories(project, images=[image])
    provider = FakeGeocodingProvider(searches={"Tokyo Skytree Tokyo Japan": SKYTREE})

    summary = _run(
        project,
        repositories,
        {
            "https://img/1": make_result(
                make_candidate("Unknown Bar"),
                make_candidate("Maybe Cafe", confidence=0.1),
                make_candidate("Tokyo Skytree"),
            )
        },
        GeocodingCascade(provider),
    )

    assert summary.processed == 1
    recorded = _images(repositories).statuses[image.id]
    assert recorded.status is ProcessingStatus.PROCESSED
    assert recorded.error_message is None
    assert [place.name for place in _places(repositories).created] == ["Tokyo Skytree"]


def test_repeated_name_within_one_item_is_processed_once() -> None:
    project = make_project()
    image = _image(project, "https://img/1")
    repositories = make_repositories(project, images=[image])
    fetcher = always_resolve(SENSOJI)

    summary = _run(
        project,
        repositories,
        {
            "https://img/1": make_result(
                make_candidate("Sensoji"), make_candidate("SENSOJI", category="cafe")
            )
        },
        fetcher,
    )

    assert summary.processed == 1
    assert len(fetcher.calls) == 1
    assert len(_places(repositories).created) == 1
    assert len(_images(repositories).link_calls) == 1


def test_existing_place_is_linked_instead_of_duplicated() -> None:
    project = make_project()
    existing = make_place(project, "Senso-ji", latitude=35.7147, longitude=139.7966)
    image = _image(project, "https://img/1")
    repositories = make_repositories(project, places=[existing], images=[image])

    summary = _run(
        project,
        repositories,
        {"https://img/1": make_result(make_candidate("Asakusa Kannon"))},
        always_resolve(SENSOJI),
    )

    assert summary.processed == 1
    assert _places(repositories).created == []
    assert _images(repositories).links == {(existing.id, image.id)}


def test_analysis_failure_is_isolated_to_its_item() -> None:
    project = make_project()
    broken, healthy = _image(project, "https://img/broken"), _image(project, "https://img/ok")
    repositories = make_repositories(project, images=[broken, healthy])

    summary = _run(
        project,
        repositories,
        {
            "https://img/broken": AnalysisError("model unavailable"),
            "https://img/ok": make_result(make_candidate("Sensoji")),
        },
        always_resolve(SENSOJI),
    )

    assert (summary.total, summary.processed, summary.failed) == (2, 1, 1)
    statuses = _images(repositories).statuses
    assert statuses[broken.id].error_message == IMAGE_KIND.analysis_error_message
    assert statuses[broken.id].raw_text is None
    assert statuses[healthy.id].status is ProcessingStatus.PROCESSED


def test_no_candidates_keeps_raw_text_and_fails() -> None:
    project = make_project()
    image = _image(project, "https://img/1")
    repositories = make_repositories(project, images=[image])

    summary = _run(
        project,
        repositories,
        {"https://img/1": make_result(raw_text="a photo of a cat")},
        always_resolve(SENSOJI),
    )

    assert summary.failed == 1
    recorded = _images(repositories).statuses[image.id]
    assert recorded.error_message == ItemMessages().no_places_recognized
    assert recorded.raw_text == "a photo of a cat"


def test_text_input_without_content_fails_without_calling_analysis() -> None:
    project = make_project()
    empty_url = TextInput(
        project_id=project.id,
        content="https://blog.example/tokyo",
        input_type=TextInputType.URL,
    )
    repositories = make_repositories(project, text_inputs=[empty_url])
    analysis = FakeAnalysisService()
    pipeline = ExtractionPipeline(kind=TEXT_INPUT_KIND, analysis=analysis)

    summary = asyncio.run(
        run_extraction_batch(
            project_id=project.id,
            pipeline=pipeline,
            geocode_fetcher=always_resolve(SENSOJI),
            unit_of_work_factory=lambda: FakeUnitOfWork(repositories),
        )
    )

    assert summary.failed == 1
    assert analysis.calls == []
    text_inputs = repositories.text_inputs
    assert isinstance(text_inputs, InMemoryItemRepository)
    assert text_inputs.statuses[empty_url.id].error_message == (
        TEXT_INPUT_KIND.analysis_error_message
    )


def test_rejected_place_write_fails_only_that_item() -> None:
    project = make_project()
    first, second = _image(project, "https://img/1"), _image(project, "https://img/2")
    repositories = make_repositories(
        project, images=[first, second], reject_place_names=["Cursed Shrine"]
    )
    elsewhere = make_geocode(43.0621, 141.3544, place_id="ChIJ-sapporo")

    async def fetcher(
        name: str, name_en: str | None, destination: str, country: str | None
    ) -> Any:
        _ = (name_en, destination, country)
        return elsewhere if name == "Cursed Shrine" else SENSOJI

    summary = _run(
        project,
        repositories,
        {
            "https://img/1": make_result(make_candidate("Cursed Shrine")),
            "https://img/2": make_result(make_candidate("Sensoji")),
        },
        fetcher,
    )

    assert (summary.processed, summary.failed) == (1, 1)
    statuses = _images(repositories).statuses
    assert statuses[first.id].error_message == ItemMessages().processing_error
    assert statuses[second.id].status is ProcessingStatus.PROCESSED


def test_unknown_category_is_stored_as_other() -> None:
    project = make_project()
    image = _image(project, "https://img/1")
    repositories = make_repositories(project, images=[image])

    _run(
        project,
        repositories,
        {"https://img/1": make_result(make_candidate("Sensoji", category="Temple"))},
        always_resolve(SENSOJI),
    )

    assert _places(repositories).created[0].category == "other"


def test_empty_batch_reports_no_pending_items() -> None:
    project = make_project()
    repositories = make_repositories(project)

    summary = _run(project, repositories, {}, always_resolve(SENSOJI))

    assert (summary.total, summary.processed, summary.failed) == (0, 0, 0)
    assert summary.message == "No pending images"


def test_custom_messages_are_recorded() -> None:
    project = make_project()
    image = _image(project, "https://img/1")
    repositories = make_repositories(project, images=[image])
    messages = ItemMessages(no_places_recognized="장소를 인식할 수 없습니다.")

    _run(
        project,
        repositories,
        {"https://img/1": make_result()},
        always_resolve(SENSOJI),
        messages=messages,
    )

    assert _images(repositories).statuses[image.id].error_message == "장소를 인식할 수 없습니다."


def test_analysis_concurrency_is_bounded() -> None:
    project = make_project()
    items = [_image(project, f"https://img/{index}") for index in range(6)]
    context = ProcessingContext(
        project=project, existing_places=[], geocode_fetcher=always_resolve(SENSOJI)
    )
    analysis = FakeAnalysisService(delay=0.01)
    pipeline = ExtractionPipeline(kind=IMAGE_KIND, analysis=analysis, max_concurrency=2)
    repositories = make_repositories(project, images=items)

    asyncio.run(
        pipeline.execute([IMAGE_KIND.to_processable(item) for item in items], context, repositories)
    )

    assert len(analysis.calls) == 6
    assert analysis.max_in_flight == 2


def test_geocode_cache_is_scoped_to_context() -> None:
    project = make_project()
    fetcher = always_resolve(SENSOJI)
    first = ProcessingContext(project=project, existing_places=[], geocode_fetcher=fetcher)
    second = ProcessingContext(project=project, existing_places=[], geocode_fetcher=fetcher)
    candidate = make_candidate("Sensoji")

    async def scenario() -> None:
        await first.resolve(candidate)
        await first.resolve(candidate)
        await second.resolve(candidate)

    asyncio.run(scenario())

    assert len(fetcher.calls) == 2
    assert first.geocode_cache is not second.geocode_cache
    assert isinstance(first.geocode_cache, GeocodeCache)


def test_retry_ids_are_reset_before_loading_pending_items() -> None:
    project = make_project()
    failed = Image(
        project_id=project.id,
        url="https://img/1",
        status=ProcessingStatus.FAILED,
        error_message="An error occurred during processing.",
    )
    repositories = make_repositories(project, images=[failed])
    pipeline = ExtractionPipeline(
        kind=IMAGE_KIND,
        analysis=FakeAnalysisService({"https://img/1": make_result(make_candidate("Sensoji"))}),
    )

    summary = asyncio.run(
        run_extraction_batch(
            project_id=project.id,
            pipeline=pipeline,
            geocode_fetcher=always_resolve(SENSOJI),
            unit_of_work_factory=lambda: FakeUnitOfWork(repositories),
            retry_item_ids=[failed.id],
        )
    )

    assert summary.processed == 1
    assert _images(repositories).reset_calls == [[failed.id]]
    assert failed.status is ProcessingStatus.PROCESSED


def test_unknown_project_raises() -> None:
    project = make_project()
    repositories = make_repositories(project)
    pipeline = ExtractionPipeline(kind=IMAGE_KIND, analysis=FakeAnalysisService())

    with pytest.raises(ProjectNotFoundError):
        asyncio.run(
            run_extraction_batch(
                project_id=new_id(),
                pipeline=pipeline,
                geocode_fetcher=always_resolve(SENSOJI),
                unit_of_work_factory=lambda: FakeUnitOfWork(repositories),
            )
        )
