"""Anthropic Claude analysis adapter."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import anthropic
from anthropic import AsyncAnthropic
from pydantic import ValidationError

from tripmarks.config.processing import DEFAULT_PLACE_CATEGORIES
from tripmarks.domain.errors import AnalysisError
from tripmarks.domain.model import (
    AnalysisResult,
    ExtractedCandidate,
    ImagePayload,
    TextPayload,
)

from .prompts import build_prompt, image_prompt_spec, text_prompt_spec, wrap_text_content
from .schema import PlaceExtractionPayload, strip_code_fences

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from anthropic.types import MessageParam

    from tripmarks.config.claude import ClaudeConfig
    from tripmarks.domain.model import ItemPayload

log = getLogger(__name__)


def parse_extraction(text: str) -> AnalysisResult:
    """Parse the model's reply into an analysis result or raise ``AnalysisError``."""

    cleaned = strip_code_fences(text)
    if not cleaned:
        raise AnalysisError("Claude returned an empty response")
    try:
        payload = PlaceExtractionPayload.model_validate_json(cleaned)
    except ValidationError as exc:
        msg = f"Unparseable extraction response: {exc.error_count()} error(s)"
        raise AnalysisError(msg) from exc

    candidates = tuple(
        ExtractedCandidate(
            name=place.place_name,
            name_en=place.place_name_en,
            category=place.category,
            note=place.comment,
            confidence=place.confidence,
        )
        for place in payload.valid_places()
    )
    return AnalysisResult(candidates=candidates, raw_text=payload.raw_text)


class ClaudeAnalysisService:
    """Extract candidate places from screenshots and text with Claude."""

    def __init__(
        self,
        *,
        config: ClaudeConfig,
        client: AsyncAnthropic | None = None,
        categories: Sequence[str] = DEFAULT_PLACE_CATEGORIES,
    ) -> None:
        self._config = config
        self._owns_client = client is None
        self._client = client or AsyncAnthropic(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            max_retries=config.max_retries,
        )
        self._image_spec = image_prompt_spec(categories, config.comment_language)
        self._text_spec = text_prompt_spec(categories, config.comment_language)

    async def __aenter__(self) -> ClaudeAnalysisService:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._owns_client:
            await self._client.close()

    async def analyze(
        self,
        payload: ItemPayload,
        destination: str,
        country: str | None,
    ) -> AnalysisResult:
        message = self._build_message(payload, destination, country)
        text = await self._complete(message)
        result = parse_extraction(text)
        log.debug("Claude extracted %d candidate(s)", len(result.candidates))
        return result

    def _build_message(
        self,
        payload: ItemPayload,
        destination: str,
        country: str | None,
    ) -> MessageParam:
        if isinstance(payload, ImagePayload):
            return {
                "role": "user",
                "content": [
                    {"type": "image", "source": {"type": "url", "url": payload.url}},
                    {"type": "text", "text": build_prompt(self._image_spec, destination, country)},
                ],
            }
        if isinstance(payload, TextPayload):
            prompt = build_prompt(self._text_spec, destination, country)
            return {"role": "user", "content": f"{prompt}\n\n{wrap_text_content(payload.text)}"}
        raise TypeError(f"Unsupported payload: {type(payload).__name__}")

    async def _complete(self, message: MessageParam) -> str:
        try:
            response = await self._client.messages.create(
                model=self._config.model,
                max_tokens=self._config.max_tokens,
                messages=[message],
            )
        except anthropic.APIError as exc:
            raise AnalysisError(f"Claude request failed: {exc}") from exc

        return "".join(block.text for block in response.content if block.type == "text")
