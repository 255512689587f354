"""Google Maps Places / Geocoding API client."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from tripmarks.adapters.http_resilience import ResilientClient
from tripmarks.config.google_maps import CACHEABLE_STATUSES
from tripmarks.domain.errors import GeocodingProviderError

from .schema import GeocodeResponse, MapsResponse, TextSearchResponse
from .translator import translate_geocode, translate_text_search

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from tripmarks.config.google_maps import GoogleMapsConfig
    from tripmarks.config.http_resilience import ResilienceConfig
    from tripmarks.domain.model import GeocodeResult

log = getLogger(__name__)

TEXT_SEARCH_PATH = "place/textsearch/json"
GEOCODE_PATH = "geocode/json"


class GoogleMapsAPIError(GeocodingProviderError):
    """Raised when Google Maps answers with an error status or cannot be reached."""

    def __init__(self, message: str, *, status: str | None = None) -> None:
        super().__init__(message)
        self.status = status


class GoogleMapsGeocodingProvider:
    """Geocoding provider backed by Places Text Search and the Geocoding API.

    Use it as an async context manager so concurrent lookups share one HTTP
    client (and therefore one rate limiter and cache). Outside a context each
    lookup opens a short-lived client.
    """

    def __init__(
        self,
        *,
        config: GoogleMapsConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> GoogleMapsGeocodingProvider:
        self._client = self._client_factory(self._resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def text_search(self, query: str) -> GeocodeResult | None:
        response = await self._fetch(TEXT_SEARCH_PATH, {"query": query}, TextSearchResponse)
        result = translate_text_search(response)
        log.debug("Text search %r -> %s", query, "hit" if result else "miss")
        return result

    async def geocode_address(self, address: str) -> GeocodeResult | None:
        response = await self._fetch(GEOCODE_PATH, {"address": address}, GeocodeResponse)
        result = translate_geocode(response)
        log.debug("Geocode %r -> %s", address, "hit" if result else "miss")
        return result

    async def _fetch[TResponse: MapsResponse](
        self,
        path: str,
        params: dict[str, str],
        model: type[TResponse],
    ) -> TResponse:
        query = {**params, "key": self._config.api_key}
        if self._config.language:
            query["language"] = self._config.language

        try:
            if self._client is not None:
                response = await self._client.get(path, params=query)
            else:
                async with self._client_factory(self._resilience) as client:
                    response = await client.get(path, params=query)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise GoogleMapsAPIError(f"Google Maps request to {path} failed: {exc}") from exc

        try:
            payload = model.model_validate(response.json())
        except ValueError as exc:
            raise GoogleMapsAPIError(f"Unexpected Google Maps payload from {path}") from exc

        if payload.status not in CACHEABLE_STATUSES:
            detail = f": {payload.error_message}" if payload.error_message else ""
            raise GoogleMapsAPIError(
                f"Google Maps returned {payload.status} for {path}{detail}",
                status=payload.status,
            )
        return payload
