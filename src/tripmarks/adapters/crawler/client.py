"""Fetch blog and article pages over HTTP."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from tripmarks.adapters.http_resilience import ResilientClient
from tripmarks.domain.errors import CrawlError
from tripmarks.domain.model import CrawledPage

from .extraction import extract_page_text

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from tripmarks.config.crawler import CrawlerConfig
    from tripmarks.config.http_resilience import ResilienceConfig

log = getLogger(__name__)


def validate_url(url: str) -> httpx.URL:
    try:
        parsed = httpx.URL(url.strip())
    except httpx.InvalidURL as exc:
        raise CrawlError(f"Invalid URL: {url}") from exc
    if parsed.scheme not in {"http", "https"} or not parsed.host:
        raise CrawlError(f"Invalid URL: {url}")
    return parsed


class WebPageCrawler:
    """Page crawler that keeps the main content of a page and drops its chrome.

    Like the geocoding provider it can be entered as an async context manager
    to share one HTTP client across crawls.
    """

    def __init__(
        self,
        *,
        config: CrawlerConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> WebPageCrawler:
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

    async def crawl(self, url: str) -> CrawledPage:
        target = validate_url(url)

        try:
            if self._client is not None:
                response = await self._client.get(target, follow_redirects=True)
            else:
                async with self._client_factory(self._resilience) as client:
                    response = await client.get(target, follow_redirects=True)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise CrawlError(f"Timed out loading {url}") from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise CrawlError(
                f"Failed to fetch {url}: HTTP {status} {exc.response.reason_phrase}"
            ) from exc
        except httpx.HTTPError as exc:
            raise CrawlError(f"Failed to fetch {url}: {exc}") from exc

        text, title = await asyncio.to_thread(
            extract_page_text, response.text, max_length=self._config.max_text_length
        )
        if len(text) < self._config.min_text_length:
            raise CrawlError(f"Not enough readable text on {url}")

        log.debug("Crawled %s (%d chars, title %r)", url, len(text), title)
        return CrawledPage(text=text, title=title)
