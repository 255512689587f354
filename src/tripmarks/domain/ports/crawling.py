"""Port for fetching the readable text of a web page."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tripmarks.domain.model import CrawledPage


@runtime_checkable
class PageCrawler(Protocol):
    """Fetch ``url`` and return its main text; raise ``CrawlError`` otherwise."""

    async def crawl(self, url: str) -> CrawledPage: ...
