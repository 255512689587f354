from __future__ import annotations

import asyncio
from collections.abc import Callable  # noqa: TC003
from dataclasses import replace

import httpx
import pytest

from tripmarks.adapters.crawler import WebPageCrawler, extract_page_text
from tripmarks.adapters.http_resilience import ResilienceConfig, ResilientClient
from tripmarks.config.crawler import CrawlerConfig
from tripmarks.domain.errors import CrawlError

POST_BODY = (
    "Day one started at Sensoji before the crowds, then ramen at Ichiran Shibuya "
    "and an evening walk through Omoide Yokocho."
)

BLOG_PAGE = f"""
<html>
  <head>
    <title>My blog</title>
    <meta property="og:title" content="Three days in Tokyo">
    <script>var tracking = "do not keep";</script>
  </head>
  <body>
    <nav>Home | About | Archive</nav>
    <article>Generic article wrapper</article>
    <div class="se-main-container">
      <p>{POST_BODY}</p>
      <div class="comment">Nice post!</div>
      <div class="share"><span class="social">Share on X</span></div>
    </div>
    <footer>Copyright</footer>
  </body>
</html>
"""


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            headers=dict(resilience.default_headers or {}),
            transport=httpx.MockTransport(async_handler),
        )
        return client

    return factory


def _crawler(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    config: CrawlerConfig | None = None,
) -> WebPageCrawler:
    return WebPageCrawler(
        config=config or CrawlerConfig(), client_factory=_make_client_factory(handler)
    )


def _html(body: str, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        _ = request
        return httpx.Response(
            status_code, text=body, headers={"Content-Type": "text/html; charset=utf-8"}
        )

    return handler


def test_crawl_keeps_main_container_text_and_og_title() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _html(BLOG_PAGE)(request)

    page = asyncio.run(_crawler(handler).crawl("https://blog.example/tokyo"))

    assert page.title == "Three days in Tokyo"
    assert page.text == POST_BODY
    (request,) = seen
    assert str(request.url) == "https://blog.example/tokyo"
    assert request.headers["User-Agent"].startswith("Mozilla/5.0")
    assert request.headers["Accept-Language"] == "en-US,en;q=0.9"


def test_page_without_known_container_falls_back_to_body() -> None:
    html = f"""
    <html><head><title> Tokyo notes </title></head>
    <body><header>Site name</header><p>{POST_BODY}</p>
    <div role="navigation">Next post</div></body></html>
    """

    text, title = extract_page_text(html, max_length=10_000)

    assert title == "Tokyo notes"
    assert text == POST_BODY


def test_long_text_is_truncated() -> None:
    html = f"<html><body><main>{POST_BODY}</main></body></html>"

    text, title = extract_page_text(html, max_length=40)

    assert title is None
    assert text == f"{POST_BODY[:40]}..."


def test_crawl_within_context_shares_one_client() -> None:
    created: list[ResilienceConfig] = []
    factory = _make_client_factory(_html(BLOG_PAGE))

    def counting_factory(resilience: ResilienceConfig) -> ResilientClient:
        created.append(resilience)
        return factory(resilience)

    crawler = WebPageCrawler(config=CrawlerConfig(), client_factory=counting_factory)

    async def scenario() -> None:
        async with crawler:
            await crawler.crawl("https://blog.example/one")
            await crawler.crawl("https://blog.example/two")

    asyncio.run(scenario())

    assert len(created) == 1


def test_page_with_too_little_text_is_rejected() -> None:
    crawler = _crawler(_html("<html><body><nav>Menu</nav><p>Hello</p></body></html>"))

    with pytest.raises(CrawlError, match="Not enough readable text"):
        asyncio.run(crawler.crawl("https://blog.example/empty"))


def test_http_error_status_becomes_crawl_error() -> None:
    crawler = _crawler(_html("missing", status_code=404))

    with pytest.raises(CrawlError, match="HTTP 404"):
        asyncio.run(crawler.crawl("https://blog.example/gone"))


def test_timeout_becomes_crawl_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(CrawlError, match="Timed out"):
        asyncio.run(_crawler(handler).crawl("https://blog.example/slow"))


@pytest.mark.parametrize("url", ["not a url", "ftp://files.example/post", "https://"])
def test_invalid_urls_are_rejected_without_a_request(url: str) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _html(BLOG_PAGE)(request)

    with pytest.raises(CrawlError, match="Invalid URL"):
        asyncio.run(_crawler(handler).crawl(url))
    assert seen == []


def test_min_text_length_is_configurable() -> None:
    config = replace(CrawlerConfig(), min_text_length=3)
    crawler = _crawler(_html("<html><body><p>Hello</p></body></html>"), config=config)

    page = asyncio.run(crawler.crawl("https://blog.example/short"))

    assert page.text == "Hello"
