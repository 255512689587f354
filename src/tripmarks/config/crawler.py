"""Web page crawler configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .env import optional_env_var
from .http_resilience import ResilienceConfig, RetryPolicy

CRAWL_TIMEOUT_SECONDS = 30.0
MAX_TEXT_LENGTH = 10_000
MIN_TEXT_LENGTH = 50
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _default_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="crawler",
        timeout_seconds=CRAWL_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=1),
        cache=None,
        default_headers={
            "User-Agent": DEFAULT_USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        },
    )


@dataclass(frozen=True, slots=True)
class CrawlerConfig:
    resilience: ResilienceConfig = field(default_factory=_default_resilience)
    max_text_length: int = MAX_TEXT_LENGTH
    min_text_length: int = MIN_TEXT_LENGTH


def get_crawler_config() -> CrawlerConfig:
    resilience = _default_resilience()
    accept_language = optional_env_var("TRIPMARKS_CRAWL_ACCEPT_LANGUAGE")
    if accept_language is not None:
        headers = dict(resilience.default_headers or {})
        headers["Accept-Language"] = accept_language
        resilience = replace(resilience, default_headers=headers)
    return CrawlerConfig(resilience=resilience)
