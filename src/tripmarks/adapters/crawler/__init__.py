"""Web page crawler adapter."""

from __future__ import annotations

from .client import WebPageCrawler, validate_url
from .extraction import CONTENT_SELECTORS, REMOVE_SELECTORS, extract_page_text

__all__ = [
    "CONTENT_SELECTORS",
    "REMOVE_SELECTORS",
    "WebPageCrawler",
    "extract_page_text",
    "validate_url",
]
