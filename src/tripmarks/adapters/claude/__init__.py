"""Anthropic Claude analysis adapter."""

from __future__ import annotations

from .client import ClaudeAnalysisService, parse_extraction
from .prompts import IMAGE_MAX_PLACES, TEXT_MAX_PLACES

__all__ = [
    "IMAGE_MAX_PLACES",
    "TEXT_MAX_PLACES",
    "ClaudeAnalysisService",
    "parse_extraction",
]
