"""Anthropic Claude configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars

DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 2048
DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_MAX_RETRIES = 2
DEFAULT_COMMENT_LANGUAGE = "English"


@dataclass(frozen=True, slots=True)
class ClaudeConfig:
    api_key: str
    model: str = DEFAULT_CLAUDE_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_retries: int = DEFAULT_MAX_RETRIES
    comment_language: str = DEFAULT_COMMENT_LANGUAGE


def get_claude_config() -> ClaudeConfig:
    values = require_env_vars(("ANTHROPIC_API_KEY",))
    return ClaudeConfig(
        api_key=values["ANTHROPIC_API_KEY"],
        model=optional_env_var("TRIPMARKS_CLAUDE_MODEL") or DEFAULT_CLAUDE_MODEL,
        comment_language=optional_env_var("TRIPMARKS_COMMENT_LANGUAGE")
        or DEFAULT_COMMENT_LANGUAGE,
    )
