from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tripmarks.config import (
    ConfigurationError,
    MissingConfigurationError,
    ProcessingConfig,
    get_claude_config,
    get_crawler_config,
    get_database_config,
    get_google_maps_config,
    get_processing_config,
    get_storage_config,
)
from tripmarks.config.google_maps import GOOGLE_MAPS_BASE_URL

if TYPE_CHECKING:
    from pathlib import Path


def test_get_google_maps_config_reads_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "maps-key")

    config = get_google_maps_config()

    assert config.api_key == "maps-key"
    assert config.resilience.base_url == GOOGLE_MAPS_BASE_URL
    assert config.resilience.cache is not None
    assert config.resilience.cache.backend == "sqlite"
    assert config.resilience.ratelimit is not None


def test_get_google_maps_config_missing_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "  ")

    with pytest.raises(MissingConfigurationError, match="GOOGLE_MAPS_API_KEY"):
        get_google_maps_config()


def test_get_crawler_config_accept_language(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRIPMARKS_CRAWL_ACCEPT_LANGUAGE", "ko-KR,ko;q=0.9")

    config = get_crawler_config()

    assert config.resilience.cache is None
    assert config.resilience.timeout_seconds == 30.0
    assert config.resilience.default_headers is not None
    assert config.resilience.default_headers["Accept-Language"] == "ko-KR,ko;q=0.9"
    assert config.resilience.default_headers["User-Agent"].startswith("Mozilla/5.0")
    assert (config.max_text_length, config.min_text_length) == (10_000, 50)


def test_get_claude_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "claude-key")
    monkeypatch.delenv("TRIPMARKS_CLAUDE_MODEL", raising=False)
    monkeypatch.setenv("TRIPMARKS_COMMENT_LANGUAGE", "Korean")

    config = get_claude_config()

    assert config.api_key == "claude-key"
    assert config.model == "claude-sonnet-4-20250514"
    assert config.max_tokens == 2048
    assert config.comment_language == "Korean"


def test_get_claude_config_missing_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

    with pytest.raises(MissingConfigurationError):
        get_claude_config()


def test_get_processing_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "TRIPMARKS_CONFIDENCE_THRESHOLD",
        "TRIPMARKS_PROXIMITY_METERS",
        "TRIPMARKS_MAX_CONCURRENCY",
    ):
        monkeypatch.delenv(name, raising=False)

    config = get_processing_config()

    assert config.confidence_threshold == pytest.approx(0.5)
    assert config.proximity_threshold_m == pytest.approx(100.0)
    assert config.max_concurrency is None
    assert "other" in config.categories


def test_get_processing_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRIPMARKS_CONFIDENCE_THRESHOLD", "0.7")
    monkeypatch.setenv("TRIPMARKS_PROXIMITY_METERS", "250")
    monkeypatch.setenv("TRIPMARKS_MAX_CONCURRENCY", "4")

    config = get_processing_config()

    assert config.confidence_threshold == pytest.approx(0.7)
    assert config.proximity_threshold_m == pytest.approx(250.0)
    assert config.max_concurrency == 4


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("TRIPMARKS_CONFIDENCE_THRESHOLD", "high"),
        ("TRIPMARKS_CONFIDENCE_THRESHOLD", "1.5"),
        ("TRIPMARKS_PROXIMITY_METERS", "0"),
        ("TRIPMARKS_MAX_CONCURRENCY", "2.5"),
        ("TRIPMARKS_MAX_CONCURRENCY", "0"),
    ],
)
def test_get_processing_config_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_processing_config()


def test_processing_config_requires_fallback_category() -> None:
    with pytest.raises(ConfigurationError, match="other"):
        ProcessingConfig(categories=("restaurant", "cafe"))


def test_storage_and_database_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TRIPMARKS_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("DATABASE_URI", raising=False)

    storage = get_storage_config()
    database = get_database_config()

    assert storage.resolve_data_dir() == tmp_path.resolve()
    assert database.uri == f"sqlite+pysqlite:///{tmp_path.resolve() / 'tripmarks.db'}"


def test_database_uri_env_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")

    assert get_database_config().uri == "sqlite+pysqlite:///:memory:"
