"""Application configuration helpers."""

from __future__ import annotations

from .claude import ClaudeConfig, get_claude_config
from .crawler import CrawlerConfig, get_crawler_config
from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .google_maps import GoogleMapsConfig, get_google_maps_config
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .processing import DEFAULT_PLACE_CATEGORIES, ProcessingConfig, get_processing_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_PLACE_CATEGORIES",
    "CacheConfig",
    "ClaudeConfig",
    "ConfigurationError",
    "CrawlerConfig",
    "DatabaseConfig",
    "GoogleMapsConfig",
    "MissingConfigurationError",
    "ProcessingConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_claude_config",
    "get_crawler_config",
    "get_database_config",
    "get_google_maps_config",
    "get_processing_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
