"""Google Maps Platform configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, ShouldCacheHook

GOOGLE_MAPS_BASE_URL = "https://maps.googleapis.com/maps/api/"
GOOGLE_MAPS_TIMEOUT_SECONDS = 10.0
CACHEABLE_STATUSES = frozenset({"OK", "ZERO_RESULTS"})


@dataclass(frozen=True)
class GoogleMapsConfig:
    """Holds Google Maps API configuration values."""

    api_key: str
    resilience: ResilienceConfig
    language: str | None = None


def should_cache_maps_payload(payload: object) -> bool:
    """Only cache definitive answers; quota and auth errors must be retried later."""

    if not isinstance(payload, dict):
        return False
    return payload.get("status") in CACHEABLE_STATUSES  # pyright: ignore[reportUnknownMemberType]


def get_google_maps_config(
    *,
    resilience: ResilienceConfig | None = None,
    cache_predicate: ShouldCacheHook | None = None,
) -> GoogleMapsConfig:
    values = require_env_vars(("GOOGLE_MAPS_API_KEY",))
    return GoogleMapsConfig(
        api_key=values["GOOGLE_MAPS_API_KEY"],
        resilience=resilience
        or ResilienceConfig(
            name="google-maps",
            base_url=GOOGLE_MAPS_BASE_URL,
            timeout_seconds=GOOGLE_MAPS_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=20, per_seconds=1.0),
            cache=CacheConfig(
                backend="sqlite",
                default_ttl_seconds=7 * 24 * 3600.0,
                should_cache=cache_predicate or should_cache_maps_payload,
            ),
        ),
    )
