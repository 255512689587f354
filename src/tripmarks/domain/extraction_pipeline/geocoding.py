"""Resolve candidate names to coordinates by racing several query formulations."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import IntEnum
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from tripmarks.domain.model import GeocodeResult
    from tripmarks.domain.ports import GeocodeFetcher, GeocodingProvider

log = getLogger(__name__)


class Strategy(IntEnum):
    """Query formulations; lower values are preferred."""

    POI_WITH_CONTEXT = 1
    ADDRESS_WITH_CONTEXT = 2
    POI_ENGLISH_WITH_CONTEXT = 3
    POI_BARE = 4
    POI_ENGLISH_BARE = 5


@dataclass(frozen=True, slots=True)
class _PlannedLookup:
    strategy: Strategy
    query: str
    call: Callable[[str], Awaitable[GeocodeResult | None]]


def _context_query(name: str, destination: str, country: str | None, *, sep: str) -> str:
    parts = [part for part in (name, destination, country) if part]
    return sep.join(parts)


class GeocodingCascade:
    """Launch every strategy concurrently and keep the best-ranked hit.

    All lookups are awaited to completion so the winner depends only on rank,
    never on which response arrived first. Lookups that raise count as misses.
    """

    def __init__(self, provider: GeocodingProvider) -> None:
        self._provider = provider

    def plan(
        self,
        name: str,
        name_en: str | None,
        destination: str,
        country: str | None,
    ) -> list[_PlannedLookup]:
        search = self._provider.text_search
        geocode = self._provider.geocode_address
        lookups = [
            _PlannedLookup(
                Strategy.POI_WITH_CONTEXT,
                _context_query(name, destination, country, sep=" "),
                search,
            ),
            _PlannedLookup(
                Strategy.ADDRESS_WITH_CONTEXT,
                _context_query(name, destination, country, sep=", "),
                geocode,
            ),
        ]
        english = name_en if name_en and name_en != name else None
        if english is not None:
            lookups.append(
                _PlannedLookup(
                    Strategy.POI_ENGLISH_WITH_CONTEXT,
                    _context_query(english, destination, country, sep=" "),
                    search,
                )
            )
        lookups.append(_PlannedLookup(Strategy.POI_BARE, name, search))
        if english is not None:
            lookups.append(_PlannedLookup(Strategy.POI_ENGLISH_BARE, english, search))
        return lookups

    async def resolve_with_fallback(
        self,
        name: str,
        name_en: str | None,
        destination: str,
        country: str | None = None,
    ) -> GeocodeResult | None:
        lookups = self.plan(name, name_en, destination, country)
        outcomes = await asyncio.gather(
            *(lookup.call(lookup.query) for lookup in lookups),
            return_exceptions=True,
        )

        hits: list[tuple[Strategy, GeocodeResult]] = []
        for lookup, outcome in zip(lookups, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                log.warning(
                    "Geocoding strategy %s failed for %r: %s",
                    lookup.strategy.name,
                    lookup.query,
                    outcome,
                )
                continue
            if outcome is not None:
                hits.append((lookup.strategy, outcome))

        if not hits:
            log.info("All geocoding strategies missed for %r (en=%r)", name, name_en)
            return None

        strategy, result = min(hits, key=lambda hit: hit[0])
        log.debug("Resolved %r via %s", name, strategy.name)
        return result

    async def __call__(
        self,
        name: str,
        name_en: str | None,
        destination: str,
        country: str | None = None,
    ) -> GeocodeResult | None:
        return await self.resolve_with_fallback(name, name_en, destination, country)


@dataclass(slots=True)
class GeocodeCache:
    """Batch-scoped memo of geocoding outcomes, misses included."""

    _entries: dict[str, GeocodeResult | None] = field(
        default_factory=dict[str, "GeocodeResult | None"]
    )

    @staticmethod
    def key(name: str, name_en: str | None) -> str:
        return f"{name}|{name_en or ''}"

    async def get_or_fetch(
        self,
        name: str,
        name_en: str | None,
        destination: str,
        country: str | None,
        fetcher: GeocodeFetcher,
    ) -> GeocodeResult | None:
        cache_key = self.key(name, name_en)
        if cache_key in self._entries:
            log.debug("Geocode cache hit for %r", name)
            return self._entries[cache_key]

        log.debug("Geocode cache miss for %r (en=%r)", name, name_en)
        result = await fetcher(name, name_en, destination, country)
        self._entries[cache_key] = result
        return result

    def has(self, name: str, name_en: str | None) -> bool:
        return self.key(name, name_en) in self._entries

    def get(self, name: str, name_en: str | None) -> GeocodeResult | None:
        return self._entries.get(self.key(name, name_en))

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
