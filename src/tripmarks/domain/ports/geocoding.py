"""Port for geocoding providers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tripmarks.domain.model import GeocodeResult


@runtime_checkable
class GeocodingProvider(Protocol):
    """Two primitive lookups; ``None`` means no match, errors raise."""

    async def text_search(self, query: str) -> GeocodeResult | None: ...

    async def geocode_address(self, address: str) -> GeocodeResult | None: ...


type GeocodeFetcher = Callable[
    [str, str | None, str, str | None],
    Awaitable[GeocodeResult | None],
]
