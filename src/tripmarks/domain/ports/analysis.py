"""Port for services that extract candidate places from source content."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tripmarks.domain.model import AnalysisResult, ItemPayload


@runtime_checkable
class AnalysisService(Protocol):
    """Turn one item's payload into candidate place mentions.

    Implementations return an empty candidate tuple when nothing was found and
    raise ``AnalysisError`` for transport failures or unparseable responses.
    """

    async def analyze(
        self,
        payload: ItemPayload,
        destination: str,
        country: str | None,
    ) -> AnalysisResult: ...
