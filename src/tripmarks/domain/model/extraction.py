"""Ephemeral results of analysing a source item."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True, kw_only=True)
class ExtractedCandidate:
    name: str
    category: str
    confidence: float
    name_en: str | None = None
    note: str | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be within [0, 1], got {self.confidence}")


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    candidates: tuple[ExtractedCandidate, ...] = field(default_factory=tuple)
    raw_text: str = ""
