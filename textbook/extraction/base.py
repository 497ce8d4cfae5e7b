"""
Extraction results with diagnostics.

Extractors never raise on malformed model output. They return whatever they
could parse together with a record of what was skipped or synthesized, so
callers can log it and tests can assert on the degradation path.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class SkippedItem:
    """A row or block the extractor did not turn into a record."""

    location: int  # 1-based line number (tables) or block index (outlines)
    text: str
    reason: str


@dataclass
class ExtractionResult(Generic[T]):
    """Parsed records plus diagnostics."""

    items: list[T] = field(default_factory=list)
    skipped: list[SkippedItem] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        """True if anything was skipped, dropped, or synthesized."""
        return bool(self.skipped)

    def note(self, location: int, text: str, reason: str) -> None:
        self.skipped.append(SkippedItem(location=location, text=text.strip()[:120], reason=reason))

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
