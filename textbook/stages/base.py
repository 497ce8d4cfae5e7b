"""
Helpers shared by the stage functions.
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from pathlib import Path

from loguru import logger

from textbook.core.context import StageContext
from textbook.core.models import Concept
from textbook.extraction.base import ExtractionResult

StageFn = Callable[[StageContext], Awaitable[None]]


def write_page(path: Path, content: str) -> Path:
    """Write a UTF-8 text file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.debug(f"Wrote {path} ({len(content)} chars)")
    return path


def concepts_by_chapter(concepts: list[Concept]) -> dict[int, list[Concept]]:
    """Group concepts by owning chapter, preserving input order."""
    grouped: dict[int, list[Concept]] = {}
    for concept in concepts:
        grouped.setdefault(concept.chapter, []).append(concept)
    return grouped


def log_diagnostics(stage: str, result: ExtractionResult) -> None:
    """Log what an extractor skipped or synthesized."""
    if not result.degraded:
        return
    logger.warning(f"{stage}: {len(result.skipped)} items skipped or synthesized during extraction")
    for item in result.skipped:
        logger.debug(f"{stage}: [{item.location}] {item.reason}: {item.text}")
