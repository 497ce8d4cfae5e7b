"""
Pipeline stages.

Each module exposes ``async def run(ctx: StageContext) -> None`` and is wired
into the fixed stage order by ``textbook.pipeline.orchestrator``.
"""

from . import (
    chapter_content,
    chapter_structure,
    course_description,
    faq,
    glossary,
    learning_graph,
    metrics,
    quizzes,
    readme,
    references,
    simulations,
    site_config,
)
from .base import StageFn, concepts_by_chapter, write_page

__all__ = [
    "StageFn",
    "chapter_content",
    "chapter_structure",
    "concepts_by_chapter",
    "course_description",
    "faq",
    "glossary",
    "learning_graph",
    "metrics",
    "quizzes",
    "readme",
    "references",
    "simulations",
    "site_config",
    "write_page",
]
