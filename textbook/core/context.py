"""
Pipeline Context.

A write-once blackboard shared by all stages of one run. Each slot is
populated exactly once, by the stage that owns it, and is read-only
afterwards. Stages never see the PipelineContext directly: the orchestrator
hands each one a StageContext that can read every slot but publish only the
slot that stage owns.
"""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

from .exceptions import ContextSlotError
from .models import ChapterOutline, Concept, CourseDescription, TextbookConfig

if TYPE_CHECKING:
    from config import Settings
    from textbook.generation.client import GenerationService


SLOT_COURSE_DESCRIPTION = "course_description"
SLOT_CONCEPTS = "concepts"
SLOT_CHAPTERS = "chapters"

CONTEXT_SLOTS = (SLOT_COURSE_DESCRIPTION, SLOT_CONCEPTS, SLOT_CHAPTERS)


class PipelineContext:
    """Configuration plus the structured artifacts accumulated by earlier stages."""

    def __init__(self, config: TextbookConfig):
        self.config = config
        self.output_dir: Path = config.output_dir
        self._slots: dict[str, Any] = {}

    @property
    def docs_dir(self) -> Path:
        """Root of the MkDocs ``docs`` tree."""
        return self.output_dir / "docs"

    # ========================================
    # Slot access
    # ========================================

    def is_populated(self, slot: str) -> bool:
        """Whether a slot has been written."""
        return slot in self._slots

    def get(self, slot: str) -> Any:
        """Read a slot, returning None if it is still empty."""
        self._check_known(slot)
        return self._slots.get(slot)

    def set(self, slot: str, value: Any) -> None:
        """Populate a slot. Raises ContextSlotError if it was already written."""
        self._check_known(slot)
        if slot in self._slots:
            raise ContextSlotError(f"Context slot '{slot}' is already populated")
        if isinstance(value, list):
            value = tuple(value)
        self._slots[slot] = value
        logger.debug(f"Context slot '{slot}' populated")

    def _check_known(self, slot: str) -> None:
        if slot not in CONTEXT_SLOTS:
            raise ContextSlotError(f"Unknown context slot '{slot}'")

    # ========================================
    # Typed readers
    # ========================================

    @property
    def course_description(self) -> CourseDescription | None:
        return self._slots.get(SLOT_COURSE_DESCRIPTION)

    @property
    def concepts(self) -> list[Concept]:
        """Learning-graph concepts, or an empty list before stage 2 has run."""
        return list(self._slots.get(SLOT_CONCEPTS, ()))

    @property
    def chapters(self) -> list[ChapterOutline]:
        """Chapter outlines, or an empty list before stage 3 has run."""
        return list(self._slots.get(SLOT_CHAPTERS, ()))


class StageContext:
    """
    The narrowed view of the context handed to a single stage.

    Read access covers the configuration and every slot; write access is
    limited to ``owned_slot`` (None for stages that only write files).
    """

    def __init__(
        self,
        context: PipelineContext,
        generator: GenerationService,
        settings: Settings,
        owned_slot: str | None = None,
    ):
        if owned_slot is not None and owned_slot not in CONTEXT_SLOTS:
            raise ContextSlotError(f"Unknown context slot '{owned_slot}'")
        self._context = context
        self.generator = generator
        self.settings = settings
        self.owned_slot = owned_slot

    @property
    def config(self) -> TextbookConfig:
        return self._context.config

    @property
    def output_dir(self) -> Path:
        return self._context.output_dir

    @property
    def docs_dir(self) -> Path:
        return self._context.docs_dir

    @property
    def course_description(self) -> CourseDescription | None:
        return self._context.course_description

    @property
    def concepts(self) -> list[Concept]:
        return self._context.concepts

    @property
    def chapters(self) -> list[ChapterOutline]:
        return self._context.chapters

    @property
    def title(self) -> str:
        """Course title if known, otherwise the raw topic."""
        description = self.course_description
        return description.title if description and description.title else self.config.topic

    @property
    def course_topics(self) -> list[str]:
        description = self.course_description
        return list(description.topics) if description else []

    def publish(self, slot: str, value: Any) -> None:
        """Write this stage's slot. Any other slot is rejected."""
        if slot != self.owned_slot:
            raise ContextSlotError(
                f"Stage may only publish '{self.owned_slot}', not '{slot}'"
            )
        self._context.set(slot, value)

    def require_chapters(self) -> list[ChapterOutline]:
        """Chapter outlines, raising if the chapter structure stage has not produced them."""
        chapters = self.chapters
        if not chapters:
            raise ContextSlotError(
                "Chapter structure must be generated before this stage can run"
            )
        return chapters
