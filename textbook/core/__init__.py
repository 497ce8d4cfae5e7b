"""
Core types shared by every part of the pipeline.
"""

from .context import (
    CONTEXT_SLOTS,
    SLOT_CHAPTERS,
    SLOT_CONCEPTS,
    SLOT_COURSE_DESCRIPTION,
    PipelineContext,
    StageContext,
)
from .exceptions import (
    ConfigurationError,
    ContextSlotError,
    GenerationError,
    StageError,
    TextbookError,
)
from .models import (
    HIGHER_ORDER_LEVELS,
    BloomLevel,
    ChapterOutline,
    Concept,
    CourseDescription,
    DeployTarget,
    Taxonomy,
    TextbookConfig,
)

__all__ = [
    "BloomLevel",
    "ChapterOutline",
    "Concept",
    "ConfigurationError",
    "CONTEXT_SLOTS",
    "ContextSlotError",
    "CourseDescription",
    "DeployTarget",
    "GenerationError",
    "HIGHER_ORDER_LEVELS",
    "PipelineContext",
    "SLOT_CHAPTERS",
    "SLOT_CONCEPTS",
    "SLOT_COURSE_DESCRIPTION",
    "StageContext",
    "StageError",
    "Taxonomy",
    "TextbookConfig",
    "TextbookError",
]
