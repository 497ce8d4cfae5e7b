"""
Structured extraction of model output.

All extractors are pure functions of their input and degrade to partial or
synthesized data instead of raising.
"""

from .base import ExtractionResult, SkippedItem
from .chapter_outline import parse_chapter_outlines, parse_concept_ids
from .concept_table import (
    normalize_bloom_level,
    normalize_taxonomy,
    parse_concept_table,
    validate_concepts,
)
from .course_description import parse_course_description

__all__ = [
    "ExtractionResult",
    "SkippedItem",
    "normalize_bloom_level",
    "normalize_taxonomy",
    "parse_chapter_outlines",
    "parse_concept_ids",
    "parse_concept_table",
    "parse_course_description",
    "validate_concepts",
]
