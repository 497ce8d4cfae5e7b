"""
Concept-Table Extractor.

Turns a markdown table of learning-graph concepts into Concept records.

Expected columns (header and separator rows are skipped):
    | ID | Concept | Chapter | Dependencies | Taxonomy | Bloom's Level |

Tolerates extra whitespace, missing cells, free-text taxonomy and Bloom
labels, and prose around the table. Never raises.
"""
from __future__ import annotations

import dataclasses
import re
from collections import Counter

from textbook.core.models import BloomLevel, Concept, Taxonomy

from .base import ExtractionResult

CELL_SEPARATOR = "|"
IDENTIFIER_PATTERN = re.compile(r"^\d+$")

# Substring stems in canonical order; first hit wins
BLOOM_STEMS: list[tuple[str, BloomLevel]] = [
    ("remember", BloomLevel.REMEMBER),
    ("understand", BloomLevel.UNDERSTAND),
    ("apply", BloomLevel.APPLY),
    ("analyz", BloomLevel.ANALYZE),
    ("evaluat", BloomLevel.EVALUATE),
    ("creat", BloomLevel.CREATE),
]


# =============================================================================
# Normalization
# =============================================================================


def normalize_taxonomy(raw: str) -> Taxonomy:
    """
    Map a free-text taxonomy label to a Taxonomy member.

    Anything that is neither foundational nor advanced is treated as Core.
    """
    lower = raw.lower()
    if "found" in lower:
        return Taxonomy.FOUNDATION
    if "adv" in lower:
        return Taxonomy.ADVANCED
    return Taxonomy.CORE


def normalize_bloom_level(raw: str) -> str:
    """
    Map a free-text Bloom label to its canonical name.

    Unrecognised labels are returned trimmed but otherwise verbatim.
    """
    lower = raw.lower()
    for stem, level in BLOOM_STEMS:
        if stem in lower:
            return level.value
    return raw.strip()


# =============================================================================
# Parsing
# =============================================================================


def split_row(line: str) -> list[str]:
    """Split a table line into trimmed cells, dropping the empty edge cells of ``| a | b |``."""
    cells = [cell.strip() for cell in line.split(CELL_SEPARATOR)]
    if cells and not cells[0]:
        cells = cells[1:]
    if cells and not cells[-1]:
        cells = cells[:-1]
    return cells


def _cell(cells: list[str], index: int) -> str:
    return cells[index] if index < len(cells) else ""


def _parse_int(value: str) -> int | None:
    try:
        return int(value.strip())
    except ValueError:
        return None


def parse_concept_table(text: str) -> ExtractionResult[Concept]:
    """
    Extract Concept records from model output.

    Args:
        text: Raw model output, expected to contain a markdown table

    Returns:
        ExtractionResult with concepts in textual order and diagnostics for
        skipped rows and dropped dependency references
    """
    result: ExtractionResult[Concept] = ExtractionResult()

    for line_number, line in enumerate(text.splitlines(), start=1):
        if CELL_SEPARATOR not in line:
            continue

        cells = split_row(line)
        if not cells or not IDENTIFIER_PATTERN.match(cells[0]):
            result.note(line_number, line, "not a data row (header or separator)")
            continue

        concept_id = int(cells[0])

        chapter = _parse_int(_cell(cells, 2))
        if chapter is None or chapter < 1:
            chapter = 1

        dependencies: list[int] = []
        for piece in _cell(cells, 3).split(","):
            if not piece.strip():
                continue
            dep = _parse_int(piece)
            if dep is None:
                continue
            if dep <= 0 or dep >= concept_id:
                result.note(line_number, line, f"dropped dependency {dep} (not below own id {concept_id})")
                continue
            if dep not in dependencies:
                dependencies.append(dep)

        result.items.append(
            Concept(
                id=concept_id,
                name=_cell(cells, 1),
                chapter=chapter,
                dependencies=dependencies,
                taxonomy=normalize_taxonomy(_cell(cells, 4)),
                bloom_level=normalize_bloom_level(_cell(cells, 5)),
            )
        )

    # Second pass: references must name a concept that was actually extracted
    known_ids = {concept.id for concept in result.items}
    for index, concept in enumerate(result.items):
        unknown = [dep for dep in concept.dependencies if dep not in known_ids]
        if unknown:
            result.note(0, concept.label, f"dropped unknown dependencies {unknown}")
            result.items[index] = dataclasses.replace(
                concept,
                dependencies=[dep for dep in concept.dependencies if dep in known_ids],
            )

    return result


def validate_concepts(
    concepts: list[Concept],
    chapter_count: int,
    expected_count: int | None = None,
) -> list[str]:
    """
    Report quality problems in an extracted concept list.

    Nothing is rejected; the caller decides whether to log or ignore.

    Returns:
        Human-readable warnings (empty when the list looks sound)
    """
    warnings: list[str] = []

    if expected_count is not None and len(concepts) != expected_count:
        warnings.append(f"Requested {expected_count} concepts, extracted {len(concepts)}")

    out_of_range = [c.id for c in concepts if not 1 <= c.chapter <= chapter_count]
    if out_of_range:
        warnings.append(
            f"{len(out_of_range)} concepts assigned to chapters outside 1-{chapter_count}: "
            f"{out_of_range[:10]}"
        )

    duplicates = sorted(cid for cid, count in Counter(c.id for c in concepts).items() if count > 1)
    if duplicates:
        warnings.append(f"Duplicate concept ids: {duplicates[:10]}")

    return warnings
