"""
Chapter-Outline Extractor.

Turns delimited chapter blocks into exactly one ChapterOutline per chapter
number. Expected block shape:

    ---
    ## Chapter 3: Routing Fundamentals

    **Summary:** What the chapter covers ...
    continued summary text.

    **Concept IDs:** 12, 13, 14
    ---

Blocks without a chapter heading are ignored. A repeated chapter number keeps
the first block. Chapters the text never produced are synthesized from the
fallback titles and concept map. Never raises.
"""
from __future__ import annotations

import re

from textbook.core.models import ChapterOutline

from .base import ExtractionResult

DELIMITER_PATTERN = re.compile(r"^[ \t]*-{3,}[ \t]*$", re.MULTILINE)

HEADING_PATTERN = re.compile(
    r"^[ \t]*(?:#{1,6}[ \t]*)?(?:\*\*)?Chapter[ \t]+(\d+)[ \t]*:[ \t]*(.+?)[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)

# **Label:** value   or   **Label**: value
BOLD_LABEL_PATTERN = re.compile(r"^\*\*([^*\n]+?)(?::\*\*|\*\*:)\s*(.*)$")
# Label: value (only for the labels in PLAIN_LABELS)
PLAIN_LABEL_PATTERN = re.compile(r"^([A-Z][A-Za-z]*(?: [A-Za-z]+){0,3}):\s*(.*)$")

LEADING_INT_PATTERN = re.compile(r"^\s*(\d+)")

SUMMARY_LABEL = "summary"
CONCEPT_IDS_LABELS = ("concept ids", "concept id")
PLAIN_LABELS = frozenset(
    (SUMMARY_LABEL, *CONCEPT_IDS_LABELS, "key questions", "learning objectives")
)


def _match_label(line: str) -> tuple[str, str] | None:
    bold = BOLD_LABEL_PATTERN.match(line)
    match = bold or PLAIN_LABEL_PATTERN.match(line)
    if not match:
        return None
    key = " ".join(match.group(1).lower().split())
    if not bold and key not in PLAIN_LABELS:
        return None
    return key, match.group(2).strip()


def _labeled_fields(block: str) -> dict[str, str]:
    """
    Collect ``Label: value`` fields of a block.

    A value continues over following lines until a blank line, a heading, or
    the next label. Unbolded ``Word: text`` lines only start a field when the
    word is a known label; otherwise they continue the current value.
    Continuation lines are joined with single spaces.
    """
    fields: dict[str, list[str]] = {}
    current: list[str] | None = None

    for line in block.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            current = None
            continue

        labeled = _match_label(stripped)
        if labeled:
            key, value = labeled
            if key in fields:
                current = None
                continue
            current = fields[key] = [value] if value else []
            continue

        if current is not None:
            current.append(stripped)

    return {key: " ".join(" ".join(parts).split()) for key, parts in fields.items()}


def _leading_int(text: str) -> int | None:
    match = LEADING_INT_PATTERN.match(text)
    return int(match.group(1)) if match else None


def parse_concept_ids(value: str) -> list[int]:
    """
    Parse a comma-separated concept id list.

    Each piece contributes its leading integer (``"12. Name"`` gives 12);
    non-numeric and non-positive pieces are dropped.
    """
    ids: list[int] = []
    for piece in value.strip().strip("[]").split(","):
        number = _leading_int(piece)
        if number is not None and number > 0:
            ids.append(number)
    return ids


def _fallback_concepts(concept_map: dict[int, list[str]], number: int) -> list[int]:
    ids = []
    for entry in concept_map.get(number, []):
        number_id = _leading_int(str(entry))
        if number_id is not None:
            ids.append(number_id)
    return ids


def parse_chapter_outlines(
    text: str,
    chapter_count: int,
    fallback_titles: list[str] | None = None,
    concept_map: dict[int, list[str]] | None = None,
) -> ExtractionResult[ChapterOutline]:
    """
    Extract one ChapterOutline per chapter number from model output.

    Args:
        text: Raw model output with ``---``-delimited chapter blocks
        chapter_count: Required number of chapters (1..chapter_count)
        fallback_titles: Titles for chapters the text is missing, by position
        concept_map: Chapter number -> candidate ``"id. name"`` strings, used
            when a block has no concept ids and for synthesized chapters

    Returns:
        ExtractionResult with exactly ``chapter_count`` outlines sorted by
        chapter number, plus diagnostics
    """
    fallback_titles = fallback_titles or []
    concept_map = concept_map or {}
    result: ExtractionResult[ChapterOutline] = ExtractionResult()
    found: dict[int, ChapterOutline] = {}

    for index, block in enumerate(DELIMITER_PATTERN.split(text), start=1):
        if not block.strip():
            continue

        heading = HEADING_PATTERN.search(block)
        if not heading:
            result.note(index, block, "no 'Chapter N: Title' heading")
            continue

        number = int(heading.group(1))
        title = heading.group(2).strip().strip("*").strip()

        if not 1 <= number <= chapter_count:
            result.note(index, block, f"chapter {number} outside 1-{chapter_count}")
            continue
        if number in found:
            result.note(index, block, f"duplicate chapter {number}, keeping the first block")
            continue

        fields = _labeled_fields(block[heading.end():])
        summary = fields.get(SUMMARY_LABEL, "")

        concepts: list[int] = []
        for label in CONCEPT_IDS_LABELS:
            if label in fields:
                concepts = parse_concept_ids(fields[label])
                break
        if not concepts:
            concepts = _fallback_concepts(concept_map, number)

        found[number] = ChapterOutline(
            number=number,
            title=title,
            summary=summary,
            concepts=concepts,
        )

    for number in range(1, chapter_count + 1):
        if number in found:
            continue
        title = fallback_titles[number - 1] if number <= len(fallback_titles) else f"Chapter {number}"
        found[number] = ChapterOutline(
            number=number,
            title=title,
            summary=f"Chapter {number} covers {title}.",
            concepts=_fallback_concepts(concept_map, number),
        )
        result.note(number, title, f"chapter {number} missing from output, synthesized")

    result.items = [found[number] for number in sorted(found)]
    return result
