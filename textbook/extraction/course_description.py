"""
Course-Description Extractor.

Pulls the named ``## Section`` blocks out of the course description document.
Missing sections become empty values; the chapter topic list is padded so
there is always one entry per chapter.
"""
from __future__ import annotations

import re

from textbook.core.models import CourseDescription

TOPIC_BULLET_PATTERN = re.compile(r"^[-*]\s+(?:Chapter\s+\d+\s*:\s*)?(.+)", re.IGNORECASE)
OUTCOME_PATTERN = re.compile(r"^\d+\.\s+(?:\w+:\s*)?(.+)")


def _section(raw: str, heading: str) -> str:
    """Body of ``## <heading>`` up to the next ``##`` heading or horizontal rule."""
    pattern = re.compile(
        rf"^##\s+{heading}\s*\n+(.*?)(?=^##\s|^---|\Z)",
        re.IGNORECASE | re.MULTILINE | re.DOTALL,
    )
    match = pattern.search(raw)
    return match.group(1).strip() if match else ""


def _first_line(raw: str, heading: str) -> str:
    body = _section(raw, heading)
    return body.splitlines()[0].strip().strip("*#").strip() if body else ""


def parse_course_description(raw: str, topic: str, chapter_count: int) -> CourseDescription:
    """
    Parse a generated course description.

    Args:
        raw: Markdown returned by the model
        topic: Fallback title
        chapter_count: Number of chapter topics to guarantee

    Returns:
        CourseDescription (raw markdown preserved verbatim)
    """
    topics: list[str] = []
    for line in _section(raw, "Topics Covered").splitlines():
        match = TOPIC_BULLET_PATTERN.match(line.strip())
        if match:
            topics.append(match.group(1).strip())
    while len(topics) < chapter_count:
        topics.append(f"Chapter {len(topics) + 1}")

    outcomes: list[str] = []
    for line in _section(raw, "Learning Outcomes").splitlines():
        match = OUTCOME_PATTERN.match(line.strip())
        if match:
            outcomes.append(match.group(1).strip())

    return CourseDescription(
        title=_first_line(raw, "Course Title") or topic,
        subtitle=_first_line(raw, "Subtitle"),
        target_audience=_section(raw, "Target Audience"),
        prerequisites=_section(raw, "Prerequisites"),
        topics=topics,
        learning_outcomes=outcomes,
        raw_markdown=raw,
    )
