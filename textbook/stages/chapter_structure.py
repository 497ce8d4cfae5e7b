"""
Stage 3: Chapter Structure.

Generates per-chapter outlines, publishes the extracted ChapterOutline list,
and writes docs/chapters/index.md.
"""
from __future__ import annotations

from loguru import logger

from textbook.core.context import SLOT_CHAPTERS, StageContext
from textbook.core.models import ChapterOutline, Concept
from textbook.extraction.chapter_outline import parse_chapter_outlines
from textbook.generation.prompts import CHAPTER_STRUCTURE_SYSTEM

from .base import log_diagnostics, write_page

PROMPT_CONCEPTS_PER_CHAPTER = 8


def build_concept_map(concepts: list[Concept]) -> dict[int, list[str]]:
    """Chapter number -> ``"id. name"`` labels of the concepts it owns."""
    concept_map: dict[int, list[str]] = {}
    for concept in concepts:
        concept_map.setdefault(concept.chapter, []).append(concept.label)
    return concept_map


def build_prompt(
    title: str,
    topic: str,
    chapters: int,
    topics: list[str],
    concept_map: dict[int, list[str]],
) -> str:
    entries = []
    for number in range(1, chapters + 1):
        topic_title = topics[number - 1] if number <= len(topics) else f"Chapter {number}"
        key_concepts = ", ".join(concept_map.get(number, [])[:PROMPT_CONCEPTS_PER_CHAPTER])
        entries.append(f"Chapter {number}: {topic_title}\n  Key concepts: {key_concepts or 'TBD'}")
    chapter_list = "\n\n".join(entries)

    return f"""Generate detailed chapter outlines for the intelligent textbook: "{title}"

Topic domain: {topic}

Chapters to outline:
{chapter_list}

For each of the {chapters} chapters, produce output in this exact format:

---
## Chapter N: [Title]

**Summary:** [2-3 sentences describing what the chapter covers, why it matters, and what the learner will be able to do after completing it. Be specific and name the key concepts.]

**Concept IDs:** [comma-separated list of concept IDs that belong to this chapter, taken from the chapter's key concepts above]

**Key Questions:**
- [A guiding question the chapter answers]
- [Another guiding question]
- [A third guiding question]

**Learning Objectives:**
- [Specific, measurable objective using Bloom's action verb]
- [Another objective]
- [Another objective]
---

Generate all {chapters} chapters in sequence. Be specific to the domain and avoid vague generic language.
Each summary should stand alone as a meaningful description of the chapter's intellectual content."""


def build_chapters_index(title: str, chapters: list[ChapterOutline]) -> str:
    rows = "\n".join(
        f"| [Chapter {ch.number}: {ch.title}]({ch.slug}.md) | {len(ch.concepts)} concepts | {ch.summary} |"
        for ch in chapters
    )
    links = "\n".join(f"- [Chapter {ch.number}: {ch.title}]({ch.slug}.md)" for ch in chapters)

    return f"""# Chapters: {title}

This textbook is organized into {len(chapters)} chapters, each building on the concepts and skills developed in previous chapters.

## Chapter Overview

| Chapter | Concepts | Summary |
|---------|----------|---------|
{rows}

## Quick Navigation

{links}
"""


async def run(ctx: StageContext) -> None:
    config = ctx.config
    topics = ctx.course_topics
    concept_map = build_concept_map(ctx.concepts)

    raw = await ctx.generator.generate(
        build_prompt(ctx.title, config.topic, config.chapters, topics, concept_map),
        system=CHAPTER_STRUCTURE_SYSTEM,
        model=config.model,
        max_tokens=ctx.settings.default_max_tokens,
    )

    result = parse_chapter_outlines(raw, config.chapters, topics, concept_map)
    log_diagnostics("Chapter Structure", result)

    chapters = result.items
    ctx.publish(SLOT_CHAPTERS, chapters)
    logger.info(f"Outlined {len(chapters)} chapters")

    write_page(ctx.docs_dir / "chapters" / "index.md", build_chapters_index(ctx.title, chapters))
