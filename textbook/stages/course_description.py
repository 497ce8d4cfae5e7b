"""
Stage 1: Course Description.

Generates the course overview and publishes the parsed CourseDescription.
Writes docs/course-description.md.
"""
from __future__ import annotations

from loguru import logger

from textbook.core.context import SLOT_COURSE_DESCRIPTION, StageContext
from textbook.extraction.course_description import parse_course_description
from textbook.generation.prompts import COURSE_DESCRIPTION_SYSTEM

from .base import write_page


def build_prompt(topic: str, chapters: int) -> str:
    return f"""Design a comprehensive course description for an intelligent textbook on the topic: "{topic}"

The course will have exactly {chapters} chapters. Generate the following in a structured markdown document:

## Course Title
A compelling, precise title (not generic; make it specific to the domain).

## Subtitle
A one-sentence subtitle that clarifies the course's unique angle or approach.

## Target Audience
2-3 sentences describing the ideal learner: their role, background, and why this course matters to them.

## Prerequisites
List specific prior knowledge or skills a learner should have before starting. Be concrete.

## Topics Covered
List exactly {chapters} topics, one per chapter, each as a bullet point. These will become the chapter titles.
Format each as: - Chapter N: Topic Title

## Learning Outcomes
List exactly 6 learning outcomes, one for each level of Bloom's Taxonomy, in order:
1. Remember: ...
2. Understand: ...
3. Apply: ...
4. Analyze: ...
5. Evaluate: ...
6. Create: ...

Each outcome should begin with a strong action verb appropriate to that Bloom's level.

Write the full document in clean markdown. Be specific to the topic and avoid generic educational boilerplate."""


async def run(ctx: StageContext) -> None:
    config = ctx.config

    raw = await ctx.generator.generate(
        build_prompt(config.topic, config.chapters),
        system=COURSE_DESCRIPTION_SYSTEM,
        model=config.model,
        max_tokens=ctx.settings.default_max_tokens,
    )

    description = parse_course_description(raw, config.topic, config.chapters)
    ctx.publish(SLOT_COURSE_DESCRIPTION, description)
    logger.info(f"Course '{description.title}' with {len(description.topics)} topics")

    write_page(ctx.docs_dir / "course-description.md", raw)
