"""
Stage 7: FAQ.
"""
from __future__ import annotations

from textbook.core.context import StageContext
from textbook.generation.prompts import FAQ_SYSTEM

from .base import write_page


def build_prompt(title: str, topic: str, topics: list[str]) -> str:
    if topics:
        listed = "\n".join(f"- Chapter {i}: {t}" for i, t in enumerate(topics, start=1))
        category_hints = f"The course covers these topics (use them to derive category names):\n{listed}"
    else:
        category_hints = f'The course covers the topic: "{topic}"'

    return f"""Generate a comprehensive FAQ page for an intelligent textbook titled "{title}" on the subject of "{topic}".

{category_hints}

Requirements:
- Produce exactly 40-60 questions total, spread across 5-8 thematic categories.
- Each category must have a level-2 heading (## Category Name).
- Each question must use the MkDocs collapsible admonition format exactly:

??? question "Question text here?"
    Answer text here. Write 2-4 sentences that fully resolve the question.
    Use plain prose; avoid bullet lists inside answers unless they genuinely help clarity.

- Questions should be authentic: what a learner would actually type into a search bar.
- Cover foundational concepts, common misconceptions, practical application, tools, career relevance, and "how do I" questions.
- Do NOT use generic questions like "What is this course about?"; make every question domain-specific.
- Distribute Bloom's Taxonomy levels across questions (recall, understanding, application, analysis).
- Begin the document with a single introductory sentence before the first ## heading.

Output only valid markdown with no code fences around the document, no preamble, and no commentary."""


async def run(ctx: StageContext) -> None:
    config = ctx.config
    raw = await ctx.generator.generate(
        build_prompt(ctx.title, config.topic, ctx.course_topics),
        system=FAQ_SYSTEM,
        model=config.model,
        max_tokens=ctx.settings.default_max_tokens,
    )
    write_page(ctx.docs_dir / "faq.md", raw.strip())
