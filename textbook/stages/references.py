"""
Stage 9: References.
"""
from __future__ import annotations

from textbook.core.context import StageContext
from textbook.generation.prompts import REFERENCES_SYSTEM

from .base import write_page


def build_prompt(title: str, topic: str, chapter_lines: list[str]) -> str:
    if chapter_lines:
        chapter_section = "The textbook has these chapters:\n" + "\n".join(chapter_lines)
    else:
        chapter_section = f'The textbook covers the topic: "{topic}"'

    return f"""Generate a comprehensive references page for an intelligent textbook titled "{title}" on "{topic}".

{chapter_section}

Requirements:
- Produce 8-10 references per chapter, organized under a level-2 heading for each chapter.
- Mix reference types across each chapter: 2-3 books, 2-3 academic papers or conference proceedings, 2-3 authoritative websites or online resources, and 1 video or podcast where relevant.
- Format books as: **Author Last, First (Year).** *Book Title: Subtitle*. Publisher.
- Format papers as: **Author Last, First (Year).** "Paper Title." *Journal or Conference Name*, Volume(Issue), pp. Pages. DOI or URL if available.
- Format websites as: **Organization or Author (Year).** *Page Title*. Retrieved from [URL](URL)
- References should be real, plausible, and directly relevant to the chapter topic, never invented titles with fake ISBNs.
- If a reference is uncertain, use a credible real author and publisher but omit the specific ISBN.
- Begin with a level-1 heading: # References
- Add one sentence of context before the first chapter section.
- End with a level-2 section: ## Further Reading with 3-5 curated resources that span the entire course.

Output only valid markdown with no code fences, preamble, or commentary."""


async def run(ctx: StageContext) -> None:
    config = ctx.config
    if ctx.chapters:
        chapter_lines = [f"- Chapter {ch.number}: {ch.title}" for ch in ctx.chapters]
    else:
        chapter_lines = [f"- Chapter {i}: {t}" for i, t in enumerate(ctx.course_topics, start=1)]

    raw = await ctx.generator.generate(
        build_prompt(ctx.title, config.topic, chapter_lines),
        system=REFERENCES_SYSTEM,
        model=config.model,
        max_tokens=ctx.settings.default_max_tokens,
    )
    write_page(ctx.docs_dir / "references.md", raw.strip())
