"""
Stage 12: Top-level Summary.

Writes README.md at the output root, reusing the metrics summary table.
"""
from __future__ import annotations

import re
from pathlib import Path

from textbook.core.context import StageContext
from textbook.core.models import DeployTarget
from textbook.generation.prompts import README_SYSTEM

from .base import write_page

SUMMARY_TABLE_PATTERN = re.compile(r"## Summary Table\s*\n(.*?)(?=\n##|\Z)", re.DOTALL)


def read_summary_table(metrics_path: Path) -> str:
    """The ``## Summary Table`` block of book-metrics.md, or "" if unavailable."""
    if not metrics_path.is_file():
        return ""
    match = SUMMARY_TABLE_PATTERN.search(metrics_path.read_text(encoding="utf-8"))
    return match.group(1).strip() if match else ""


def build_chapter_table(topics: list[str]) -> str:
    if not topics:
        return ""
    rows = [f"| {i} | {t} |" for i, t in enumerate(topics, start=1)]
    return "\n".join(["| # | Chapter Title |", "|---|---------------|", *rows])


def build_prompt(ctx: StageContext, live_url: str | None, metrics_table: str) -> str:
    config = ctx.config
    description = ctx.course_description
    topics = ctx.course_topics

    subtitle = description.subtitle if description else ""
    audience = description.target_audience if description else ""
    live_site_line = f"Live Site: {live_url}" if live_url else ""
    live_badge = (
        f"[![Live Site](https://img.shields.io/badge/Live%20Site-GitHub%20Pages-blue)]({live_url})"
        if live_url else ""
    )

    return f"""Write a GitHub README for an intelligent textbook repository.

Title: {ctx.title}
Subtitle: {subtitle}
Topic: {config.topic}
Target Audience: {audience or 'Professional learners and students'}
{live_site_line}
Repo Name: {config.repo_name or 'this-textbook'}
Chapters: {len(topics) or config.chapters}
Simulations: {config.simulations}
Concepts Mapped: {len(ctx.concepts) or config.concepts}

Chapter table (use this verbatim in the README):
{build_chapter_table(topics)}

Metrics table (use this verbatim in a Metrics section):
{metrics_table}

Write the README with these sections in order:
1. Title and badges (no coursework or academic framing; let the content speak for itself)
2. One-paragraph overview that explains what this textbook covers and who it's for
3. A "What's Inside" section with:
   a. The chapter table (verbatim, label it "## Chapters")
   b. A bullet list of simulation highlights (plausible names based on the topic and chapter titles)
4. Metrics section with the metrics table
5. "Built With" section listing: MkDocs Material, Claude (Anthropic), Python, Chart.js, Mermaid
6. "Getting Started" with local setup steps:
   ```bash
   pip install mkdocs-material
   mkdocs serve
   ```
7. License: MIT

Badges to include (at the top, after the title):
- {live_badge}
- [![License: MIT](https://img.shields.io/badge/License-MIT-yellow.svg)](LICENSE)
- [![MkDocs](https://img.shields.io/badge/Built%20with-MkDocs%20Material-teal)](https://squidfunk.github.io/mkdocs-material/)
- [![Claude](https://img.shields.io/badge/Powered%20by-Claude%20AI-orange)](https://anthropic.com)

Rules:
- Do NOT use phrases like "built as coursework," "university project," or "class assignment."
- Write in a professional, authoritative tone, like a published technical resource.
- Keep the overview to 3-5 sentences maximum.
- Output only valid markdown with no code fences around the document, no preamble, and no commentary."""


async def run(ctx: StageContext) -> None:
    config = ctx.config
    live_url = None
    if config.deploy == DeployTarget.GITHUB_PAGES:
        live_url = ctx.settings.pages_url(config.repo_name)

    metrics_table = read_summary_table(ctx.docs_dir / "learning-graph" / "book-metrics.md")

    raw = await ctx.generator.generate(
        build_prompt(ctx, live_url, metrics_table),
        system=README_SYSTEM,
        model=config.model,
        max_tokens=ctx.settings.readme_max_tokens,
    )
    write_page(ctx.output_dir / "README.md", raw.strip())
