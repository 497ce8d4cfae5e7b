"""
Stage 8: Quizzes.

One eight-question quiz per chapter, written to docs/quizzes/quiz-NN.md.
"""
from __future__ import annotations

from textbook.core.context import StageContext
from textbook.generation.client import PromptRequest
from textbook.generation.prompts import QUIZ_SYSTEM

from .base import concepts_by_chapter, write_page

QUESTIONS_PER_QUIZ = 8


def quiz_chapters(ctx: StageContext) -> list[tuple[int, str]]:
    """(number, title) per quiz; course topics stand in when no outlines exist."""
    if ctx.chapters:
        return [(ch.number, ch.title) for ch in ctx.chapters]
    topics = ctx.course_topics
    return [
        (n, topics[n - 1] if n <= len(topics) else f"Chapter {n}")
        for n in range(1, ctx.config.chapters + 1)
    ]


def build_prompt(number: int, title: str, topic: str, concept_names: list[str]) -> str:
    if concept_names:
        listed = "\n".join(f"- {name}" for name in concept_names)
        concept_section = f"Concepts covered in this chapter:\n{listed}"
    else:
        concept_section = f"This chapter covers aspects of: {topic}"

    return f"""Generate exactly {QUESTIONS_PER_QUIZ} multiple-choice quiz questions for Chapter {number}: "{title}" from an intelligent textbook on "{topic}".

{concept_section}

Requirements:
- Exactly {QUESTIONS_PER_QUIZ} questions, numbered Q1-Q{QUESTIONS_PER_QUIZ}.
- Distribute questions across Bloom's Taxonomy levels as follows:
  - Q1: Remember
  - Q2: Understand
  - Q3: Apply
  - Q4: Apply
  - Q5: Analyze
  - Q6: Analyze
  - Q7: Evaluate
  - Q8: Create
- Each question has exactly 4 options labeled A, B, C, D.
- One correct answer per question.
- Distractors should reflect genuine misconceptions, not obviously wrong answers.

Format each question EXACTLY like this (use this collapsible admonition pattern):

## Q1: Remember

**Question text here?**

- A) Option A
- B) Option B
- C) Option C
- D) Option D

??? success "Answer"
    **Correct answer: B**

    Explanation: Write 2-3 sentences explaining why B is correct and why the other options are wrong.

---

Begin the file with a level-1 heading: # Chapter {number} Quiz: {title}
Add one sentence describing what this quiz covers before the first question.

Output only valid markdown with no code fences around the document and no preamble."""


async def run(ctx: StageContext) -> None:
    config = ctx.config
    chapters = quiz_chapters(ctx)
    names_by_chapter = {
        number: [c.name for c in concepts]
        for number, concepts in concepts_by_chapter(ctx.concepts).items()
    }

    results = await ctx.generator.generate_parallel(
        [
            PromptRequest(
                build_prompt(number, title, config.topic, names_by_chapter.get(number, [])),
                QUIZ_SYSTEM,
            )
            for number, title in chapters
        ],
        model=config.model,
        max_tokens=ctx.settings.quiz_max_tokens,
    )

    quizzes_dir = ctx.docs_dir / "quizzes"
    for (number, _), content in zip(chapters, results):
        write_page(quizzes_dir / f"quiz-{number:02d}.md", content.strip())
