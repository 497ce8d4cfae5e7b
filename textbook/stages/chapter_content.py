"""
Stage 4: Chapter Content.

Fans out one long-form generation per chapter outline and writes
docs/chapters/chapter-NN.md.
"""
from __future__ import annotations

from loguru import logger

from textbook.core.context import StageContext
from textbook.core.models import ChapterOutline, Concept
from textbook.generation.client import PromptRequest
from textbook.generation.prompts import CHAPTER_CONTENT_SYSTEM

from .base import write_page


def prerequisite_names(chapter: ChapterOutline, concepts: list[Concept]) -> list[str]:
    """Names of dependencies that are taught in an earlier chapter."""
    by_id = {c.id: c for c in concepts}
    seen: list[int] = []
    for concept in concepts:
        if concept.id not in chapter.concepts:
            continue
        for dep_id in concept.dependencies:
            dep = by_id.get(dep_id)
            if dep and dep.chapter < chapter.number and dep_id not in seen:
                seen.append(dep_id)
    return [by_id[dep_id].name for dep_id in seen]


def build_prompt(chapter: ChapterOutline, concepts: list[Concept], title: str, topic: str) -> str:
    covered = [c for c in concepts if c.id in chapter.concepts]
    concept_lines = "\n".join(
        f"{c.id}. {c.name} ({c.taxonomy.value}, {c.bloom_level})" for c in covered
    )
    prereqs = ", ".join(prerequisite_names(chapter, concepts))

    return f"""Write Chapter {chapter.number} of the intelligent textbook "{title}" on the topic of {topic}.

## Chapter: {chapter.title}

**Chapter Summary:** {chapter.summary}

**Concepts to Cover:**
{concept_lines or '(general chapter concepts)'}

**Prerequisite Concepts (already covered):** {prereqs or 'None'}

---

Write a complete, publication-quality chapter of 3000-5000 words. The chapter must include:

### Required Structure:

1. **Chapter Header**: Use `# Chapter {chapter.number}: {chapter.title}`

2. **Learning Objectives**: A bulleted list of 3-5 specific, measurable objectives using Bloom's action verbs.

3. **Introduction** (300-500 words): Hook the reader with a real-world scenario or surprising insight. Establish why this chapter matters and preview the key ideas.

4. **Main Content Sections**: 4-6 sections using `## Section Title` headers. Each section should:
   - Cover 1-3 concepts from the list above with depth and precision
   - Include at least one of: a mermaid diagram, a comparison table, or a worked example
   - Use `!!! note`, `!!! warning`, `!!! tip`, or `!!! example` admonition boxes where appropriate

5. **Mermaid Diagrams**: Include at least 2 mermaid diagrams in ```mermaid fenced blocks. Prefer:
   - `flowchart TD` for processes
   - `graph LR` for relationships
   - `sequenceDiagram` for interactions

6. **Tables**: Include at least 2 markdown tables comparing concepts, listing properties, or summarizing key points.

7. **Practical Example or Case Study**: A concrete, realistic scenario showing the concepts in action. Walk through it step by step.

8. **Key Takeaways**: A bulleted summary of the 5-7 most important points from the chapter.

9. **Review Questions**: 5 questions of increasing difficulty (Remember to Create level). Mix multiple choice, short answer, and analytical questions.

10. **Further Reading**: 3-5 suggestions for going deeper (books, papers, or online resources).

### Writing Standards:
- Use precise technical language appropriate to the domain
- Define every key term on first use
- Never be vague; support every claim with an example, statistic, or mechanism
- Admonition syntax: `!!! note "Title"` followed by indented content (4 spaces)
- All mermaid diagrams must be syntactically valid
- Code examples (if relevant) must be in fenced blocks with language tag

Begin writing the chapter now. Do not include any preamble; start directly with the chapter header."""


def placeholder(chapter: ChapterOutline) -> str:
    return f"# Chapter {chapter.number}: {chapter.title}\n\nContent generation failed.\n"


async def run(ctx: StageContext) -> None:
    config = ctx.config
    chapters = ctx.require_chapters()
    concepts = ctx.concepts

    requests = [
        PromptRequest(build_prompt(ch, concepts, ctx.title, config.topic), CHAPTER_CONTENT_SYSTEM)
        for ch in chapters
    ]
    results = await ctx.generator.generate_parallel(
        requests,
        model=config.model,
        max_tokens=ctx.settings.content_max_tokens,
    )

    chapters_dir = ctx.docs_dir / "chapters"
    for chapter, content in zip(chapters, results):
        if not content.strip():
            logger.warning(f"Chapter {chapter.number} came back empty, writing placeholder")
            content = placeholder(chapter)
        write_page(chapters_dir / f"{chapter.slug}.md", content)
