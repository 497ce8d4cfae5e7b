"""
Stage 2: Learning Graph.

Generates the concept table, publishes the extracted Concept list, and
writes docs/learning-graph/concept-map.md and dependency-graph.md.
"""
from __future__ import annotations

import math

from loguru import logger

from textbook.core.context import SLOT_CONCEPTS, StageContext
from textbook.core.models import BloomLevel, Concept, Taxonomy
from textbook.extraction.concept_table import parse_concept_table, validate_concepts
from textbook.generation.prompts import LEARNING_GRAPH_SYSTEM

from .base import log_diagnostics, write_page

MERMAID_SAMPLE_SIZE = 10


def build_prompt(title: str, topic: str, concept_count: int, chapters: int, topics: list[str]) -> str:
    if topics:
        chapter_context = "\n".join(f"  Chapter {i}: {t}" for i, t in enumerate(topics, start=1))
    else:
        chapter_context = f"  {chapters} chapters covering {topic}"

    first_third = math.ceil(chapters / 3)
    second_third = math.ceil(chapters * 2 / 3)

    return f"""Generate a learning graph of exactly {concept_count} concepts for the intelligent textbook: "{title}"

Topic domain: {topic}

Chapters:
{chapter_context}

Output a markdown table with exactly {concept_count} rows and these columns:
| ID | Concept | Chapter | Dependencies | Taxonomy | Bloom's Level |

Column rules:
- ID: sequential integer starting at 1
- Concept: precise name of the concept (2-6 words, noun phrase)
- Chapter: integer 1-{chapters} indicating where this concept is taught
- Dependencies: comma-separated IDs of prerequisite concepts (empty cell if none). Only reference lower-numbered IDs.
- Taxonomy: exactly one of: Foundation | Core | Advanced
  - Foundation = vocabulary, definitions, basic facts (Chapters 1-{first_third})
  - Core = processes, relationships, applications (Chapters {first_third + 1}-{second_third})
  - Advanced = synthesis, evaluation, design (Chapters {second_third + 1}-{chapters})
- Bloom's Level: exactly one of: Remember | Understand | Apply | Analyze | Evaluate | Create

Requirements:
- Distribute concepts proportionally across all {chapters} chapters
- Foundation concepts: ~40% of total, Bloom's: Remember/Understand
- Core concepts: ~40% of total, Bloom's: Apply/Analyze
- Advanced concepts: ~20% of total, Bloom's: Evaluate/Create
- Concept N can only depend on concepts with IDs < N
- Each chapter should have at least 3 concepts
- Output ONLY the markdown table, with no preamble, explanation, or trailing text"""


def build_concept_map(title: str, raw: str, concepts: list[Concept]) -> str:
    table = "\n".join(line for line in raw.splitlines() if "|" in line)

    return f"""# Concept Map: {title}

This concept map lists all {len(concepts)} concepts in the learning graph, ordered by ID (sequence of introduction).
Each concept is tagged with its chapter, dependencies, taxonomy level, and Bloom's cognitive level.

## Full Concept Table

{table}

## How to Read This Table

| Column | Description |
|--------|-------------|
| **ID** | Unique identifier; also indicates the order concepts are introduced |
| **Concept** | Precise name of the concept |
| **Chapter** | Chapter where this concept is first taught |
| **Dependencies** | IDs of concepts that must be understood first |
| **Taxonomy** | Foundation = vocabulary and facts; Core = processes and applications; Advanced = synthesis and evaluation |
| **Bloom's Level** | Cognitive level required: Remember, Understand, Apply, Analyze, Evaluate, Create |
"""


def build_dependency_graph(title: str, concepts: list[Concept], chapters: int) -> str:
    total = len(concepts)

    taxonomy_rows = "\n".join(
        f"| {level.value} | {sum(1 for c in concepts if c.taxonomy == level)} |"
        for level in Taxonomy
    )
    bloom_rows = "\n".join(
        f"| {level.value} | {sum(1 for c in concepts if c.bloom_level == level.value)} |"
        for level in BloomLevel
    )

    chapter_rows = []
    for number in range(1, chapters + 1):
        in_chapter = [c for c in concepts if c.chapter == number]
        with_deps = sum(1 for c in in_chapter if c.dependencies)
        chapter_rows.append(f"| Chapter {number} | {len(in_chapter)} | {with_deps} |")

    sample = concepts[:MERMAID_SAMPLE_SIZE]
    sample_ids = {c.id for c in sample}
    nodes = "\n".join(f'  {c.id}["{c.id}. {c.name}"]' for c in sample)
    edges = "\n".join(
        f"  {dep} --> {c.id}" for c in sample for dep in c.dependencies if dep in sample_ids
    )

    with_any = sum(1 for c in concepts if c.dependencies)
    average = sum(len(c.dependencies) for c in concepts) / max(total, 1)

    return f"""# Dependency Graph: {title}

The dependency graph maps prerequisite relationships between all {total} concepts.
An arrow from concept A to concept B means: **A must be understood before B**.

## Graph Summary

| Taxonomy | Count |
|----------|-------|
{taxonomy_rows}
| **Total** | **{total}** |

## Distribution by Bloom's Level

| Level | Count |
|-------|-------|
{bloom_rows}

## Concepts per Chapter

| Chapter | Total Concepts | With Dependencies |
|---------|---------------|-------------------|
{chr(10).join(chapter_rows)}

## Sample Dependency Diagram

The following diagram shows the dependency relationships among the first {len(sample)} concepts:

```mermaid
graph TD
{nodes}
{edges}
```

!!! note "Reading the Graph"
    Each box is a concept. Arrows indicate prerequisite relationships.
    Concepts without incoming arrows are entry points that need no prior knowledge of the subject.

## Dependency Statistics

- **Total concepts with at least one dependency:** {with_any}
- **Entry-point concepts (no dependencies):** {total - with_any}
- **Average dependencies per concept:** {average:.1f}

See the [Concept Map](concept-map.md) for the full table, or [Book Metrics](book-metrics.md) for overall statistics.
"""


async def run(ctx: StageContext) -> None:
    config = ctx.config

    raw = await ctx.generator.generate(
        build_prompt(ctx.title, config.topic, config.concepts, config.chapters, ctx.course_topics),
        system=LEARNING_GRAPH_SYSTEM,
        model=config.model,
        max_tokens=ctx.settings.default_max_tokens,
    )

    result = parse_concept_table(raw)
    log_diagnostics("Learning Graph", result)
    for warning in validate_concepts(result.items, config.chapters, config.concepts):
        logger.warning(f"Learning Graph: {warning}")

    concepts = result.items
    ctx.publish(SLOT_CONCEPTS, concepts)
    logger.info(f"Extracted {len(concepts)} concepts")

    graph_dir = ctx.docs_dir / "learning-graph"
    write_page(graph_dir / "concept-map.md", build_concept_map(ctx.title, raw, concepts))
    write_page(
        graph_dir / "dependency-graph.md",
        build_dependency_graph(ctx.title, concepts, config.chapters),
    )
