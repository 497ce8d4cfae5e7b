"""
Stage 6: Glossary.
"""
from __future__ import annotations

import re

from textbook.core.context import StageContext
from textbook.core.models import Concept
from textbook.generation.prompts import GLOSSARY_SYSTEM

from .base import write_page

LETTER_HEADING_PATTERN = re.compile(r"^##\s+[A-Z]", re.MULTILINE)


def build_prompt(title: str, topic: str, concepts: list[Concept]) -> str:
    concept_list = "\n".join(
        f"- {c.name} (Chapter {c.chapter}, {c.taxonomy.value}, {c.bloom_level})" for c in concepts
    )

    return f"""Generate a comprehensive glossary for the intelligent textbook: "{title}"

Domain: {topic}

The following concepts appear in the learning graph. Define each one following ISO 11179 standards for terminology:

{concept_list}

### Output Format:

Organize definitions alphabetically. Group under lettered headings (## A, ## B, etc.).

For each term, use this format:

**[Term Name]** *(Chapter N, Taxonomy)*
: [Definition following ISO 11179 standards: genus-differentia form. One to three sentences. Precise, non-circular, domain-accurate.]

### ISO 11179 Definition Standards:
1. Genus-differentia: "A [term] is a [broader category] that [distinguishing characteristic]"
2. No circular definitions: do not use the term being defined in its own definition
3. Include the essential distinguishing properties, not just examples
4. Use active voice and present tense
5. Avoid vague terms like "related to," "involving," or "concerned with"

### Additional Requirements:
- Define every concept in the list above
- After the concept list, add a section "## Key Formulas and Relationships" with 3-5 important relationships between concepts (where applicable to the domain)
- End with a section "## Further Reading" listing 3-5 key reference works for the domain

Generate the complete glossary now. Start with an introduction paragraph, then alphabetical sections."""


def build_glossary_page(title: str, topic: str, raw: str, concept_count: int) -> str:
    if LETTER_HEADING_PATTERN.search(raw):
        return f"""# Glossary: {title}

This glossary defines {concept_count} key concepts from the domain of {topic},
following ISO 11179 metadata standards for precision and non-circularity.
Definitions are organized alphabetically and cross-referenced to the chapter where each concept is introduced.

---

{raw}
"""

    return f"""# Glossary: {title}

This glossary covers {concept_count} concepts from the domain of {topic}.

{raw}
"""


async def run(ctx: StageContext) -> None:
    config = ctx.config
    concepts = ctx.concepts

    raw = await ctx.generator.generate(
        build_prompt(ctx.title, config.topic, concepts),
        system=GLOSSARY_SYSTEM,
        model=config.model,
        max_tokens=ctx.settings.default_max_tokens,
    )

    write_page(
        ctx.docs_dir / "glossary.md",
        build_glossary_page(ctx.title, config.topic, raw, len(concepts)),
    )
