"""
Stage 5: Simulations.

Picks one concept per simulation, fans out HTML generation, and writes
docs/sims/sim-NN.html with a sim-NN.md iframe wrapper and an index page.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from loguru import logger

from textbook.core.context import StageContext
from textbook.core.models import HIGHER_ORDER_LEVELS, Concept
from textbook.generation.client import PromptRequest
from textbook.generation.prompts import SIMULATION_SYSTEM

from .base import write_page

CHART_TYPES = ("bar", "line", "scatter", "radar", "doughnut", "bubble")

FENCED_HTML_PATTERN = re.compile(r"```(?:html)?\s*\n(.*?)```", re.IGNORECASE | re.DOTALL)


@dataclass(frozen=True)
class SimulationTopic:
    """What a single simulation illustrates."""

    name: str
    description: str
    concept_name: str
    chapter: int
    chart_type: str


def sim_slug(index: int) -> str:
    """File stem for the 1-based simulation index."""
    return f"sim-{index:02d}"


def select_simulation_topics(count: int, concepts: list[Concept], topic: str) -> list[SimulationTopic]:
    """
    Choose ``count`` concepts to illustrate.

    Higher-order Bloom levels are preferred, one per chapter; the rest is
    filled from all concepts in order, then from generic topic names.
    """
    prioritized = [c for c in concepts if c.bloom_level in HIGHER_ORDER_LEVELS][: count * 2]

    selected: list[tuple[str, int]] = []
    selected_ids: set[int] = set()
    used_chapters: set[int] = set()
    for concept in prioritized:
        if len(selected) >= count:
            break
        if concept.chapter not in used_chapters:
            selected.append((concept.name, concept.chapter))
            selected_ids.add(concept.id)
            used_chapters.add(concept.chapter)

    for concept in concepts:
        if len(selected) >= count:
            break
        if concept.id not in selected_ids:
            selected.append((concept.name, concept.chapter))
            selected_ids.add(concept.id)

    while len(selected) < count:
        selected.append((f"{topic} Concept {len(selected) + 1}", 1))

    return [
        SimulationTopic(
            name=f"{name} Explorer",
            description=f"An interactive simulation for exploring {name} in the context of {topic}.",
            concept_name=name,
            chapter=chapter,
            chart_type=CHART_TYPES[i % len(CHART_TYPES)],
        )
        for i, (name, chapter) in enumerate(selected[:count])
    ]


def extract_html(raw: str) -> str:
    """Pull a standalone HTML document out of model output."""
    fenced = FENCED_HTML_PATTERN.search(raw)
    if fenced:
        return fenced.group(1).strip()

    stripped = raw.lstrip()
    if stripped.startswith("<!DOCTYPE") or stripped.startswith("<html"):
        return raw.strip()

    start = raw.find("<!DOCTYPE")
    end = raw.rfind("</html>")
    if start != -1 and end != -1:
        return raw[start:end + len("</html>")]

    return raw.strip()


def build_prompt(sim: SimulationTopic, title: str, topic: str) -> str:
    return f"""Create a complete, self-contained interactive HTML simulation for the intelligent textbook "{title}".

## Simulation: {sim.name}

**Concept Being Illustrated:** {sim.concept_name}
**Domain:** {topic}
**Primary Chart Type:** {sim.chart_type} (use Chart.js)

---

Write a complete, standalone HTML file that:

### Technical Requirements:
1. Uses Chart.js loaded from CDN: `https://cdn.jsdelivr.net/npm/chart.js`
2. All CSS and JavaScript are inline (no external files)
3. Works in a modern browser with no build step
4. Responsive layout that works in an iframe at 800x600px

### Educational Requirements:
1. Illustrates the concept "{sim.concept_name}" through interactive exploration
2. Has 2-4 slider inputs or number inputs that change parameters
3. Chart updates in real time as the user adjusts inputs (use an `input` event listener, not `change`)
4. Each input has a clear label showing its current value (update label dynamically)
5. A brief explanation panel (2-3 sentences) explaining what the simulation demonstrates

### Design Requirements:
1. Clean, professional look with a white or light gray (#f8f9fa) background
2. Clear section headers in a readable font (font-family: system-ui, sans-serif)
3. Input controls grouped together in a panel, chart displayed prominently
4. Meaningful axis labels and chart title
5. An educational color scheme appropriate for a professional textbook

### JavaScript Standards:
- Declare the Chart instance outside the update function
- Destroy and recreate the chart on updates, OR use `chart.data` mutation + `chart.update()`
- Add a `DOMContentLoaded` listener to initialize
- Comment key functions

### HTML Structure:
```
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{sim.name}</title>
  <script src="https://cdn.jsdelivr.net/npm/chart.js"></script>
  <style>/* inline CSS */</style>
</head>
<body>
  <!-- Title and description -->
  <!-- Input controls panel -->
  <!-- Chart canvas -->
  <!-- Explanation panel -->
  <script>/* inline JS */</script>
</body>
</html>
```

Output ONLY the complete HTML file with no markdown fences, explanation, or preamble.
Start with `<!DOCTYPE html>` and end with `</html>`."""


def build_wrapper(sim: SimulationTopic, slug: str) -> str:
    html_file = f"{slug}.html"
    return f"""# {sim.name}

{sim.description}

<div style="width:100%;max-width:900px;margin:0 auto;">
  <iframe
    src="{html_file}"
    width="100%"
    height="640"
    frameborder="0"
    scrolling="no"
    style="border:1px solid #e0e0e0;border-radius:4px;display:block;"
    title="{sim.name}">
  </iframe>
</div>

!!! tip "How to Use This Simulation"
    Adjust the sliders and input controls to change parameters.
    The chart updates in real time so you can observe how the concept responds to different values.

[Open in full screen]({html_file}){{ .md-button .md-button--primary }}
"""


def build_index(title: str, sims: list[SimulationTopic]) -> str:
    rows = "\n".join(
        f"| [Simulation {i}: {s.name}]({sim_slug(i)}.md) | Chapter {s.chapter} | {s.description} |"
        for i, s in enumerate(sims, start=1)
    )
    links = "\n".join(
        f"- [Simulation {i}: {s.name}]({sim_slug(i)}.md) (Chapter {s.chapter})"
        for i, s in enumerate(sims, start=1)
    )

    return f"""# Interactive Simulations: {title}

Simulations are self-contained interactive pages that let you explore key concepts hands-on.
Each one responds to your inputs in real time, making abstract ideas concrete and explorable.

## Available Simulations ({len(sims)} total)

| Simulation | Chapter | Description |
|------------|---------|-------------|
{rows}

## How the Simulations Work

Each simulation is built with Chart.js loaded from a CDN and needs no installation.
Parameter controls update the visualization immediately, and an embedded panel connects the visual to the underlying concept.

## All Simulations

{links}
"""


async def run(ctx: StageContext) -> None:
    config = ctx.config
    sims = select_simulation_topics(config.simulations, ctx.concepts, config.topic)
    if not sims:
        logger.info("No simulations requested")

    results = await ctx.generator.generate_parallel(
        [PromptRequest(build_prompt(sim, ctx.title, config.topic), SIMULATION_SYSTEM) for sim in sims],
        model=config.model,
        max_tokens=ctx.settings.default_max_tokens,
    )

    sims_dir = ctx.docs_dir / "sims"
    for index, (sim, raw) in enumerate(zip(sims, results), start=1):
        slug = sim_slug(index)
        write_page(sims_dir / f"{slug}.html", extract_html(raw))
        write_page(sims_dir / f"{slug}.md", build_wrapper(sim, slug))

    write_page(sims_dir / "index.md", build_index(ctx.title, sims))
