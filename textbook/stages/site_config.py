"""
Stage 10: Site Configuration.

Writes mkdocs.yml (Material theme, mermaid-capable superfences, full
navigation tree) and the docs/index.md home page. No model call.
"""
from __future__ import annotations

from typing import Any

import yaml
from loguru import logger

from textbook.core.context import StageContext
from textbook.core.models import CourseDescription, DeployTarget

from .base import write_page
from .simulations import sim_slug


class PythonName(str):
    """Scalar emitted as a ``!!python/name:`` tag (resolved by MkDocs, not by us)."""


class MkDocsDumper(yaml.SafeDumper):
    pass


def _represent_python_name(dumper: yaml.SafeDumper, value: PythonName) -> yaml.Node:
    return dumper.represent_scalar(f"tag:yaml.org,2002:python/name:{value}", "")


MkDocsDumper.add_representer(PythonName, _represent_python_name)


def build_nav(ctx: StageContext) -> list[dict[str, Any]]:
    """Navigation tree covering every page the pipeline writes."""
    config = ctx.config
    chapters = ctx.chapters

    if chapters:
        chapter_pages = [{f"{ch.number}. {ch.title}": f"chapters/{ch.slug}.md"} for ch in chapters]
        quiz_numbers = [ch.number for ch in chapters]
    else:
        quiz_numbers = list(range(1, config.chapters + 1))
        chapter_pages = []

    nav: list[dict[str, Any]] = [
        {"Home": "index.md"},
        {"Course Description": "course-description.md"},
        {"Chapters": [{"Overview": "chapters/index.md"}, *chapter_pages]},
    ]

    if config.simulations > 0:
        sim_pages = [
            {f"Simulation {i}": f"sims/{sim_slug(i)}.md"} for i in range(1, config.simulations + 1)
        ]
        nav.append({"Simulations": [{"Overview": "sims/index.md"}, *sim_pages]})

    nav.extend([
        {"Learning Graph": [
            {"Concept Map": "learning-graph/concept-map.md"},
            {"Dependency Graph": "learning-graph/dependency-graph.md"},
            {"Book Metrics": "learning-graph/book-metrics.md"},
        ]},
        {"Quizzes": [{f"Chapter {n} Quiz": f"quizzes/quiz-{n:02d}.md"} for n in quiz_numbers]},
        {"Glossary": "glossary.md"},
        {"FAQ": "faq.md"},
        {"References": "references.md"},
    ])
    return nav


def build_mkdocs_config(ctx: StageContext) -> dict[str, Any]:
    config = ctx.config
    description = ctx.course_description

    site: dict[str, Any] = {
        "site_name": ctx.title,
        "site_description": (description.subtitle if description and description.subtitle else config.topic),
    }

    if config.deploy == DeployTarget.GITHUB_PAGES and config.repo_name:
        site_url = ctx.settings.pages_url(config.repo_name)
        if site_url:
            site["site_url"] = site_url
            site["repo_url"] = f"https://github.com/{ctx.settings.github_owner}/{config.repo_name}"
        else:
            logger.warning("GitHub Pages deploy requested but no github_owner is configured")

    site.update({
        "theme": {
            "name": "material",
            "features": [
                "navigation.tabs",
                "navigation.sections",
                "navigation.top",
                "search.highlight",
                "content.code.copy",
            ],
            "palette": [
                {
                    "scheme": "default",
                    "primary": "indigo",
                    "accent": "indigo",
                    "toggle": {"icon": "material/brightness-7", "name": "Switch to dark mode"},
                },
                {
                    "scheme": "slate",
                    "primary": "indigo",
                    "accent": "indigo",
                    "toggle": {"icon": "material/brightness-4", "name": "Switch to light mode"},
                },
            ],
        },
        "markdown_extensions": [
            "admonition",
            "attr_list",
            "def_list",
            "md_in_html",
            "tables",
            {"toc": {"permalink": True}},
            "pymdownx.details",
            {"pymdownx.superfences": {
                "custom_fences": [{
                    "name": "mermaid",
                    "class": "mermaid",
                    "format": PythonName("pymdownx.superfences.fence_code_format"),
                }],
            }},
        ],
        "plugins": ["search"],
        "nav": build_nav(ctx),
    })
    return site


def render_mkdocs_yaml(site: dict[str, Any]) -> str:
    return yaml.dump(site, Dumper=MkDocsDumper, sort_keys=False, allow_unicode=True, width=120)


def build_home_page(title: str, topic: str, description: CourseDescription | None) -> str:
    if description is None:
        return f"# {title}\n\nAn intelligent textbook on {topic}.\n"

    lines = [f"# {title}", ""]
    if description.subtitle:
        lines += [f"*{description.subtitle}*", ""]
    if description.target_audience:
        lines += ["## Who This Book Is For", "", description.target_audience, ""]
    if description.prerequisites:
        lines += ["## Prerequisites", "", description.prerequisites, ""]
    if description.topics:
        lines += ["## Chapters", ""]
        lines += [f"{i}. {t}" for i, t in enumerate(description.topics, start=1)]
        lines.append("")
    if description.learning_outcomes:
        lines += ["## Learning Outcomes", ""]
        lines += [f"- {outcome}" for outcome in description.learning_outcomes]
        lines.append("")
    lines += [
        "## How to Use This Book",
        "",
        "Start with the [Course Description](course-description.md), work through the "
        "[Chapters](chapters/index.md) in order, and use the [Quizzes](quizzes/quiz-01.md), "
        "[Glossary](glossary.md) and [FAQ](faq.md) to check your understanding.",
        "",
    ]
    return "\n".join(lines)


async def run(ctx: StageContext) -> None:
    write_page(ctx.output_dir / "mkdocs.yml", render_mkdocs_yaml(build_mkdocs_config(ctx)))
    write_page(
        ctx.docs_dir / "index.md",
        build_home_page(ctx.title, ctx.config.topic, ctx.course_description),
    )
