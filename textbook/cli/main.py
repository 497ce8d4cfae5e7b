"""
Intelligent Textbook CLI.

Generates a complete MkDocs textbook site for a topic.

Usage:
    textbook "Introduction to Graph Theory"
    textbook "Quantum Computing" --chapters 10 --simulations 3
    textbook "Data Engineering" --deploy github-pages --repo data-eng-book
"""

from __future__ import annotations

import asyncio
import re
import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from config import get_settings
from textbook.core.exceptions import ConfigurationError, StageError
from textbook.core.models import DeployTarget, TextbookConfig
from textbook.pipeline import PipelineReport, TextbookPipeline

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="textbook",
    help="Generate an intelligent textbook site from a single topic",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

LOG_FORMAT = "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}"


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)


def slugify(topic: str) -> str:
    """Directory-safe slug: lowercase, alphanumeric runs joined by hyphens."""
    slug = re.sub(r"[^a-z0-9]+", "-", topic.lower()).strip("-")
    return slug or "textbook"


def print_timings(report: PipelineReport) -> None:
    table = Table(title="Stage Timings", show_header=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Stage", style="cyan")
    table.add_column("Seconds", justify="right")

    for index, result in enumerate(report.stages, start=1):
        table.add_row(str(index), result.name, f"{result.duration_seconds:.1f}")
    table.add_row("", "[bold]Total[/]", f"[bold]{report.duration_seconds:.1f}[/]")

    console.print(table)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def generate(
    topic: Annotated[
        str, typer.Argument(help="Subject of the textbook, e.g. 'Introduction to Graph Theory'")
    ],
    chapters: Annotated[
        int | None, typer.Option("--chapters", "-c", min=1, help="Number of chapters [default: 12]")
    ] = None,
    simulations: Annotated[
        int | None,
        typer.Option(
            "--simulations", "--microsims", "-m", min=0,
            help="Number of interactive simulations [default: 5]",
        ),
    ] = None,
    concepts: Annotated[
        int | None, typer.Option("--concepts", "-n", min=1, help="Target concept count [default: 200]")
    ] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Output directory [default: ./<topic-slug>]")
    ] = None,
    model: Annotated[
        str | None, typer.Option("--model", help="Claude model id")
    ] = None,
    deploy: Annotated[
        DeployTarget, typer.Option("--deploy", help="Deployment target")
    ] = DeployTarget.NONE,
    repo: Annotated[
        str | None, typer.Option("--repo", help="GitHub repository name (for GitHub Pages URLs)")
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    """
    Generate a full textbook: course description, learning graph, chapters,
    simulations, glossary, FAQ, quizzes, references, site config and README.
    """
    settings = get_settings()
    if verbose:
        configure_logging("DEBUG")

    if not settings.has_ai_configured():
        console.print("[red]Error: ANTHROPIC_API_KEY environment variable is required[/]")
        console.print("[dim]Set it in your shell or in a .env file.[/dim]")
        raise typer.Exit(1)

    try:
        config = TextbookConfig(
            topic=topic,
            chapters=chapters if chapters is not None else settings.default_chapters,
            simulations=simulations if simulations is not None else settings.default_simulations,
            concepts=concepts if concepts is not None else settings.default_concepts,
            output_dir=(output or Path.cwd() / slugify(topic)).resolve(),
            model=model or settings.default_model,
            deploy=deploy,
            repo_name=repo,
        )
        pipeline = TextbookPipeline(config, console=console, settings=settings)
    except ConfigurationError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)

    try:
        report = asyncio.run(pipeline.run())
    except StageError as e:
        console.print(f"\n[red]Pipeline failed: {escape(str(e))}[/]")
        logger.debug(f"Stage '{e.stage_name}' raised {type(e.cause).__name__}")
        raise typer.Exit(1)

    print_timings(report)


# =============================================================================
# Entry Point
# =============================================================================


def run() -> None:
    """CLI entry point."""
    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[red]Invalid settings: {escape(str(e))}[/]")
        raise SystemExit(1)

    configure_logging(settings.log_level)
    app()


if __name__ == "__main__":
    run()
