"""
Textbook Pipeline Orchestrator.

Runs the twelve generation stages strictly in order against one shared
PipelineContext. The first stage to raise aborts the run; nothing is retried
or rolled back, and files already written stay on disk.

Example:
    pipeline = TextbookPipeline(config)
    report = await pipeline.run()
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum

from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from config import Settings, get_settings
from textbook.core.context import (
    SLOT_CHAPTERS,
    SLOT_CONCEPTS,
    SLOT_COURSE_DESCRIPTION,
    PipelineContext,
    StageContext,
)
from textbook.core.exceptions import StageError
from textbook.core.models import DeployTarget, TextbookConfig
from textbook.generation.client import AnthropicGenerationService, GenerationService
from textbook.stages import (
    chapter_content,
    chapter_structure,
    course_description,
    faq,
    glossary,
    learning_graph,
    metrics,
    quizzes,
    readme,
    references,
    simulations,
    site_config,
)
from textbook.stages.base import StageFn


# =============================================================================
# Stage Registry
# =============================================================================


@dataclass(frozen=True)
class Stage:
    """A named step of the pipeline and the context slot it may publish."""

    name: str
    run: StageFn
    produces: str | None = None


DEFAULT_STAGES: tuple[Stage, ...] = (
    Stage("Course Description", course_description.run, SLOT_COURSE_DESCRIPTION),
    Stage("Learning Graph", learning_graph.run, SLOT_CONCEPTS),
    Stage("Chapter Structure", chapter_structure.run, SLOT_CHAPTERS),
    Stage("Chapter Content", chapter_content.run),
    Stage("Simulations", simulations.run),
    Stage("Glossary", glossary.run),
    Stage("FAQ", faq.run),
    Stage("Quizzes", quizzes.run),
    Stage("References", references.run),
    Stage("Site Configuration", site_config.run),
    Stage("Metrics", metrics.run),
    Stage("README", readme.run),
)


# =============================================================================
# Result Types
# =============================================================================


class PipelineStatus(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class StageResult:
    """Outcome of a single stage."""

    name: str
    status: PipelineStatus
    duration_seconds: float = 0.0
    error: str | None = None


@dataclass
class PipelineReport:
    """Outcome of a pipeline run, including the context the stages built."""

    status: PipelineStatus = PipelineStatus.NOT_STARTED
    stages: list[StageResult] = field(default_factory=list)
    duration_seconds: float = 0.0
    context: PipelineContext | None = None

    @property
    def failed_stage(self) -> str | None:
        for result in self.stages:
            if result.status == PipelineStatus.FAILED:
                return result.name
        return None

    @property
    def succeeded(self) -> list[str]:
        return [r.name for r in self.stages if r.status == PipelineStatus.COMPLETED]

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "status": self.status.value,
            "duration_seconds": round(self.duration_seconds, 3),
            "failed_stage": self.failed_stage,
            "stages": [
                {
                    "name": r.name,
                    "status": r.status.value,
                    "duration_seconds": round(r.duration_seconds, 3),
                    "error": r.error,
                }
                for r in self.stages
            ],
        }


# =============================================================================
# Pipeline Orchestrator
# =============================================================================


class TextbookPipeline:
    """
    Sequential orchestrator for textbook generation.

    Each stage receives a StageContext that can read every slot but publish
    only the slot the stage is registered as producing.
    """

    def __init__(
        self,
        config: TextbookConfig,
        generator: GenerationService | None = None,
        stages: tuple[Stage, ...] | list[Stage] = DEFAULT_STAGES,
        console: Console | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Validated run configuration
            generator: Text generation backend (Anthropic from settings if not provided)
            stages: Stages to run, in order
            console: Rich console for progress output
            settings: Application settings (uses get_settings() if not provided)
        """
        self.config = config
        self.settings = settings or get_settings()
        self.generator = generator or AnthropicGenerationService(
            model_name=config.model,
            concurrency=self.settings.generation_concurrency,
        )
        self.stages = tuple(stages)
        self.console = console or Console()

    def _print_header(self) -> None:
        config = self.config
        self.console.print(Panel(
            f"[bold cyan]INTELLIGENT TEXTBOOK[/]\n"
            f"Topic: {config.topic}\n"
            f"Chapters: {config.chapters} | Concepts: {config.concepts} | Simulations: {config.simulations}\n"
            f"Model: {config.model}\n"
            f"Output: {config.output_dir}",
            title="[bold]Generate[/]",
            border_style="cyan",
        ))

    def _print_footer(self, report: PipelineReport) -> None:
        self.console.print(f"\n  [bold green]Done in {report.duration_seconds:.1f}s[/bold green]\n")
        self.console.print(f"  [dim]Output:[/dim] {self.config.output_dir}")
        if self.config.deploy == DeployTarget.GITHUB_PAGES:
            self.console.print(
                f"  [dim]Deploy: Run 'cd {self.config.output_dir} && mkdocs gh-deploy' to publish[/dim]"
            )
        self.console.print()

    async def run(self) -> PipelineReport:
        """
        Run every stage in order.

        Returns:
            PipelineReport with status COMPLETED

        Raises:
            StageError: The first stage failure, chained from the original
                exception, with the partial report attached as ``.report``
        """
        context = PipelineContext(self.config)
        report = PipelineReport(status=PipelineStatus.RUNNING, context=context)
        total = len(self.stages)

        self._print_header()
        logger.info(f"Starting pipeline for '{self.config.topic}' ({total} stages)")
        started = time.perf_counter()

        for index, stage in enumerate(self.stages, start=1):
            label = f"[{index}/{total}] {stage.name}"
            stage_ctx = StageContext(context, self.generator, self.settings, owned_slot=stage.produces)
            stage_started = time.perf_counter()
            logger.info(f"Stage {label} started")

            try:
                with Progress(
                    SpinnerColumn(),
                    TextColumn("[cyan]{task.description}"),
                    console=self.console,
                    transient=True,
                ) as progress:
                    progress.add_task(label, total=None)
                    await stage.run(stage_ctx)
            except Exception as e:
                elapsed = time.perf_counter() - stage_started
                report.stages.append(
                    StageResult(stage.name, PipelineStatus.FAILED, elapsed, str(e))
                )
                report.status = PipelineStatus.FAILED
                report.duration_seconds = time.perf_counter() - started
                self.console.print(f"  [red]✗ {label}: {escape(str(e))}[/red]")
                logger.error(f"Stage {label} failed after {elapsed:.1f}s: {e}")

                error = StageError(stage.name, e)
                error.report = report
                raise error from e

            elapsed = time.perf_counter() - stage_started
            report.stages.append(StageResult(stage.name, PipelineStatus.COMPLETED, elapsed))
            self.console.print(f"  [green]✓ {label}[/green] [dim]({elapsed:.1f}s)[/dim]")
            logger.info(f"Stage {label} completed in {elapsed:.1f}s")

        report.status = PipelineStatus.COMPLETED
        report.duration_seconds = time.perf_counter() - started
        self._print_footer(report)
        logger.info(f"Pipeline completed in {report.duration_seconds:.1f}s")
        return report
