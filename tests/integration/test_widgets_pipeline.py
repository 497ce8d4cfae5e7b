"""
Integration tests: real stages against a stubbed generation service.

Every stage runs for real and writes into a temporary output directory;
only the model is replaced with canned Widgets output.
Run: pytest tests/integration/test_widgets_pipeline.py -v
"""
import io

import pytest
from rich.console import Console

from textbook.core.context import SLOT_CHAPTERS, SLOT_CONCEPTS
from textbook.core.exceptions import ContextSlotError, GenerationError, StageError
from textbook.generation import prompts
from textbook.pipeline import DEFAULT_STAGES, PipelineStatus, Stage, TextbookPipeline
from textbook.stages import chapter_content, chapter_structure, learning_graph


def quiet_console():
    return Console(file=io.StringIO(), force_terminal=False, width=400)


class TestWidgetsScenario:
    """Learning graph and chapter structure on the Widgets configuration."""

    @pytest.mark.asyncio
    async def test_two_stage_run(self, widgets_config, stub_generator, settings):
        stages = [
            Stage("Learning Graph", learning_graph.run, SLOT_CONCEPTS),
            Stage("Chapter Structure", chapter_structure.run, SLOT_CHAPTERS),
        ]
        pipeline = TextbookPipeline(widgets_config, stub_generator, stages, quiet_console(), settings)

        report = await pipeline.run()
        context = report.context

        assert len(context.concepts) == 4
        assert len(context.chapters) == 2
        assert report.succeeded == ["Learning Graph", "Chapter Structure"]
        assert report.status == PipelineStatus.COMPLETED

        assert [c.dependencies for c in context.concepts] == [[], [1], [1, 2], [3]]
        assert [ch.concepts for ch in context.chapters] == [[1, 2], [3, 4]]
        assert context.chapters[1].summary == "Shows how widgets are assembled on a production line."

    @pytest.mark.asyncio
    async def test_chapter_structure_prompt_lists_concepts(self, widgets_config, stub_generator, settings):
        stages = [
            Stage("Learning Graph", learning_graph.run, SLOT_CONCEPTS),
            Stage("Chapter Structure", chapter_structure.run, SLOT_CHAPTERS),
        ]
        await TextbookPipeline(widgets_config, stub_generator, stages, quiet_console(), settings).run()

        structure_prompt = stub_generator.calls[1]["prompt"]
        assert "Key concepts: 1. Widget, 2. Sprocket" in structure_prompt
        assert "Chapter 2: Chapter 2" in structure_prompt

    @pytest.mark.asyncio
    async def test_content_without_chapters_fails(self, widgets_config, stub_generator, settings):
        stages = [Stage("Chapter Content", chapter_content.run)]
        pipeline = TextbookPipeline(widgets_config, stub_generator, stages, quiet_console(), settings)

        with pytest.raises(StageError) as exc_info:
            await pipeline.run()

        assert isinstance(exc_info.value.cause, ContextSlotError)
        assert stub_generator.calls == []


class TestFullPipeline:
    """All twelve stages produce the complete site."""

    @pytest.mark.asyncio
    async def test_writes_every_artifact(self, widgets_config, stub_generator, settings):
        report = await TextbookPipeline(
            widgets_config, stub_generator, DEFAULT_STAGES, quiet_console(), settings
        ).run()

        assert report.status == PipelineStatus.COMPLETED
        assert len(report.succeeded) == 12

        out = widgets_config.output_dir
        docs = out / "docs"
        expected = [
            docs / "course-description.md",
            docs / "learning-graph" / "concept-map.md",
            docs / "learning-graph" / "dependency-graph.md",
            docs / "learning-graph" / "book-metrics.md",
            docs / "chapters" / "index.md",
            docs / "chapters" / "chapter-01.md",
            docs / "chapters" / "chapter-02.md",
            docs / "sims" / "index.md",
            docs / "sims" / "sim-01.md",
            docs / "sims" / "sim-01.html",
            docs / "sims" / "sim-02.html",
            docs / "glossary.md",
            docs / "faq.md",
            docs / "quizzes" / "quiz-01.md",
            docs / "quizzes" / "quiz-02.md",
            docs / "references.md",
            docs / "index.md",
            out / "mkdocs.yml",
            out / "README.md",
        ]
        missing = [str(p) for p in expected if not p.is_file()]
        assert missing == []

    @pytest.mark.asyncio
    async def test_artifact_contents(self, widgets_config, stub_generator, settings):
        await TextbookPipeline(widgets_config, stub_generator, DEFAULT_STAGES, quiet_console(), settings).run()
        docs = widgets_config.output_dir / "docs"

        sim_html = (docs / "sims" / "sim-01.html").read_text(encoding="utf-8")
        assert sim_html.startswith("<!DOCTYPE html>")
        assert "```" not in sim_html

        glossary = (docs / "glossary.md").read_text(encoding="utf-8")
        assert glossary.startswith("# Glossary: Widget Engineering Fundamentals")
        assert "ISO 11179" in glossary

        book_metrics = (docs / "learning-graph" / "book-metrics.md").read_text(encoding="utf-8")
        assert "| Chapters | 2 |" in book_metrics
        assert "| Concepts Mapped | 4 |" in book_metrics
        assert "| Simulations | 2 |" in book_metrics
        assert "| Quiz Questions | 16 |" in book_metrics
        assert "| FAQ Questions | 2 |" in book_metrics

        home = (docs / "index.md").read_text(encoding="utf-8")
        assert home.startswith("# Widget Engineering Fundamentals")

        raw_site = (widgets_config.output_dir / "mkdocs.yml").read_text(encoding="utf-8")
        assert "!!python/name:pymdownx.superfences.fence_code_format" in raw_site
        assert "site_name: Widget Engineering Fundamentals" in raw_site
        assert "chapters/chapter-02.md" in raw_site

    @pytest.mark.asyncio
    async def test_readme_prompt_includes_metrics(self, widgets_config, stub_generator, settings):
        await TextbookPipeline(widgets_config, stub_generator, DEFAULT_STAGES, quiet_console(), settings).run()

        readme_call = next(c for c in stub_generator.calls if c["system"] == prompts.README_SYSTEM)
        assert "| Quiz Questions | 16 |" in readme_call["prompt"]
        assert "| 2 | Widget Assembly |" in readme_call["prompt"]
        assert readme_call["max_tokens"] == settings.readme_max_tokens

    @pytest.mark.asyncio
    async def test_fan_out_stages_use_configured_models_and_limits(self, widgets_config, stub_generator, settings):
        await TextbookPipeline(widgets_config, stub_generator, DEFAULT_STAGES, quiet_console(), settings).run()

        content_calls = [c for c in stub_generator.calls if c["system"] == prompts.CHAPTER_CONTENT_SYSTEM]
        quiz_calls = [c for c in stub_generator.calls if c["system"] == prompts.QUIZ_SYSTEM]

        assert len(content_calls) == 2
        assert len(quiz_calls) == 2
        assert {c["model"] for c in stub_generator.calls} == {"test-model"}
        assert {c["max_tokens"] for c in content_calls} == {settings.content_max_tokens}



class TestDegradedOutput:
    """Bad model output degrades; a failed call aborts the run."""

    @pytest.mark.asyncio
    async def test_empty_chapter_gets_placeholder(
        self, widgets_config, stub_factory, canned_responder, settings
    ):
        def responder(prompt, system):
            if system == prompts.CHAPTER_CONTENT_SYSTEM:
                return ""
            return canned_responder(prompt, system)

        generator = stub_factory(responder)
        await TextbookPipeline(widgets_config, generator, DEFAULT_STAGES, quiet_console(), settings).run()

        chapter = (widgets_config.output_dir / "docs" / "chapters" / "chapter-01.md").read_text(encoding="utf-8")
        assert chapter == "# Chapter 1: Widget Basics\n\nContent generation failed.\n"

    @pytest.mark.asyncio
    async def test_unparseable_outline_synthesizes_chapters(
        self, widgets_config, stub_factory, canned_responder, settings
    ):
        def responder(prompt, system):
            if system == prompts.CHAPTER_STRUCTURE_SYSTEM:
                return "I'm sorry, I can't produce outlines right now."
            return canned_responder(prompt, system)

        report = await TextbookPipeline(
            widgets_config, stub_factory(responder), DEFAULT_STAGES[:3], quiet_console(), settings
        ).run()

        chapters = report.context.chapters
        assert [ch.title for ch in chapters] == ["Widget Basics", "Widget Assembly"]
        assert [ch.concepts for ch in chapters] == [[1, 2], [3, 4]]

    @pytest.mark.asyncio
    async def test_generation_failure_aborts_run(
        self, widgets_config, stub_factory, canned_responder, settings
    ):
        def responder(prompt, system):
            if system == prompts.SIMULATION_SYSTEM:
                raise GenerationError("rate limited")
            return canned_responder(prompt, system)

        generator = stub_factory(responder)
        with pytest.raises(StageError) as exc_info:
            await TextbookPipeline(widgets_config, generator, DEFAULT_STAGES, quiet_console(), settings).run()

        error = exc_info.value
        assert error.stage_name == "Simulations"
        assert isinstance(error.cause, GenerationError)
        assert error.report.succeeded == [
            "Course Description", "Learning Graph", "Chapter Structure", "Chapter Content",
        ]
        assert prompts.GLOSSARY_SYSTEM not in generator.systems()
        assert not (widgets_config.output_dir / "docs" / "glossary.md").exists()
