"""
Unit tests for the run configuration, records and the write-once context.

Run: pytest tests/unit/test_context_and_models.py -v
"""
from pathlib import Path

import pytest

from textbook.core.context import (
    SLOT_CHAPTERS,
    SLOT_CONCEPTS,
    SLOT_COURSE_DESCRIPTION,
    PipelineContext,
    StageContext,
)
from textbook.core.exceptions import ConfigurationError, ContextSlotError
from textbook.core.models import (
    ChapterOutline,
    Concept,
    CourseDescription,
    DeployTarget,
    TextbookConfig,
)


def make_config(**overrides) -> TextbookConfig:
    values = dict(
        topic="Widgets",
        chapters=2,
        simulations=1,
        concepts=4,
        output_dir="out",
        model="test-model",
    )
    values.update(overrides)
    return TextbookConfig(**values)


class TestTextbookConfig:
    def test_coerces_output_dir_and_deploy(self):
        config = make_config(deploy="github-pages")

        assert config.output_dir == Path("out")
        assert config.deploy is DeployTarget.GITHUB_PAGES

    @pytest.mark.parametrize(
        "overrides",
        [
            {"topic": "  "},
            {"chapters": 0},
            {"simulations": -1},
            {"concepts": 0},
            {"model": ""},
        ],
    )
    def test_invalid_values_rejected(self, overrides):
        with pytest.raises(ConfigurationError):
            make_config(**overrides)

    def test_zero_simulations_allowed(self):
        assert make_config(simulations=0).simulations == 0

    def test_unknown_deploy_target_rejected(self):
        with pytest.raises(ConfigurationError, match="netlify"):
            make_config(deploy="netlify")

    def test_frozen(self):
        config = make_config()
        with pytest.raises(AttributeError):
            config.chapters = 5


class TestRecords:
    def test_concept_label(self):
        assert Concept(12, "Packet Switching", 3).label == "12. Packet Switching"

    def test_chapter_slug_is_zero_padded(self):
        assert ChapterOutline(3, "Routing").slug == "chapter-03"
        assert ChapterOutline(12, "Wrap-up").slug == "chapter-12"


class TestPipelineContext:
    """Slots are write-once."""

    def test_starts_empty(self):
        context = PipelineContext(make_config())

        assert context.course_description is None
        assert context.concepts == []
        assert context.chapters == []
        assert not context.is_populated(SLOT_CONCEPTS)

    def test_docs_dir_under_output(self):
        context = PipelineContext(make_config(output_dir="site"))
        assert context.docs_dir == Path("site") / "docs"

    def test_set_then_read(self):
        context = PipelineContext(make_config())
        context.set(SLOT_CONCEPTS, [Concept(1, "A", 1)])

        assert context.is_populated(SLOT_CONCEPTS)
        assert [c.id for c in context.concepts] == [1]

    def test_second_write_rejected(self):
        context = PipelineContext(make_config())
        context.set(SLOT_CHAPTERS, [ChapterOutline(1, "One")])

        with pytest.raises(ContextSlotError):
            context.set(SLOT_CHAPTERS, [])

    def test_stored_list_cannot_be_mutated_through_reader(self):
        context = PipelineContext(make_config())
        context.set(SLOT_CONCEPTS, [Concept(1, "A", 1)])

        context.concepts.append(Concept(2, "B", 1))
        assert len(context.concepts) == 1

    def test_unknown_slot_rejected(self):
        context = PipelineContext(make_config())
        with pytest.raises(ContextSlotError):
            context.set("glossary", "text")
        with pytest.raises(ContextSlotError):
            context.get("glossary")


class TestStageContext:
    """A stage may publish only the slot it owns."""

    def make(self, owned_slot=None, settings=None, generator=None):
        context = PipelineContext(make_config())
        return context, StageContext(context, generator, settings, owned_slot=owned_slot)

    def test_publish_owned_slot(self):
        context, stage_ctx = self.make(owned_slot=SLOT_CONCEPTS)
        stage_ctx.publish(SLOT_CONCEPTS, [Concept(1, "A", 1)])

        assert len(context.concepts) == 1
        assert len(stage_ctx.concepts) == 1

    def test_publish_other_slot_rejected(self):
        context, stage_ctx = self.make(owned_slot=SLOT_CONCEPTS)

        with pytest.raises(ContextSlotError):
            stage_ctx.publish(SLOT_CHAPTERS, [])
        assert not context.is_populated(SLOT_CHAPTERS)

    def test_read_only_stage_cannot_publish(self):
        _, stage_ctx = self.make()
        with pytest.raises(ContextSlotError):
            stage_ctx.publish(SLOT_COURSE_DESCRIPTION, CourseDescription(title="X"))

    def test_unknown_owned_slot_rejected(self):
        with pytest.raises(ContextSlotError):
            self.make(owned_slot="glossary")

    def test_title_falls_back_to_topic(self):
        context, stage_ctx = self.make()
        assert stage_ctx.title == "Widgets"
        assert stage_ctx.course_topics == []

        context.set(
            SLOT_COURSE_DESCRIPTION,
            CourseDescription(title="Widget Engineering", topics=["Basics", "Assembly"]),
        )
        assert stage_ctx.title == "Widget Engineering"
        assert stage_ctx.course_topics == ["Basics", "Assembly"]

    def test_require_chapters(self):
        context, stage_ctx = self.make()
        with pytest.raises(ContextSlotError):
            stage_ctx.require_chapters()

        context.set(SLOT_CHAPTERS, [ChapterOutline(1, "One")])
        assert [c.number for c in stage_ctx.require_chapters()] == [1]
