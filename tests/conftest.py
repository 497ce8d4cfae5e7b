"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests:
a stub GenerationService that answers from canned model output, settings
that never read the local .env file, and small configurations.
"""
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import Settings  # noqa: E402
from textbook.core.models import TextbookConfig  # noqa: E402
from textbook.generation import prompts  # noqa: E402
from textbook.generation.client import GenerationService  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (stubbed generation, real filesystem)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


# =============================================================================
# Canned Model Output
# =============================================================================

WIDGETS_COURSE_DESCRIPTION = """# Widgets Course

## Course Title
**Widget Engineering Fundamentals**

## Subtitle
From first sketch to production widget.

## Target Audience
Engineers who build widgets for a living.

## Prerequisites
Basic algebra.

## Topics Covered
- Chapter 1: Widget Basics
- Chapter 2: Widget Assembly

## Learning Outcomes
1. Remember: List the parts of a widget.
2. Understand: Explain how widgets fit together.
3. Apply: Assemble a widget.
4. Analyze: Diagnose a broken widget.
5. Evaluate: Judge widget designs.
6. Create: Design a new widget.
"""

WIDGETS_CONCEPT_TABLE = """Here is the learning graph:

| ID | Concept | Chapter | Dependencies | Taxonomy | Bloom's Level |
|----|---------|---------|--------------|----------|---------------|
| 1 | Widget | 1 | | Foundation | Remember |
| 2 | Sprocket | 1 | 1 | Foundation | Understand |
| 3 | Assembly Line | 2 | 1, 2 | Core | Apply |
| 4 | Widget Design | 2 | 3 | Advanced | Create |
"""

WIDGETS_OUTLINE = """---
## Chapter 1: Widget Basics

**Summary:** Introduces widgets and sprockets.

**Concept IDs:** 1, 2

**Key Questions:**
- What is a widget?
---
## Chapter 2: Widget Assembly

**Summary:** Shows how widgets are assembled
on a production line.

**Concept IDs:** 3, 4
---
"""

SIMULATION_HTML = """```html
<!DOCTYPE html>
<html lang="en"><head><title>Sim</title></head><body><canvas></canvas></body></html>
```"""

GLOSSARY_TEXT = """Terms used in this book.

## S

**Sprocket** *(Chapter 1, Foundation)*
: A sprocket is a toothed wheel that drives a widget.

## W

**Widget** *(Chapter 1, Foundation)*
: A widget is a small manufactured device.
"""

FAQ_TEXT = """Common questions about widgets.

## Basics

??? question "What is a widget?"
    A small manufactured device.

??? question "Why do widgets need sprockets?"
    Sprockets transfer motion between widget parts.
"""


def canned_response(prompt: str, system: str | None) -> str:
    """Answer a stage prompt with canned text, keyed on the stage persona."""
    responses = {
        prompts.COURSE_DESCRIPTION_SYSTEM: WIDGETS_COURSE_DESCRIPTION,
        prompts.LEARNING_GRAPH_SYSTEM: WIDGETS_CONCEPT_TABLE,
        prompts.CHAPTER_STRUCTURE_SYSTEM: WIDGETS_OUTLINE,
        prompts.SIMULATION_SYSTEM: SIMULATION_HTML,
        prompts.GLOSSARY_SYSTEM: GLOSSARY_TEXT,
        prompts.FAQ_SYSTEM: FAQ_TEXT,
        prompts.QUIZ_SYSTEM: "# Quiz\n\n## Q1: Remember\n\n**What is a widget?**\n",
        prompts.REFERENCES_SYSTEM: "# References\n\n## Chapter 1\n\n- Widget Handbook\n",
        prompts.README_SYSTEM: "# Widget Engineering Fundamentals\n\nA textbook about widgets.\n",
    }
    if system in responses:
        return responses[system]
    if system == prompts.CHAPTER_CONTENT_SYSTEM:
        return "# Chapter\n\nWidgets are small devices used in many machines.\n"
    return ""


# =============================================================================
# Stub Generation Service
# =============================================================================


class StubGenerationService(GenerationService):
    """GenerationService that records calls and answers from a responder."""

    def __init__(
        self,
        responder: Callable[[str, str | None], str] = canned_response,
        concurrency: int = 4,
    ):
        super().__init__(concurrency)
        self.responder = responder
        self.calls: list[dict] = []

    async def generate(self, prompt, *, system=None, model=None, max_tokens=None):
        self.calls.append(
            {"prompt": prompt, "system": system, "model": model, "max_tokens": max_tokens}
        )
        return self.responder(prompt, system)

    def systems(self) -> list[str | None]:
        return [call["system"] for call in self.calls]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def settings():
    """Settings isolated from the environment's .env file."""
    return Settings(
        _env_file=None,
        anthropic_api_key="test-key",
        github_owner="acme",
        generation_concurrency=4,
    )


@pytest.fixture
def stub_generator():
    """Stub generator answering every stage with canned Widgets output."""
    return StubGenerationService()


@pytest.fixture
def widgets_config(tmp_path):
    """The two-chapter, four-concept Widgets configuration."""
    return TextbookConfig(
        topic="Widgets",
        chapters=2,
        simulations=2,
        concepts=4,
        output_dir=tmp_path / "widgets",
        model="test-model",
    )


@pytest.fixture
def stub_factory():
    """The stub class itself, for tests that need a custom responder."""
    return StubGenerationService


@pytest.fixture
def canned_responder():
    """The default canned-output responder, for wrapping in custom ones."""
    return canned_response
