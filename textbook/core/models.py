"""
Textbook Data Models.

Records produced and consumed by the pipeline stages:
- TextbookConfig: immutable run configuration
- CourseDescription: parsed course overview (stage 1)
- Concept: one node of the learning graph (stage 2)
- ChapterOutline: structure of one chapter (stage 3)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .exceptions import ConfigurationError


# =============================================================================
# Enums
# =============================================================================


class DeployTarget(str, Enum):
    """Where the generated site is meant to be published."""
    GITHUB_PAGES = "github-pages"
    NONE = "none"


class Taxonomy(str, Enum):
    """Concept depth within the course progression."""
    FOUNDATION = "Foundation"  # Vocabulary, definitions, basic facts
    CORE = "Core"              # Processes, relationships, applications
    ADVANCED = "Advanced"      # Synthesis, evaluation, design


class BloomLevel(str, Enum):
    """
    Revised Bloom's Taxonomy cognitive levels (Anderson & Krathwohl, 2001).

    Declaration order is the canonical low-to-high order.
    """
    REMEMBER = "Remember"
    UNDERSTAND = "Understand"
    APPLY = "Apply"
    ANALYZE = "Analyze"
    EVALUATE = "Evaluate"
    CREATE = "Create"


HIGHER_ORDER_LEVELS = frozenset(
    level.value
    for level in (BloomLevel.APPLY, BloomLevel.ANALYZE, BloomLevel.EVALUATE, BloomLevel.CREATE)
)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class TextbookConfig:
    """Run configuration, supplied once and never mutated."""

    topic: str
    chapters: int
    simulations: int
    concepts: int
    output_dir: Path
    model: str
    deploy: DeployTarget = DeployTarget.NONE
    repo_name: str | None = None

    def __post_init__(self):
        """Validate field values."""
        if not self.topic or not self.topic.strip():
            raise ConfigurationError("Topic must be a non-empty string")
        if self.chapters < 1:
            raise ConfigurationError(f"Chapter count must be positive, got {self.chapters}")
        if self.simulations < 0:
            raise ConfigurationError(
                f"Simulation count must be non-negative, got {self.simulations}"
            )
        if self.concepts < 1:
            raise ConfigurationError(f"Concept count must be positive, got {self.concepts}")
        if not self.model:
            raise ConfigurationError("Model identifier must be set")

        object.__setattr__(self, "output_dir", Path(self.output_dir))
        try:
            deploy = DeployTarget(self.deploy)
        except ValueError:
            raise ConfigurationError(f"Unknown deploy target {self.deploy!r}") from None
        object.__setattr__(self, "deploy", deploy)


# =============================================================================
# Stage Records
# =============================================================================


@dataclass(frozen=True)
class CourseDescription:
    """Course overview parsed from the first stage's output."""

    title: str
    subtitle: str = ""
    target_audience: str = ""
    prerequisites: str = ""
    topics: list[str] = field(default_factory=list)
    learning_outcomes: list[str] = field(default_factory=list)
    raw_markdown: str = ""


@dataclass(frozen=True)
class Concept:
    """A node in the topic's prerequisite graph."""

    id: int
    name: str
    chapter: int
    dependencies: list[int] = field(default_factory=list)
    taxonomy: Taxonomy = Taxonomy.CORE
    bloom_level: str = BloomLevel.REMEMBER.value  # canonical label, or raw text if unrecognised

    @property
    def label(self) -> str:
        """Identifier-prefixed name, e.g. ``12. Packet Switching``."""
        return f"{self.id}. {self.name}"


@dataclass(frozen=True)
class ChapterOutline:
    """Structural description of one chapter."""

    number: int
    title: str
    summary: str = ""
    concepts: list[int] = field(default_factory=list)

    @property
    def slug(self) -> str:
        """Zero-padded file stem, e.g. ``chapter-03``."""
        return f"chapter-{self.number:02d}"
