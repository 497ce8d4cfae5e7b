"""Sequential orchestration of the generation stages."""

from .orchestrator import (
    DEFAULT_STAGES,
    PipelineReport,
    PipelineStatus,
    Stage,
    StageResult,
    TextbookPipeline,
)

__all__ = [
    "DEFAULT_STAGES",
    "PipelineReport",
    "PipelineStatus",
    "Stage",
    "StageResult",
    "TextbookPipeline",
]
