"""
Exception hierarchy for the textbook pipeline.

Extraction problems have no exception type: the extractors degrade to
partial or synthesized data and report diagnostics instead of raising.
"""
from __future__ import annotations


class TextbookError(Exception):
    """Base class for all pipeline errors."""
    pass


class ConfigurationError(TextbookError):
    """Raised for invalid configuration values or a missing credential."""
    pass


class GenerationError(TextbookError):
    """Raised when a call to the generation service fails."""
    pass


class ContextSlotError(TextbookError):
    """Raised when a context slot is written twice, written by a stage that
    does not own it, or required before it has been populated."""
    pass


class StageError(TextbookError):
    """Raised by the orchestrator when a stage fails.

    The original exception is available as ``cause`` (and ``__cause__``);
    the partial run report, if any, is attached as ``report``.
    """

    def __init__(self, stage_name: str, cause: BaseException):
        self.stage_name = stage_name
        self.cause = cause
        self.report = None
        super().__init__(f"{stage_name}: {cause}")
