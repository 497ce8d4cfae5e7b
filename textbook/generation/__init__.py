"""
Text generation boundary (Anthropic Messages API).
"""

from .client import (
    AnthropicGenerationService,
    GenerationService,
    PromptRequest,
)

__all__ = [
    "AnthropicGenerationService",
    "GenerationService",
    "PromptRequest",
]
