"""
Generation Service.

Thin boundary around the Anthropic Messages API:
- generate: one prompt in, generated text out
- generate_parallel: a fan-out of independent prompts, joined before returning

Results of a fan-out are positionally aligned with the requests. In-flight
requests are bounded by a semaphore; if any request fails the whole batch
fails.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass

import anthropic
from loguru import logger

from config import get_settings
from textbook.core.exceptions import ConfigurationError, GenerationError

from .prompts import DEFAULT_SYSTEM_PROMPT

DEFAULT_CONCURRENCY = 8


@dataclass(frozen=True)
class PromptRequest:
    """One entry of a parallel fan-out."""

    prompt: str
    system: str | None = None


class GenerationService(ABC):
    """
    Base class for text generation backends.

    Subclasses implement ``generate``; the bounded fan-out is shared.
    """

    def __init__(self, concurrency: int = DEFAULT_CONCURRENCY):
        if concurrency < 1:
            raise ConfigurationError(f"Concurrency must be at least 1, got {concurrency}")
        self.concurrency = concurrency

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Generate text for a single prompt."""
        ...

    async def generate_parallel(
        self,
        requests: list[PromptRequest],
        *,
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> list[str]:
        """
        Run independent prompts concurrently.

        Args:
            requests: Prompts (with optional per-request system prompt)
            model: Model shared by every request
            max_tokens: Token limit shared by every request

        Returns:
            One result per request, in request order
        """
        if not requests:
            return []

        # Created per call so the semaphore binds to the running loop
        semaphore = asyncio.Semaphore(self.concurrency)

        async def _bounded(index: int, request: PromptRequest) -> str:
            async with semaphore:
                logger.debug(f"Fan-out request {index + 1}/{len(requests)} started")
                return await self.generate(
                    request.prompt,
                    system=request.system,
                    model=model,
                    max_tokens=max_tokens,
                )

        logger.info(
            f"Generating {len(requests)} documents (concurrency={self.concurrency})"
        )
        tasks = [asyncio.ensure_future(_bounded(i, r)) for i, r in enumerate(requests)]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # First failure wins; stop the remaining requests
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise


class AnthropicGenerationService(GenerationService):
    """Generation backed by Claude models through the Anthropic SDK."""

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        max_tokens: int | None = None,
        concurrency: int | None = None,
    ):
        """
        Initialize the service.

        Args:
            api_key: Anthropic API key (uses settings if not provided)
            model_name: Default model (uses settings if not provided)
            max_tokens: Default token limit (uses settings if not provided)
            concurrency: Max concurrent API calls during a fan-out
        """
        settings = get_settings()
        super().__init__(concurrency or settings.generation_concurrency)

        self.api_key = api_key or settings.anthropic_api_key
        self.model_name = model_name or settings.default_model
        self.max_tokens = max_tokens or settings.default_max_tokens
        self.timeout = settings.anthropic_timeout_seconds
        self.max_retries = settings.anthropic_max_retries

        if not self.api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY environment variable is required")

        self._client: anthropic.AsyncAnthropic | None = None

        logger.info(
            f"AnthropicGenerationService initialized "
            f"(model={self.model_name}, concurrency={self.concurrency})"
        )

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        """Lazy-load the Anthropic client."""
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
                api_key=self.api_key,
                timeout=self.timeout,
                max_retries=self.max_retries,
            )
        return self._client

    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> str:
        model = model or self.model_name
        max_tokens = max_tokens or self.max_tokens

        try:
            # Streaming keeps long generations under the SDK's non-streaming limits
            async with self.client.messages.stream(
                model=model,
                max_tokens=max_tokens,
                system=system or DEFAULT_SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            ) as stream:
                message = await stream.get_final_message()
        except anthropic.APIError as e:
            logger.error(f"Generation failed (model={model}): {e}")
            raise GenerationError(f"Anthropic API error: {e}") from e

        for block in message.content:
            if block.type == "text":
                return block.text

        logger.warning(f"Response from {model} contained no text block")
        return ""
