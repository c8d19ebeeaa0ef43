"""Anthropic implementation of the ``LLMProvider`` protocol."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import anthropic
from entities.llm.base import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    build_system_prompt,
    build_user_message,
    parse_generation_response,
)
from entities.shared.errors import GenerationError
from models import GenerationResult

logger = logging.getLogger(__name__)

DEFAULT_ANTHROPIC_MODEL = "claude-3-5-sonnet-20241022"


class AnthropicProvider:
    """Generate SQL payloads using the Anthropic Messages API.

    Claude has no JSON mode here, so the answer may arrive wrapped in
    markdown; the shared parser recovers the embedded object.

    Args:
        client: Configured ``AsyncAnthropic`` client, owned by the caller.
        model: Messages API model name.
        max_tokens: Completion token budget.
        temperature: Sampling temperature.
    """

    def __init__(
        self,
        client: anthropic.AsyncAnthropic,
        model: str = DEFAULT_ANTHROPIC_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> None:
        self._client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    @property
    def provider_name(self) -> str:
        return f"Anthropic ({self.model})"

    async def generate_sql(
        self,
        prompt: str,
        schema_context: str,
        examples: Sequence[str] = (),
    ) -> GenerationResult:
        system_prompt = build_system_prompt(schema_context, examples)
        logger.info("Requesting SQL from %s for: %s", self.provider_name, prompt[:100])

        try:
            message = await self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": build_user_message(prompt)}],
            )
        except anthropic.AnthropicError as exc:
            logger.error("Anthropic API error: %s", exc)
            raise GenerationError(f"Anthropic generation failed: {exc}") from exc

        if not message.content:
            raise GenerationError("No response from Anthropic")

        block = message.content[0]
        if block.type != "text":
            raise GenerationError(f"Unexpected response type from Claude: {block.type}")

        return parse_generation_response(block.text)
