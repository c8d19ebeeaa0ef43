"""OpenAI implementation of the ``LLMProvider`` protocol."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import openai
from entities.llm.base import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    build_system_prompt,
    parse_generation_response,
)
from entities.shared.errors import GenerationError
from models import GenerationResult

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-4-turbo-preview"


class OpenAIProvider:
    """Generate SQL payloads using the OpenAI Chat Completions API.

    JSON mode (``response_format={"type": "json_object"}``) is requested so
    the message content is expected to be a bare JSON object.

    Args:
        client: Configured ``AsyncOpenAI`` client, owned by the caller.
        model: Chat completions model name.
        max_tokens: Completion token budget.
        temperature: Sampling temperature.
    """

    def __init__(
        self,
        client: openai.AsyncOpenAI,
        model: str = DEFAULT_OPENAI_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> None:
        self._client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    @property
    def provider_name(self) -> str:
        return f"OpenAI ({self.model})"

    async def generate_sql(
        self,
        prompt: str,
        schema_context: str,
        examples: Sequence[str] = (),
    ) -> GenerationResult:
        system_prompt = build_system_prompt(schema_context, examples)
        logger.info("Requesting SQL from %s for: %s", self.provider_name, prompt[:100])

        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as exc:
            logger.error("OpenAI API error: %s", exc)
            raise GenerationError(f"OpenAI generation failed: {exc}") from exc

        content = None
        if response.choices:
            content = response.choices[0].message.content
        if not content or not content.strip():
            raise GenerationError("No response from OpenAI")

        return parse_generation_response(content)
