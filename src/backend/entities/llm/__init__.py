"""LLM providers for SQL generation."""

from .anthropic_provider import AnthropicProvider
from .base import build_system_prompt, parse_generation_response
from .openai_provider import OpenAIProvider

__all__ = [
    "AnthropicProvider",
    "OpenAIProvider",
    "build_system_prompt",
    "parse_generation_response",
]
