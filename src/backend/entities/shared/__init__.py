"""Shared protocols and errors for pipeline stages."""

from .errors import (
    ConfigurationError,
    ExecutionError,
    GenerationError,
    PromptQLError,
    QueryValidationError,
)
from .protocols import LLMProvider, SqlExecutor

__all__ = [
    "ConfigurationError",
    "ExecutionError",
    "GenerationError",
    "LLMProvider",
    "PromptQLError",
    "QueryValidationError",
    "SqlExecutor",
]
