"""Exception types shared across the PromptQL pipeline.

Routers translate these into HTTP responses; entities raise them and
never build responses themselves.
"""

from __future__ import annotations


class PromptQLError(Exception):
    """Base class for all PromptQL pipeline errors."""


class ConfigurationError(PromptQLError):
    """Raised when a dependency cannot be configured (missing key, bad provider)."""


class GenerationError(PromptQLError):
    """Raised when the LLM backend fails or returns output outside the contract."""


class ExecutionError(PromptQLError):
    """Raised when the database call fails or returns an unrecognized shape."""


class QueryValidationError(PromptQLError):
    """Raised when SQL is rejected by the query validator.

    This is the expected outcome for unsafe or malformed SQL, not a
    server fault.

    Args:
        sql: The rejected, unexecuted SQL.
        errors: Validator error messages, in detection order.
    """

    def __init__(self, sql: str, errors: list[str]) -> None:
        super().__init__("; ".join(errors) or "SQL validation failed")
        self.sql = sql
        self.errors = list(errors)
