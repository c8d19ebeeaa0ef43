"""Protocol interfaces for I/O boundaries.

These protocols enable dependency injection for testability.
Production implementations wrap the OpenAI/Anthropic SDKs and Hasura;
test fakes return canned data with zero network access.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from models import ExecutionResult, GenerationResult


@runtime_checkable
class LLMProvider(Protocol):
    """Generates candidate SQL from a natural-language prompt.

    Implementations differ only in transport and response unwrapping;
    all return a ``GenerationResult`` with the same defaults.
    """

    @property
    def provider_name(self) -> str:
        """Human-readable backend name, e.g. ``"OpenAI (gpt-4o)"``."""
        ...

    async def generate_sql(
        self,
        prompt: str,
        schema_context: str,
        examples: Sequence[str] = (),
    ) -> GenerationResult:
        """Generate SQL for a prompt.

        Args:
            prompt: Natural-language request from the user.
            schema_context: Rendered table/glossary description.
            examples: ``Prompt: ... / SQL: ...`` example strings.

        Returns:
            Normalized generation result.

        Raises:
            GenerationError: If the backend call fails or its output
                cannot be parsed into a ``GenerationResult``.
        """
        ...


@runtime_checkable
class SqlExecutor(Protocol):
    """Executes validated SQL against the database."""

    async def execute_sql(self, sql: str) -> ExecutionResult:
        """Execute a SQL query.

        Args:
            sql: SQL that already passed the query validator.

        Returns:
            Rows keyed by column name, row count, and elapsed time.

        Raises:
            ExecutionError: If the call fails or the response is unrecognized.
        """
        ...

    async def test_connection(self) -> bool:
        """Return True when the database answers ``SELECT 1``. Never raises."""
        ...
