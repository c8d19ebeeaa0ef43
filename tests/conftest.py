"""Shared test fixtures for PromptQL."""

import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

# Ensure src/backend/ is on the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src" / "backend"))

from config.settings import Settings
from entities.schema_context import BUILTIN_CATALOG, SchemaContextBuilder
from entities.shared.errors import ExecutionError, GenerationError
from entities.workflow import PipelineClients
from models import ExecutionResult, GenerationResult

# ---------------------------------------------------------------------------
# Protocol fakes
# ---------------------------------------------------------------------------


class FakeLLMProvider:
    """In-memory fake satisfying the ``LLMProvider`` protocol.

    Returns a canned ``GenerationResult`` (or raises ``GenerationError``)
    and records every ``generate_sql`` call for assertions.
    """

    def __init__(
        self,
        result: GenerationResult | None = None,
        error: str | None = None,
        name: str = "Fake (test-model)",
    ) -> None:
        self.result = result or GenerationResult(sql="SELECT 1")
        self.error = error
        self._name = name
        self.calls: list[tuple[str, str, list[str]]] = []

    @property
    def provider_name(self) -> str:
        return self._name

    async def generate_sql(
        self,
        prompt: str,
        schema_context: str,
        examples: Sequence[str] = (),
    ) -> GenerationResult:
        """Return the canned result, or raise the configured error."""
        self.calls.append((prompt, schema_context, list(examples)))
        if self.error:
            raise GenerationError(self.error)
        return self.result


class FakeSqlExecutor:
    """In-memory fake satisfying the ``SqlExecutor`` protocol.

    Returns canned rows or raises ``ExecutionError``, and records every call.
    """

    def __init__(
        self,
        rows: list[dict[str, Any]] | None = None,
        error: str | None = None,
        connected: bool = True,
    ) -> None:
        self.rows: list[dict[str, Any]] = rows or []
        self.error: str | None = error
        self.connected = connected
        self.calls: list[str] = []

    async def execute_sql(self, sql: str) -> ExecutionResult:
        """Return an ``ExecutionResult`` over the canned rows."""
        self.calls.append(sql)
        if self.error:
            raise ExecutionError(self.error)
        return ExecutionResult(rows=self.rows, row_count=len(self.rows), execution_time_ms=3)

    async def test_connection(self) -> bool:
        return self.connected


def make_clients(
    *,
    llm: FakeLLMProvider | None = None,
    executor: FakeSqlExecutor | None = None,
    no_llm: bool = False,
    default_row_limit: int = 100,
) -> PipelineClients:
    """Build a ``PipelineClients`` with fakes for all I/O."""
    return PipelineClients(
        schema_builder=SchemaContextBuilder(BUILTIN_CATALOG),
        llm_provider=None if no_llm else (llm or FakeLLMProvider()),
        sql_executor=executor or FakeSqlExecutor(),
        default_row_limit=default_row_limit,
    )


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Settings:
    """Return a ``Settings`` instance populated with safe test defaults."""
    return Settings(
        promptql_llm_provider="openai",
        openai_api_key="sk-test",
        anthropic_api_key="sk-ant-test",
        hasura_graphql_endpoint="http://hasura.test:8080",
        hasura_graphql_admin_secret="test-secret",
    )


@pytest.fixture
def fake_llm() -> FakeLLMProvider:
    """Return a ``FakeLLMProvider`` answering ``SELECT 1``."""
    return FakeLLMProvider()


@pytest.fixture
def fake_sql_executor() -> FakeSqlExecutor:
    """Return an empty ``FakeSqlExecutor`` instance."""
    return FakeSqlExecutor()


@pytest.fixture
def schema_builder() -> SchemaContextBuilder:
    """Return a builder over the built-in catalog."""
    return SchemaContextBuilder(BUILTIN_CATALOG)
