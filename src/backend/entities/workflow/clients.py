"""Pipeline client container and factories for dependency injection.

``PipelineClients`` bundles every dependency the PromptQL pipeline needs.
Production code builds it inside the FastAPI lifespan via
``open_pipeline_clients()``; tests construct it from in-memory fakes.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass

import anthropic
import httpx
import openai
from config.settings import Settings
from entities.execution import HasuraExecutor
from entities.llm import AnthropicProvider, OpenAIProvider
from entities.schema_context import SchemaContextBuilder
from entities.shared.errors import ConfigurationError
from entities.shared.protocols import LLMProvider, SqlExecutor

logger = logging.getLogger(__name__)

ADMIN_SECRET_HEADER = "x-hasura-admin-secret"


# ---------------------------------------------------------------------------
# PipelineClients dataclass
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PipelineClients:
    """Immutable bundle of all dependencies for the PromptQL pipeline.

    Args:
        schema_builder: Renders the schema context and examples.
        llm_provider: Active LLM backend, or ``None`` when it could not be
            configured (generation then fails with ``ConfigurationError``).
        sql_executor: Executes validated SQL.
        default_row_limit: LIMIT appended to generated SQL without one.
    """

    schema_builder: SchemaContextBuilder
    llm_provider: LLMProvider | None
    sql_executor: SqlExecutor
    default_row_limit: int = 100

    def require_llm(self) -> LLMProvider:
        """Return the LLM provider or raise ``ConfigurationError``."""
        if self.llm_provider is None:
            raise ConfigurationError("No LLM provider is configured")
        return self.llm_provider


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


SdkClient = openai.AsyncOpenAI | anthropic.AsyncAnthropic


def create_llm_provider(settings: Settings) -> tuple[LLMProvider, SdkClient]:
    """Create the LLM provider selected by ``PROMPTQL_LLM_PROVIDER``.

    The SDK client is returned alongside the provider so the caller can
    close it. SDK-level retries are disabled.

    Args:
        settings: Centralised application configuration.

    Returns:
        Tuple of (provider, underlying SDK client).

    Raises:
        ConfigurationError: If the provider is unknown or its API key is missing.
    """
    provider_type = settings.promptql_llm_provider

    if provider_type == "anthropic":
        if not settings.anthropic_api_key.strip():
            raise ConfigurationError("ANTHROPIC_API_KEY is required for the anthropic provider")
        anthropic_client = anthropic.AsyncAnthropic(
            api_key=settings.anthropic_api_key,
            timeout=settings.llm_timeout_seconds,
            max_retries=0,
        )
        provider: LLMProvider = AnthropicProvider(
            anthropic_client,
            model=settings.anthropic_model,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
        )
        return provider, anthropic_client

    if provider_type == "openai":
        if not settings.openai_api_key.strip():
            raise ConfigurationError("OPENAI_API_KEY is required for the openai provider")
        openai_client = openai.AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.llm_timeout_seconds,
            max_retries=0,
        )
        provider = OpenAIProvider(
            openai_client,
            model=settings.openai_model,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
        )
        return provider, openai_client

    raise ConfigurationError(f"Unknown LLM provider: {provider_type!r}")


def create_hasura_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create the HTTP client used for ``run_sql`` calls."""
    headers = {"Content-Type": "application/json"}
    if settings.hasura_graphql_admin_secret:
        headers[ADMIN_SECRET_HEADER] = settings.hasura_graphql_admin_secret
    else:
        logger.warning("HASURA_GRAPHQL_ADMIN_SECRET is not set; run_sql may be rejected")

    return httpx.AsyncClient(
        base_url=settings.hasura_graphql_endpoint.rstrip("/"),
        headers=headers,
        timeout=settings.hasura_timeout_seconds,
    )


@asynccontextmanager
async def open_pipeline_clients(settings: Settings) -> AsyncIterator[PipelineClients]:
    """Build ``PipelineClients`` and close every owned connection on exit.

    A misconfigured LLM provider is logged and left as ``None`` so the
    service still starts and can report a degraded state.

    Args:
        settings: Centralised application configuration.

    Yields:
        Fully-initialised ``PipelineClients``.
    """
    async with AsyncExitStack() as stack:
        schema_builder = SchemaContextBuilder.from_path(settings.schema_catalog_path)

        http_client = await stack.enter_async_context(create_hasura_http_client(settings))
        executor = HasuraExecutor(
            http_client,
            run_sql_path=settings.hasura_run_sql_path,
            source=settings.hasura_source,
        )

        llm_provider: LLMProvider | None = None
        try:
            llm_provider, sdk_client = create_llm_provider(settings)
        except ConfigurationError as exc:
            logger.error("LLM provider not configured: %s", exc)
        else:
            stack.push_async_callback(sdk_client.close)

        yield PipelineClients(
            schema_builder=schema_builder,
            llm_provider=llm_provider,
            sql_executor=executor,
            default_row_limit=settings.default_row_limit,
        )
