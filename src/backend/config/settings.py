"""Centralized application settings loaded from environment variables.

All configuration is defined once here. Other modules should import
``get_settings()`` rather than calling ``os.getenv()`` directly.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_SCHEMA_CATALOG_PATH = Path(__file__).resolve().parent / "schema_catalog.json"


class Settings(BaseSettings):
    """Application-wide configuration backed by environment variables.

    Field names are **lowercased** versions of the env-var names.
    ``pydantic-settings`` maps them automatically (case-insensitive).

    Example::

        settings = Settings()  # reads .env + real env
        provider = settings.promptql_llm_provider
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -- LLM ---------------------------------------------------------------

    promptql_llm_provider: str = "openai"
    """Backend used for SQL generation (``openai`` or ``anthropic``), selected once at startup.

    Stored stripped and lowercased. Unknown names are rejected by the client
    factory, not here, so the service still starts and reports degraded.
    """

    openai_api_key: str = ""
    """API key for the OpenAI backend."""

    openai_model: str = "gpt-4-turbo-preview"
    """Chat completions model for the OpenAI backend."""

    anthropic_api_key: str = ""
    """API key for the Anthropic backend."""

    anthropic_model: str = "claude-3-5-sonnet-20241022"
    """Messages API model for the Anthropic backend."""

    llm_max_tokens: int = 2000
    """Upper bound on completion tokens per generation."""

    llm_temperature: float = 0.1
    """Sampling temperature for generation."""

    llm_timeout_seconds: float = 60.0
    """Per-request timeout for LLM calls."""

    # -- Hasura ------------------------------------------------------------

    hasura_graphql_endpoint: str = "http://localhost:8080"
    """Base URL of the Hasura instance (no path)."""

    hasura_graphql_admin_secret: str = ""
    """Admin secret sent as ``x-hasura-admin-secret``."""

    hasura_run_sql_path: str = "/v2/query"
    """Path of the schema API that accepts ``run_sql`` requests."""

    hasura_source: str = "default"
    """Hasura database source the SQL runs against."""

    hasura_timeout_seconds: float = 30.0
    """Per-request timeout for ``run_sql`` calls."""

    # -- Query shaping -----------------------------------------------------

    default_row_limit: int = 100
    """LIMIT appended to generated SQL that has none."""

    schema_catalog_path: Path = DEFAULT_SCHEMA_CATALOG_PATH
    """JSON file describing tables, glossary terms and prompt patterns."""

    # -- Operational -------------------------------------------------------

    promptql_port: int = 3003
    """Port used when running the module directly."""

    cors_allow_origins: Annotated[list[str], NoDecode] = ["*"]
    """Origins allowed by the CORS middleware.

    Accepts a comma-separated string (``http://a,http://b``) or a JSON array.
    """

    @field_validator("promptql_llm_provider", mode="before")
    @classmethod
    def _normalize_provider(cls, value: Any) -> Any:  # noqa: ANN401
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:  # noqa: ANN401
        if not isinstance(value, str):
            return value
        text = value.strip()
        if text.startswith("["):
            return json.loads(text)
        return [origin.strip() for origin in text.split(",") if origin.strip()]


def get_settings() -> Settings:
    """Return a cached ``Settings`` instance.

    Uses ``lru_cache`` semantics via a module-level singleton so the
    ``.env`` file is read at most once per process.

    Returns:
        The global ``Settings`` object.
    """
    return _settings


_settings = Settings()
