"""
Request and response bodies for the PromptQL HTTP API.

Responses are serialized with camelCase keys (``rowCount``,
``validationErrors``...) to match the existing web client.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -- Requests ---------------------------------------------------------------


class PromptRequest(BaseModel):
    """Body of ``/api/generate`` and ``/api/query``."""

    prompt: str | None = None


class ExecuteRequest(BaseModel):
    """Body of ``/api/execute``."""

    sql: str | None = None


# -- Responses --------------------------------------------------------------


class GenerateResponse(_CamelModel):
    sql: str
    explanation: str
    confidence: float
    warnings: list[str] = Field(default_factory=list)


class ExecuteResponse(_CamelModel):
    data: list[dict[str, Any]] = Field(default_factory=list)
    row_count: int
    execution_time: int = Field(description="Milliseconds spent in the database call")


class QueryResponse(_CamelModel):
    prompt: str
    sql: str
    explanation: str
    confidence: float
    warnings: list[str] = Field(default_factory=list)
    data: list[dict[str, Any]] = Field(default_factory=list)
    row_count: int
    execution_time: int


class SchemaResponse(_CamelModel):
    context: str
    examples: list[str]


class HealthResponse(_CamelModel):
    status: str
    service: str
    llm_provider: str | None = None


class ErrorResponse(_CamelModel):
    """Error body. ``data`` is intentionally absent: failures never carry rows."""

    error: str
    message: str | None = None
    validation_errors: list[str] | None = None
    sql: str | None = None
