"""
PromptQL API routes.

Each route validates its body, calls one pipeline entry point and maps
pipeline exceptions to HTTP responses:

- ``QueryValidationError`` -> 400 with ``validationErrors`` (expected path)
- ``GenerationError`` / ``ConfigurationError`` / ``ExecutionError`` -> 500

Error bodies never include ``data``.
"""

import logging

from api.dependencies import get_clients
from api.models import (
    ErrorResponse,
    ExecuteRequest,
    ExecuteResponse,
    GenerateResponse,
    PromptRequest,
    QueryResponse,
    SchemaResponse,
)
from entities.promptql import execute_sql, generate_sql, process_query
from entities.shared.errors import (
    ConfigurationError,
    ExecutionError,
    GenerationError,
    QueryValidationError,
)
from entities.workflow import PipelineClients
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["promptql"])

_ERROR_RESPONSES: dict[int | str, dict] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def error_response(
    status_code: int,
    error: str,
    *,
    message: str | None = None,
    validation_errors: list[str] | None = None,
    sql: str | None = None,
) -> JSONResponse:
    """Build a JSON error body with camelCase keys and no empty fields."""
    body = ErrorResponse(
        error=error,
        message=message,
        validation_errors=validation_errors,
        sql=sql,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


def _validation_failed(exc: QueryValidationError, error: str, *, echo_sql: bool) -> JSONResponse:
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        error,
        validation_errors=exc.errors,
        sql=exc.sql if echo_sql else None,
    )


def _required(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses=_ERROR_RESPONSES,
)
async def generate(
    body: PromptRequest | None = None,
    clients: PipelineClients = Depends(get_clients),
) -> GenerateResponse | JSONResponse:
    """Generate SQL from natural language without executing it."""
    prompt = _required(body.prompt if body else None)
    if prompt is None:
        return error_response(status.HTTP_400_BAD_REQUEST, "Prompt is required")

    try:
        generated = await generate_sql(prompt, clients)
    except QueryValidationError as exc:
        return _validation_failed(exc, "Generated SQL failed validation", echo_sql=True)
    except (GenerationError, ConfigurationError) as exc:
        logger.exception("Generate error")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "SQL generation failed", message=str(exc)
        )

    return GenerateResponse(
        sql=generated.sql,
        explanation=generated.explanation,
        confidence=generated.confidence,
        warnings=generated.warnings,
    )


@router.post(
    "/execute",
    response_model=ExecuteResponse,
    responses=_ERROR_RESPONSES,
)
async def execute(
    body: ExecuteRequest | None = None,
    clients: PipelineClients = Depends(get_clients),
) -> ExecuteResponse | JSONResponse:
    """Validate and execute caller-supplied SQL."""
    sql = _required(body.sql if body else None)
    if sql is None:
        return error_response(status.HTTP_400_BAD_REQUEST, "SQL is required")

    try:
        result = await execute_sql(sql, clients)
    except QueryValidationError as exc:
        return _validation_failed(exc, "SQL validation failed", echo_sql=False)
    except ExecutionError as exc:
        logger.exception("Execute error")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Query execution failed", message=str(exc)
        )

    return ExecuteResponse(
        data=result.rows,
        row_count=result.row_count,
        execution_time=result.execution_time_ms,
    )


@router.post(
    "/query",
    response_model=QueryResponse,
    responses=_ERROR_RESPONSES,
)
async def query(
    body: PromptRequest | None = None,
    clients: PipelineClients = Depends(get_clients),
) -> QueryResponse | JSONResponse:
    """Generate SQL from natural language and execute it."""
    prompt = _required(body.prompt if body else None)
    if prompt is None:
        return error_response(status.HTTP_400_BAD_REQUEST, "Prompt is required")

    try:
        outcome = await process_query(prompt, clients)
    except QueryValidationError as exc:
        return _validation_failed(exc, "Generated SQL failed validation", echo_sql=True)
    except (GenerationError, ConfigurationError, ExecutionError) as exc:
        logger.exception("Query error")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Query failed", message=str(exc)
        )

    return QueryResponse(
        prompt=outcome.prompt,
        sql=outcome.query.sql,
        explanation=outcome.query.explanation,
        confidence=outcome.query.confidence,
        warnings=outcome.query.warnings,
        data=outcome.result.rows,
        row_count=outcome.result.row_count,
        execution_time=outcome.result.execution_time_ms,
    )


@router.get("/schema", response_model=SchemaResponse)
async def schema(clients: PipelineClients = Depends(get_clients)) -> SchemaResponse:
    """Return the schema context and examples sent to the LLM (debugging aid)."""
    return SchemaResponse(
        context=clients.schema_builder.build_context(),
        examples=clients.schema_builder.get_examples(),
    )
