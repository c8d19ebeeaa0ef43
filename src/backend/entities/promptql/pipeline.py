"""PromptQL pipeline: prompt -> SQL -> validation -> rows.

Three plain async functions compose the schema context builder, the LLM
provider, the query validator and the executor:

- ``generate_sql`` turns a prompt into validated, LIMIT-bounded SQL.
- ``execute_sql`` validates caller-supplied SQL and runs it.
- ``process_query`` does both, failing at the first stage that fails.

Validation failures raise ``QueryValidationError`` before any database
call. Nothing is retried.
"""

from __future__ import annotations

import logging

from entities.query_validator import ensure_limit, validate_sql
from entities.shared.errors import QueryValidationError
from entities.workflow.clients import PipelineClients
from models import ExecutionResult, GeneratedQuery, QueryOutcome

logger = logging.getLogger(__name__)


async def generate_sql(prompt: str, clients: PipelineClients) -> GeneratedQuery:
    """Generate SQL for a prompt and gate it through the validator.

    Confidence is passed through untouched; low-confidence answers are
    not blocked here.

    Args:
        prompt: Natural-language request.
        clients: Pipeline dependencies.

    Returns:
        ``GeneratedQuery`` whose SQL carries a LIMIT clause and whose
        warnings are the validator's followed by the model's.

    Raises:
        ConfigurationError: If no LLM provider is configured.
        GenerationError: If the LLM call fails or returns unusable output.
        QueryValidationError: If the generated SQL is rejected.
    """
    llm = clients.require_llm()
    schema_context = clients.schema_builder.build_context()
    examples = clients.schema_builder.get_examples()

    generation = await llm.generate_sql(prompt, schema_context, examples)
    logger.info(
        "Generated SQL (confidence=%.2f): %s",
        generation.confidence,
        generation.sql[:200],
    )

    validation = validate_sql(generation.sql)
    if not validation.valid or validation.sanitized_sql is None:
        logger.info("Generated SQL rejected: %s", validation.errors)
        raise QueryValidationError(generation.sql, validation.errors)

    return GeneratedQuery(
        sql=ensure_limit(validation.sanitized_sql, clients.default_row_limit),
        explanation=generation.explanation,
        confidence=generation.confidence,
        warnings=[*validation.warnings, *generation.warnings],
    )


async def execute_sql(sql: str, clients: PipelineClients) -> ExecutionResult:
    """Validate caller-supplied SQL and execute it.

    Raises:
        QueryValidationError: If the SQL is rejected.
        ExecutionError: If the database call fails.
    """
    validation = validate_sql(sql)
    if not validation.valid or validation.sanitized_sql is None:
        logger.info("Submitted SQL rejected: %s", validation.errors)
        raise QueryValidationError(sql, validation.errors)

    return await clients.sql_executor.execute_sql(validation.sanitized_sql)


async def process_query(prompt: str, clients: PipelineClients) -> QueryOutcome:
    """Generate SQL for a prompt, then execute it.

    The LIMIT-bounded SQL from ``generate_sql`` is what gets executed.

    Raises:
        ConfigurationError: If no LLM provider is configured.
        GenerationError: If generation fails.
        QueryValidationError: If the generated SQL is rejected.
        ExecutionError: If the database call fails.
    """
    generated = await generate_sql(prompt, clients)
    result = await clients.sql_executor.execute_sql(generated.sql)
    return QueryOutcome(prompt=prompt, query=generated, result=result)
