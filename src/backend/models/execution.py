"""
Query execution models.

These models represent the rows returned after SQL execution.
"""

from typing import Any

from pydantic import BaseModel, Field

from .generation import GeneratedQuery


class ExecutionResult(BaseModel):
    """Rows produced by one ``run_sql`` call."""

    rows: list[dict[str, Any]] = Field(
        default_factory=list,
        description="List of row dictionaries keyed by column name",
    )

    row_count: int = Field(
        default=0,
        ge=0,
        description="Total number of rows returned",
    )

    execution_time_ms: int = Field(
        default=0,
        ge=0,
        description="Wall-clock time of the database call in milliseconds",
    )


class QueryOutcome(BaseModel):
    """Result of generate-then-execute for one prompt."""

    prompt: str
    query: GeneratedQuery
    result: ExecutionResult
