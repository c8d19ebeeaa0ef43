"""
SQL generation models.

``GenerationResult`` is the uniform shape every LLM backend normalizes
its output to.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIDENCE = 0.5


class GenerationResult(BaseModel):
    """Candidate SQL returned by an LLM backend."""

    sql: str = Field(min_length=1, description="Candidate SQL statement")
    explanation: str = Field(default="", description="Plain-language description of the query")
    confidence: float = Field(
        default=DEFAULT_CONFIDENCE,
        ge=0.0,
        le=1.0,
        description="Model's self-reported confidence (best effort)",
    )
    warnings: list[str] = Field(
        default_factory=list, description="Caveats reported by the model"
    )

    @field_validator("sql", mode="before")
    @classmethod
    def _strip_sql(cls, value: Any) -> Any:  # noqa: ANN401
        return value.strip() if isinstance(value, str) else value

    @field_validator("explanation", mode="before")
    @classmethod
    def _default_explanation(cls, value: Any) -> Any:  # noqa: ANN401
        return "" if value is None else value

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, value: Any) -> Any:  # noqa: ANN401
        # Models occasionally answer 0, null or 95 (percent); none are usable as-is.
        if value is None or isinstance(value, bool):
            return DEFAULT_CONFIDENCE
        if isinstance(value, int | float):
            if value <= 0:
                return DEFAULT_CONFIDENCE
            return min(float(value), 1.0)
        return value

    @field_validator("warnings", mode="before")
    @classmethod
    def _coerce_warnings(cls, value: Any) -> Any:  # noqa: ANN401
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        return value


class GeneratedQuery(BaseModel):
    """Validated, LIMIT-bounded SQL ready to hand to the caller or executor."""

    sql: str = Field(description="Sanitized SQL with a LIMIT clause")
    explanation: str = Field(default="")
    confidence: float = Field(default=DEFAULT_CONFIDENCE, ge=0.0, le=1.0)
    warnings: list[str] = Field(
        default_factory=list,
        description="Validator warnings followed by model warnings",
    )
