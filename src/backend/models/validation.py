"""
SQL validation models.

``ValidationResult`` is produced by the query validator and consumed by
the request pipeline to decide whether SQL may reach the database.
"""

from pydantic import BaseModel, Field, model_validator


class ValidationResult(BaseModel):
    """Outcome of validating one SQL string."""

    valid: bool = Field(description="True when no errors were found")
    errors: list[str] = Field(
        default_factory=list, description="Reasons the SQL was rejected"
    )
    warnings: list[str] = Field(
        default_factory=list, description="Non-fatal concerns about the SQL"
    )
    sanitized_sql: str | None = Field(
        default=None, description="Trimmed SQL, present only when valid"
    )

    @model_validator(mode="after")
    def _check_consistency(self) -> "ValidationResult":
        if self.valid != (not self.errors):
            raise ValueError("valid must be True exactly when errors is empty")
        if self.valid != (self.sanitized_sql is not None):
            raise ValueError("sanitized_sql must be set exactly when the SQL is valid")
        return self
