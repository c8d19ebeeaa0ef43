"""
Shared models for entities.

These models are passed between the schema context builder, the LLM
providers, the query validator and the executor.
"""

from .execution import ExecutionResult, QueryOutcome
from .generation import DEFAULT_CONFIDENCE, GeneratedQuery, GenerationResult
from .schema import (
    ColumnSchema,
    GlossaryTerm,
    PromptPattern,
    SchemaCatalog,
    TableSchema,
)
from .validation import ValidationResult

__all__ = [
    # Schema catalog
    "ColumnSchema",
    "GlossaryTerm",
    "PromptPattern",
    "SchemaCatalog",
    "TableSchema",
    # Generation (LLM output)
    "DEFAULT_CONFIDENCE",
    "GenerationResult",
    "GeneratedQuery",
    # Validation
    "ValidationResult",
    # Execution (query results)
    "ExecutionResult",
    "QueryOutcome",
]
