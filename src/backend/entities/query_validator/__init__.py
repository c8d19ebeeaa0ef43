"""Query Validator package for validating SQL queries before execution."""

from .validator import ensure_limit, sanitize_identifier, validate_sql

__all__ = ["ensure_limit", "sanitize_identifier", "validate_sql"]
