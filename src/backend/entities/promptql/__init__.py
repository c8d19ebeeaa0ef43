"""PromptQL pipeline entry points."""

from .pipeline import execute_sql, generate_sql, process_query

__all__ = ["execute_sql", "generate_sql", "process_query"]
