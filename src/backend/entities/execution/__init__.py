"""Execution package: runs validated SQL through Hasura."""

from .hasura_executor import HasuraExecutor, rows_from_tabular

__all__ = ["HasuraExecutor", "rows_from_tabular"]
