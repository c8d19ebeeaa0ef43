"""Schema context package: renders the table catalog for LLM prompts."""

from .builder import BUILTIN_CATALOG, SchemaContextBuilder, load_schema_catalog

__all__ = ["BUILTIN_CATALOG", "SchemaContextBuilder", "load_schema_catalog"]
