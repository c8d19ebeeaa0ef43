"""
Schema catalog models.

These models describe the tables, glossary terms and example prompt
patterns used to ground SQL generation. They are deserialized from
``config/schema_catalog.json``.
"""

from pydantic import BaseModel, ConfigDict, Field


class ColumnSchema(BaseModel):
    """A column definition within a catalog table."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Column name")
    type: str = Field(description="PostgreSQL data type, e.g. 'uuid' or 'text'")
    description: str | None = Field(default=None, description="Column description")
    nullable: bool = Field(default=True, description="Whether the column accepts NULL")


class TableSchema(BaseModel):
    """A table the generated SQL is allowed to reference."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Table name")
    description: str | None = Field(default=None, description="Table description")
    columns: tuple[ColumnSchema, ...] = Field(
        default_factory=tuple, description="Ordered column definitions"
    )


class GlossaryTerm(BaseModel):
    """A business term and what it stands for."""

    model_config = ConfigDict(frozen=True)

    term: str = Field(min_length=1)
    expansion: str | None = Field(default=None, description="Acronym expansion")
    description: str | None = Field(default=None, description="Longer definition")

    @property
    def meaning(self) -> str:
        """Expansion when present, otherwise the description."""
        return self.expansion or self.description or ""


class PromptPattern(BaseModel):
    """A natural-language pattern paired with the SQL it should produce."""

    model_config = ConfigDict(frozen=True)

    pattern: str = Field(min_length=1, description="Prompt pattern, may contain {placeholders}")
    template: str = Field(min_length=1, description="SQL template for the pattern")


class SchemaCatalog(BaseModel):
    """Complete catalog handed to the context builder."""

    model_config = ConfigDict(frozen=True)

    tables: tuple[TableSchema, ...] = Field(default_factory=tuple)
    glossary: tuple[GlossaryTerm, ...] = Field(default_factory=tuple)
    prompt_patterns: tuple[PromptPattern, ...] = Field(default_factory=tuple)
