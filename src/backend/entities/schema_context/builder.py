"""Schema context rendering for SQL generation prompts.

``SchemaContextBuilder`` turns a ``SchemaCatalog`` into the plain-text
block the LLM sees, plus a list of example prompt/SQL pairs. Rendering is
pure: the catalog is loaded once and never mutated.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from models import ColumnSchema, GlossaryTerm, PromptPattern, SchemaCatalog, TableSchema
from pydantic import ValidationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Built-in catalog
# ---------------------------------------------------------------------------

BUILTIN_CATALOG = SchemaCatalog(
    tables=(
        TableSchema(
            name="members",
            description="Health plan members and patients",
            columns=(
                ColumnSchema(name="id", type="uuid"),
                ColumnSchema(name="first_name", type="text"),
                ColumnSchema(name="last_name", type="text"),
                ColumnSchema(name="dob", type="date", description="Date of birth"),
                ColumnSchema(
                    name="plan",
                    type="text",
                    description="Insurance plan type: PPO, HMO, EPO, POS, HDHP",
                ),
            ),
        ),
        TableSchema(
            name="provider_records",
            description="Healthcare providers (doctors, hospitals, clinics)",
            columns=(
                ColumnSchema(name="id", type="uuid"),
                ColumnSchema(name="npi", type="text", description="National Provider Identifier"),
                ColumnSchema(name="name", type="text"),
                ColumnSchema(name="specialty", type="text", description="Medical specialty"),
            ),
        ),
        TableSchema(
            name="claims",
            description="Medical claims for services rendered",
            columns=(
                ColumnSchema(name="id", type="uuid"),
                ColumnSchema(name="member_id", type="uuid"),
                ColumnSchema(name="provider_id", type="uuid"),
                ColumnSchema(name="dos", type="date", description="Date of service"),
                ColumnSchema(
                    name="cpt", type="text", description="Current Procedural Terminology code"
                ),
                ColumnSchema(
                    name="charge_cents", type="integer", description="Amount charged in cents"
                ),
                ColumnSchema(
                    name="allowed_cents",
                    type="integer",
                    description="Amount allowed by insurance in cents",
                ),
                ColumnSchema(
                    name="status", type="text", description="Claim status: PAID, DENIED, PENDING"
                ),
                ColumnSchema(
                    name="denial_reason", type="text", description="Reason for claim denial"
                ),
            ),
        ),
        TableSchema(
            name="notes",
            description="Case management notes for members",
            columns=(
                ColumnSchema(name="id", type="uuid"),
                ColumnSchema(name="member_id", type="uuid"),
                ColumnSchema(name="created_at", type="timestamptz"),
                ColumnSchema(name="body", type="text", description="Note content"),
            ),
        ),
    ),
    glossary=(
        GlossaryTerm(term="PA", expansion="Prior Authorization"),
        GlossaryTerm(
            term="step therapy",
            description="Insurance requirement to try lower-cost drugs first",
        ),
        GlossaryTerm(
            term="allowed amount",
            description="Maximum amount insurance will pay for a service",
        ),
    ),
    prompt_patterns=(
        PromptPattern(
            pattern="top {n} denial reasons",
            template=(
                "SELECT denial_reason, COUNT(*) as count FROM claims "
                "WHERE status = 'DENIED' GROUP BY denial_reason "
                "ORDER BY count DESC LIMIT {n}"
            ),
        ),
    ),
)


# ---------------------------------------------------------------------------
# Config loader
# ---------------------------------------------------------------------------


def load_schema_catalog(path: Path) -> SchemaCatalog:
    """Load a schema catalog from a JSON file, falling back to the built-in one.

    Never raises: a missing, unreadable, malformed, or invalid file is
    logged and replaced with ``BUILTIN_CATALOG``.

    Args:
        path: Filesystem path to a JSON object with ``tables``,
            ``glossary`` and ``prompt_patterns`` keys.

    Returns:
        The loaded catalog, or the built-in catalog on any failure.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not read schema catalog %s (%s), using defaults", path, exc)
        return BUILTIN_CATALOG

    try:
        catalog = SchemaCatalog.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Malformed schema catalog %s (%s), using defaults", path, exc)
        return BUILTIN_CATALOG

    if not catalog.tables:
        logger.warning("Schema catalog %s defines no tables, using defaults", path)
        return BUILTIN_CATALOG

    logger.info(
        "Loaded schema catalog %s: %d tables, %d glossary terms, %d examples",
        path,
        len(catalog.tables),
        len(catalog.glossary),
        len(catalog.prompt_patterns),
    )
    return catalog


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class SchemaContextBuilder:
    """Renders a ``SchemaCatalog`` into prompt-ready text.

    Args:
        catalog: The catalog to render. Defaults to ``BUILTIN_CATALOG``.
    """

    def __init__(self, catalog: SchemaCatalog = BUILTIN_CATALOG) -> None:
        self._catalog = catalog

    @classmethod
    def from_path(cls, path: Path) -> SchemaContextBuilder:
        """Build from a JSON catalog file, falling back to the built-in catalog."""
        return cls(load_schema_catalog(path))

    @property
    def catalog(self) -> SchemaCatalog:
        return self._catalog

    @property
    def table_names(self) -> list[str]:
        return [table.name for table in self._catalog.tables]

    def build_context(self) -> str:
        """Render tables and glossary as a ``DATABASE SCHEMA`` text block."""
        parts = ["DATABASE SCHEMA:\n\n"]

        for table in self._catalog.tables:
            parts.append(f"TABLE: {table.name}\n")
            if table.description:
                parts.append(f"Description: {table.description}\n")
            parts.append("Columns:\n")
            for column in table.columns:
                line = f"  - {column.name} ({column.type})"
                if column.description:
                    line += f" - {column.description}"
                parts.append(line + "\n")
            parts.append("\n")

        if self._catalog.glossary:
            parts.append("BUSINESS GLOSSARY:\n\n")
            for term in self._catalog.glossary:
                parts.append(f"{term.term}: {term.meaning}\n")
            parts.append("\n")

        return "".join(parts)

    def get_examples(self) -> list[str]:
        """Return one ``Prompt: "..."\\nSQL: ...`` string per prompt pattern."""
        return [
            f'Prompt: "{example.pattern}"\nSQL: {example.template}'
            for example in self._catalog.prompt_patterns
        ]
