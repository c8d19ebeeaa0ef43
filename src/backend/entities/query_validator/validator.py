"""Pure query validation logic.

Decides whether LLM-authored SQL may run against the database. The
checks are plain keyword and regex scans rather than a parsed AST, so a
safe query that contains a forbidden substring (``'%update%'``,
``created_at``) is rejected. No I/O, no framework dependencies.
"""

from __future__ import annotations

import logging
import re

from models import ValidationResult

logger = logging.getLogger(__name__)

# Matched as substrings of the uppercased, whitespace-collapsed query.
FORBIDDEN_KEYWORDS = [
    "DROP",
    "DELETE",
    "TRUNCATE",
    "ALTER",
    "CREATE",
    "GRANT",
    "REVOKE",
    "INSERT",
    "UPDATE",
    "EXEC",
    "EXECUTE",
    "--",  # Comment truncation
    ";",  # Statement chaining
]

# SQL injection patterns to detect, matched against the raw query
SQL_INJECTION_PATTERNS = [
    re.compile(r"'\s*OR\s*'1'\s*=\s*'1", re.IGNORECASE),  # ' OR '1'='1
    re.compile(r"'\s*OR\s*1\s*=\s*1", re.IGNORECASE),  # ' OR 1=1
    re.compile(r"UNION\s+SELECT", re.IGNORECASE),  # UNION injection
    re.compile(r";\s*DROP", re.IGNORECASE),  # Stacked DROP
    re.compile(r"xp_cmdshell", re.IGNORECASE),  # SQL Server command execution
]

DEFAULT_LIMIT = 100

_WHITESPACE_RUN = re.compile(r"\s+")
_IDENTIFIER_DISALLOWED = re.compile(r"[^A-Za-z0-9_.]")

ERROR_NOT_SELECT = "Query must start with SELECT"
ERROR_MULTIPLE_STATEMENTS = "Multiple SQL statements not allowed"
ERROR_INJECTION = "Potential SQL injection pattern detected"
WARNING_NO_LIMIT = "No LIMIT clause - may return large result set"
WARNING_NO_WHERE = "No WHERE clause - query will return all rows"


def normalize_sql(sql: str) -> str:
    """Return an uppercased, whitespace-collapsed copy used only for scanning."""
    return _WHITESPACE_RUN.sub(" ", sql.strip().upper())


def _check_forbidden_keywords(normalized: str) -> list[str]:
    """Scan the normalized query for statement-modifying or chaining tokens.

    A single trailing semicolon is tolerated; any other semicolon is
    reported.
    """
    errors: list[str] = []
    scanned = normalized[:-1] if normalized.endswith(";") else normalized

    for keyword in FORBIDDEN_KEYWORDS:
        if keyword in scanned:
            errors.append(f"Forbidden keyword detected: {keyword}")

    return errors


def _check_single_statement(sql: str) -> list[str]:
    """Reject stacked statements: more than one ``;`` or one that is not final."""
    semicolons = sql.count(";")
    if semicolons > 1 or (semicolons == 1 and not sql.strip().endswith(";")):
        return [ERROR_MULTIPLE_STATEMENTS]
    return []


def _check_injection(sql: str) -> list[str]:
    for pattern in SQL_INJECTION_PATTERNS:
        if pattern.search(sql):
            return [ERROR_INJECTION]
    return []


def _collect_warnings(normalized: str) -> list[str]:
    warnings: list[str] = []

    if "LIMIT" not in normalized:
        warnings.append(WARNING_NO_LIMIT)

    if "FROM" in normalized and "WHERE" not in normalized:
        warnings.append(WARNING_NO_WHERE)

    return warnings


def validate_sql(sql: str) -> ValidationResult:
    """Validate a SQL string for read-only, single-statement safety.

    Errors are collected from every check rather than stopping at the
    first, so callers see the complete list of reasons.

    Args:
        sql: Raw SQL, typically authored by an LLM.

    Returns:
        ``ValidationResult`` whose ``sanitized_sql`` is the trimmed input
        when, and only when, no errors were found.
    """
    logger.info("Validating query: %s", sql[:200] if sql else "(empty)")

    normalized = normalize_sql(sql)

    errors = _check_forbidden_keywords(normalized)
    if not normalized.startswith("SELECT"):
        errors.append(ERROR_NOT_SELECT)
    warnings = _collect_warnings(normalized)
    errors.extend(_check_single_statement(sql))
    errors.extend(_check_injection(sql))

    valid = not errors

    logger.info(
        "Validation complete: valid=%s, errors=%d, warnings=%d",
        valid,
        len(errors),
        len(warnings),
    )

    return ValidationResult(
        valid=valid,
        errors=errors,
        warnings=warnings,
        sanitized_sql=sql.strip() if valid else None,
    )


def ensure_limit(sql: str, default_limit: int = DEFAULT_LIMIT) -> str:
    """Append ``LIMIT <default_limit>`` when the query has no LIMIT clause.

    Assumes ``sql`` already passed :func:`validate_sql`. A single trailing
    semicolon is removed before the clause is appended.
    """
    if "LIMIT" in sql.upper():
        return sql
    clean_sql = sql.strip()
    if clean_sql.endswith(";"):
        clean_sql = clean_sql[:-1].rstrip()
    return f"{clean_sql} LIMIT {default_limit}"


def sanitize_identifier(identifier: str) -> str:
    """Strip everything but letters, digits, ``_`` and ``.`` from an identifier.

    For table/column names only. Never use it to embed values into SQL.
    """
    return _IDENTIFIER_DISALLOWED.sub("", identifier)
