"""Unit tests for the pure validate_sql() function and its helpers.

Tests cover forbidden keywords, statement type, semicolon handling,
injection signatures, advisory warnings, ensure_limit and
sanitize_identifier.
"""

from __future__ import annotations

import pytest
from entities.query_validator import ensure_limit, sanitize_identifier, validate_sql
from entities.query_validator.validator import normalize_sql

# ── Valid queries ─────────────────────────────────────────────────────


class TestValidQueries:
    """Queries that should pass all validation checks."""

    def test_select_one(self) -> None:
        result = validate_sql("SELECT 1")

        assert result.valid is True
        assert result.errors == []
        assert result.sanitized_sql == "SELECT 1"

    def test_select_with_where_and_limit_has_no_warnings(self) -> None:
        sql = "SELECT * FROM claims WHERE status='DENIED' LIMIT 50"
        result = validate_sql(sql)

        assert result.valid is True
        assert result.warnings == []
        assert result.sanitized_sql == sql

    def test_join_with_group_by(self) -> None:
        sql = (
            "SELECT p.specialty, COUNT(*) AS n "
            "FROM claims c JOIN provider_records p ON p.id = c.provider_id "
            "WHERE c.status = 'PAID' GROUP BY p.specialty ORDER BY n DESC LIMIT 10"
        )
        assert validate_sql(sql).valid is True

    def test_lowercase_select_is_accepted(self) -> None:
        assert validate_sql("select id from members where plan = 'PPO' limit 5").valid is True

    def test_sanitized_sql_is_trimmed_but_not_normalized(self) -> None:
        sql = "  \n select  id\n  from members where plan = 'HMO'  "
        result = validate_sql(sql)

        assert result.valid is True
        assert result.sanitized_sql == "select  id\n  from members where plan = 'HMO'"

    def test_single_trailing_semicolon_is_tolerated(self) -> None:
        result = validate_sql("SELECT 1;")

        assert result.valid is True
        assert result.sanitized_sql == "SELECT 1;"


# ── Forbidden keywords ────────────────────────────────────────────────


class TestForbiddenKeywords:
    """Statement-modifying keywords are rejected wherever they appear."""

    @pytest.mark.parametrize(
        "keyword",
        [
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
        ],
    )
    @pytest.mark.parametrize("transform", [str.upper, str.lower, str.capitalize])
    def test_keyword_in_any_case_is_rejected(self, keyword: str, transform) -> None:
        sql = f"SELECT * FROM claims WHERE note = '{transform(keyword)}' LIMIT 1"
        result = validate_sql(sql)

        assert result.valid is False
        assert f"Forbidden keyword detected: {keyword}" in result.errors
        assert result.sanitized_sql is None

    def test_delete_statement_reports_keyword_and_statement_type(self) -> None:
        result = validate_sql("DELETE FROM claims")

        assert result.valid is False
        assert "Forbidden keyword detected: DELETE" in result.errors
        assert "Query must start with SELECT" in result.errors

    def test_update_statement_is_rejected(self) -> None:
        assert validate_sql("UPDATE x SET y=1").valid is False

    def test_keyword_inside_string_literal_is_still_rejected(self) -> None:
        """Substring matching over-rejects; that is accepted behaviour."""
        result = validate_sql("SELECT * FROM notes WHERE body LIKE '%update%' LIMIT 10")

        assert result.valid is False
        assert "Forbidden keyword detected: UPDATE" in result.errors

    def test_keyword_inside_identifier_is_still_rejected(self) -> None:
        result = validate_sql("SELECT created_at FROM notes WHERE member_id = 'x' LIMIT 1")

        assert result.valid is False
        assert "Forbidden keyword detected: CREATE" in result.errors

    def test_execute_reports_both_exec_and_execute(self) -> None:
        result = validate_sql("EXECUTE proc")

        assert "Forbidden keyword detected: EXEC" in result.errors
        assert "Forbidden keyword detected: EXECUTE" in result.errors

    def test_line_comment_is_rejected(self) -> None:
        result = validate_sql("SELECT * FROM members -- WHERE plan = 'PPO'")

        assert result.valid is False
        assert "Forbidden keyword detected: --" in result.errors


# ── Statement shape ───────────────────────────────────────────────────


class TestStatementShape:
    """SELECT-first and single-statement rules."""

    @pytest.mark.parametrize(
        "sql",
        ["WITH x AS (SELECT 1) SELECT * FROM x", "SHOW tables", "VALUES (1)", ""],
    )
    def test_non_select_is_rejected(self, sql: str) -> None:
        result = validate_sql(sql)

        assert result.valid is False
        assert "Query must start with SELECT" in result.errors

    def test_leading_whitespace_before_select_is_allowed(self) -> None:
        assert validate_sql("\n\t  SELECT 1").valid is True

    def test_stacked_selects_are_rejected(self) -> None:
        result = validate_sql("SELECT 1; SELECT 2")

        assert result.valid is False
        assert "Forbidden keyword detected: ;" in result.errors
        assert "Multiple SQL statements not allowed" in result.errors

    def test_two_trailing_semicolons_are_rejected(self) -> None:
        result = validate_sql("SELECT 1;;")

        assert result.valid is False
        assert "Multiple SQL statements not allowed" in result.errors

    def test_semicolon_followed_by_whitespace_counts_as_trailing(self) -> None:
        assert validate_sql("SELECT 1;   \n").valid is True


# ── Injection patterns ────────────────────────────────────────────────


class TestInjectionPatterns:
    """Classic injection signatures are rejected."""

    @pytest.mark.parametrize(
        "sql",
        [
            "SELECT * FROM x WHERE '1'='1' OR '1'='1'",
            "SELECT * FROM members WHERE last_name = '' OR 1=1",
            "SELECT * FROM members WHERE last_name = '' or '1' = '1' LIMIT 1",
            "SELECT * FROM a UNION SELECT * FROM b",
            "SELECT * FROM a union   select * FROM b",
            "SELECT xp_cmdshell FROM members WHERE id = 'x' LIMIT 1",
        ],
    )
    def test_injection_is_rejected(self, sql: str) -> None:
        result = validate_sql(sql)

        assert result.valid is False
        assert "Potential SQL injection pattern detected" in result.errors

    def test_injection_reported_once(self) -> None:
        result = validate_sql("SELECT * FROM a WHERE x = '' OR 1=1 UNION SELECT * FROM b")

        assert result.errors.count("Potential SQL injection pattern detected") == 1

    def test_union_all_is_not_an_injection_signature(self) -> None:
        result = validate_sql("SELECT id FROM a WHERE x = 1 UNION ALL SELECT id FROM b WHERE y = 2 LIMIT 5")

        assert result.valid is True


# ── Warnings ──────────────────────────────────────────────────────────


class TestWarnings:
    """Advisory checks never reject."""

    def test_missing_limit_warns(self) -> None:
        result = validate_sql("SELECT * FROM claims WHERE status = 'PAID'")

        assert result.valid is True
        assert result.warnings == ["No LIMIT clause - may return large result set"]

    def test_missing_where_warns(self) -> None:
        result = validate_sql("SELECT * FROM claims LIMIT 10")

        assert result.valid is True
        assert result.warnings == ["No WHERE clause - query will return all rows"]

    def test_both_warnings_in_order(self) -> None:
        result = validate_sql("SELECT * FROM claims")

        assert result.warnings == [
            "No LIMIT clause - may return large result set",
            "No WHERE clause - query will return all rows",
        ]

    def test_no_from_means_no_where_warning(self) -> None:
        assert "No WHERE clause - query will return all rows" not in validate_sql("SELECT 1").warnings

    def test_warnings_are_reported_for_rejected_queries_too(self) -> None:
        result = validate_sql("DELETE FROM claims")

        assert result.valid is False
        assert "No WHERE clause - query will return all rows" in result.warnings


# ── Normalization ─────────────────────────────────────────────────────


class TestNormalizeSql:
    def test_collapses_whitespace_and_uppercases(self) -> None:
        assert normalize_sql("  select\n\t*   from  x ") == "SELECT * FROM X"


# ── ensure_limit ──────────────────────────────────────────────────────


class TestEnsureLimit:
    """ensure_limit appends a LIMIT only when none is present."""

    def test_appends_default_limit(self) -> None:
        assert ensure_limit("SELECT * FROM claims") == "SELECT * FROM claims LIMIT 100"

    def test_custom_limit(self) -> None:
        assert ensure_limit("SELECT * FROM claims", 25) == "SELECT * FROM claims LIMIT 25"

    def test_strips_trailing_semicolon(self) -> None:
        assert ensure_limit("SELECT * FROM claims;") == "SELECT * FROM claims LIMIT 100"

    def test_existing_limit_is_untouched(self) -> None:
        sql = "SELECT * FROM claims limit 5"
        assert ensure_limit(sql) == sql

    @pytest.mark.parametrize(
        "sql",
        [
            "SELECT 1",
            "SELECT * FROM claims;",
            "  SELECT * FROM claims WHERE status = 'DENIED'  ",
            "SELECT * FROM claims LIMIT 3",
        ],
    )
    def test_is_idempotent(self, sql: str) -> None:
        once = ensure_limit(sql)
        assert ensure_limit(once) == once

    def test_result_still_validates(self) -> None:
        limited = ensure_limit("SELECT * FROM claims WHERE status = 'PAID';")

        assert validate_sql(limited).valid is True
        assert validate_sql(limited).warnings == []


# ── sanitize_identifier ───────────────────────────────────────────────


class TestSanitizeIdentifier:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("claims", "claims"),
            ("public.claims", "public.claims"),
            ("denial_reason", "denial_reason"),
            ("claims; DROP TABLE members", "claimsDROPTABLEmembers"),
            ('"members"', "members"),
            ("col-1 ", "col1"),
            ("", ""),
        ],
    )
    def test_strips_disallowed_characters(self, raw: str, expected: str) -> None:
        assert sanitize_identifier(raw) == expected
