"""
Hasura ``run_sql`` client for executing validated queries.

Hasura answers ``run_sql`` with a header-plus-rows table::

    {"result_type": "TuplesOk", "result": [["id", "name"], ["1", "Alice"]]}

``HasuraExecutor`` zips that into row dictionaries and times the call.
"""

import logging
import time
from typing import Any

import httpx
from entities.shared.errors import ExecutionError
from models import ExecutionResult

logger = logging.getLogger(__name__)

CONNECTION_PROBE_SQL = "SELECT 1"


def rows_from_tabular(result: Any) -> list[dict[str, Any]]:  # noqa: ANN401
    """Convert a ``run_sql`` result table into a list of row dicts.

    Row 0 holds the column names; every later row is aligned to it by
    position. Anything that is not a non-empty list yields no rows.

    Raises:
        ExecutionError: If a data row is not a list.

    Args:
        result: The ``result`` field of a ``run_sql`` response.

    Returns:
        One dictionary per data row.
    """
    if not isinstance(result, list) or not result:
        return []

    column_names, *data_rows = result
    if not isinstance(column_names, list):
        return []

    rows: list[dict[str, Any]] = []
    for row in data_rows:
        if not isinstance(row, list):
            raise ExecutionError("Unrecognized run_sql result row")
        rows.append(dict(zip(column_names, row, strict=False)))
    return rows


class HasuraExecutor:
    """
    Executes read-only SQL through Hasura's schema API.

    The HTTP client is created and closed by the caller (the FastAPI
    lifespan) and must carry the base URL, admin-secret header and timeout.

    Usage:
        async with httpx.AsyncClient(base_url=endpoint, headers=headers) as http:
            executor = HasuraExecutor(http)
            result = await executor.execute_sql("SELECT * FROM claims LIMIT 10")
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        run_sql_path: str = "/v2/query",
        source: str = "default",
        read_only: bool = True,
    ) -> None:
        """
        Initialize the executor.

        Args:
            http_client: Open client pointed at the Hasura base URL.
            run_sql_path: Path of the endpoint accepting ``run_sql``.
            source: Hasura database source name.
            read_only: Ask Hasura to run the SQL in a read-only transaction.
        """
        self._http = http_client
        self.run_sql_path = run_sql_path
        self.source = source
        self.read_only = read_only

    def _build_payload(self, sql: str) -> dict[str, Any]:
        return {
            "type": "run_sql",
            "args": {
                "source": self.source,
                "sql": sql,
                "read_only": self.read_only,
            },
        }

    async def _post(self, sql: str) -> dict[str, Any]:
        try:
            response = await self._http.post(self.run_sql_path, json=self._build_payload(sql))
        except httpx.HTTPError as exc:
            raise ExecutionError(f"Query execution failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise ExecutionError(
                f"Query execution failed: HTTP {response.status_code} with non-JSON body"
            ) from exc

        if response.is_error:
            detail = body.get("error") if isinstance(body, dict) else None
            raise ExecutionError(
                f"Query execution failed: HTTP {response.status_code}: {detail or body}"
            )

        if not isinstance(body, dict) or "result_type" not in body:
            raise ExecutionError("Invalid response from Hasura")

        return body

    async def execute_sql(self, sql: str) -> ExecutionResult:
        """
        Execute a SQL query and return its rows.

        Args:
            sql: SQL that already passed the query validator.

        Returns:
            ``ExecutionResult`` with rows, row count and elapsed milliseconds.

        Raises:
            ExecutionError: On transport failure, a Hasura error, or a
                response without ``result_type``.
        """
        logger.info("Executing SQL query: %s", sql[:200])
        start = time.perf_counter()

        try:
            body = await self._post(sql)
            rows = rows_from_tabular(body.get("result"))
        except ExecutionError as exc:
            logger.error("Hasura execution error: %s", exc)
            raise

        execution_time_ms = int((time.perf_counter() - start) * 1000)

        logger.info(
            "Query executed successfully. Returned %d rows in %d ms.",
            len(rows),
            execution_time_ms,
        )

        return ExecutionResult(
            rows=rows,
            row_count=len(rows),
            execution_time_ms=execution_time_ms,
        )

    async def test_connection(self) -> bool:
        """Run ``SELECT 1``; return False instead of raising on failure."""
        try:
            await self.execute_sql(CONNECTION_PROBE_SQL)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Hasura connection test failed: %s", exc)
            return False
        return True
