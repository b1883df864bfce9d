"""Raw SQL execution on the shared connection."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Iterable, List, Optional, Union

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from werkzeug.security import generate_password_hash

from ..services.logging import log_event
from ..utils.validators import numeric_values_to_numbers
from .session import Database


JSON_MARKER = "JSON:"
_WHITESPACE = re.compile(r"\s+")

QueryResult = Union[List[Dict[str, Any]], Dict[str, Any]]


def decode_json_values(row: Dict[str, Any]) -> Dict[str, Any]:
    for key, val in row.items():
        if isinstance(val, str) and val.startswith(JSON_MARKER):
            try:
                row[key] = json.loads(val[len(JSON_MARKER):])
            except ValueError:
                pass
    return row


def _error_message(exc: SQLAlchemyError) -> str:
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return f"{type(exc.orig).__name__}: {exc.orig}"
    return f"{type(exc).__name__}: {exc}"


class QueryExecutor:
    """Runs one SQL statement with named parameters and never raises.

    SELECT statements give a list of row dicts, other statements give
    ``{"changes": n, "lastInsertRowid": id}`` and failures give
    ``{"error": message}``. Callers check for ``error`` first.
    """

    def __init__(
        self,
        database: Database,
        *,
        password_fields: Iterable[str] = ("password",),
        log_queries: bool = False,
    ) -> None:
        self._database = database
        self._password_fields = tuple(password_fields)
        self.log_queries = log_queries

    def _prepare(self, parameters: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        params = numeric_values_to_numbers(parameters)
        for name in self._password_fields:
            if params.get(name) is not None:
                params[name] = generate_password_hash(str(params[name]))
        return params

    def execute(
        self,
        sql: str,
        parameters: Optional[Dict[str, Any]] = None,
        method: Optional[str] = None,
        route: Optional[str] = None,
    ) -> QueryResult:
        sql = _WHITESPACE.sub(" ", sql).strip()
        params = self._prepare(parameters)
        is_select = sql[:6].upper() == "SELECT"

        result: QueryResult
        with self._database.lock:
            conn = self._database.connection
            try:
                cursor = conn.execute(text(sql), params)
                if is_select:
                    result = [decode_json_values(dict(r)) for r in cursor.mappings().all()]
                else:
                    result = {"changes": cursor.rowcount, "lastInsertRowid": cursor.lastrowid}
                conn.commit()
            except SQLAlchemyError as exc:
                conn.rollback()
                result = {"error": _error_message(exc)}

        if self.log_queries:
            failed = isinstance(result, dict) and "error" in result
            log_event(
                "warning" if failed else "debug",
                "db.query",
                method=method,
                route=route,
                sql=sql,
                parameters=params,
                result={"rows": len(result)} if isinstance(result, list) else result,
            )
        return result
