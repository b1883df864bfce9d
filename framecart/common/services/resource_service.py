"""Generic table-to-SQL mapping behind the REST routes."""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional, Tuple

from ..db.executor import JSON_MARKER, QueryExecutor, QueryResult
from ..utils.language import known_table, multilingual_columns, select_projection, table_columns
from .rest_search import RestSearch

# written only by FrameCartService
CART_TABLES = ("orders", "orderLines")


def _language_object(value: str) -> Dict[str, Any]:
    """A JSON object string as sent, anything else as the English text."""
    try:
        parsed = json.loads(value)
    except ValueError:
        parsed = None
    return parsed if isinstance(parsed, dict) else {"en": value}


class ResourceService:
    """Create/list/read/update/delete for any table of the schema.

    Table and column names are checked against the model registry before
    they are put into SQL text; values always travel as named parameters.
    """

    def __init__(
        self,
        executor: QueryExecutor,
        *,
        user_table: str = "users",
        user_role_field: str = "role",
        cart_tables: Tuple[str, ...] = CART_TABLES,
    ) -> None:
        self._executor = executor
        self._user_table = user_table.lower()
        self._user_role_field = user_role_field
        self._cart_tables = frozenset(cart_tables)

    @staticmethod
    def _unknown_table(table: str) -> Optional[Dict[str, str]]:
        if not known_table(table):
            return {"error": f"No such table: {table}"}
        return None

    def _deny_write(self, table: str) -> Optional[Dict[str, str]]:
        err = self._unknown_table(table)
        if err:
            return err
        if table in self._cart_tables:
            # prices and ownership of these rows are kept by the cart routes
            return {"error": f"Table {table} can only be changed through the cart."}
        return None

    def _prepare_body(self, table: str, body: Mapping[str, Any]) -> Tuple[Dict[str, Any], Optional[str]]:
        data = dict(body or {})
        if table.lower() == self._user_table:
            # users may not set their own role
            data.pop(self._user_role_field, None)
        data.pop("id", None)

        allowed = set(table_columns(table))
        unknown = sorted(k for k in data if k not in allowed)
        if unknown:
            return {}, f"Unknown column(s) in {table}: {', '.join(unknown)}"

        ml = set(multilingual_columns(table))
        for key, value in data.items():
            if key in ml and isinstance(value, str):
                value = _language_object(value)
            elif key in ml and value is not None and not isinstance(value, dict):
                value = {"en": value}
            if isinstance(value, (dict, list)):
                text = json.dumps(value, ensure_ascii=False)
                data[key] = text if key in ml else JSON_MARKER + text
        return data, None

    def create(self, table: str, body: Mapping[str, Any], *, method: str = "POST", route: Optional[str] = None) -> QueryResult:
        err = self._deny_write(table)
        if err:
            return err
        data, error = self._prepare_body(table, body)
        if error:
            return {"error": error}
        if data:
            cols = ", ".join(data)
            binds = ", ".join(f":{k}" for k in data)
            sql = f"INSERT INTO {table} ({cols}) VALUES ({binds})"
        else:
            sql = f"INSERT INTO {table} DEFAULT VALUES"
        return self._executor.execute(sql, data, method, route)

    def list(
        self,
        table: str,
        args: Mapping[str, Any],
        lang: Optional[str] = None,
        *,
        method: str = "GET",
        route: Optional[str] = None,
    ) -> QueryResult:
        err = self._unknown_table(table)
        if err:
            return err
        search = RestSearch.parse_request_args(args, table_columns(table))
        if search.error:
            return {"error": search.error}
        sql = f"{select_projection(table, lang)} {search.sql_where}"
        return self._executor.execute(sql, search.parameters, method, route)

    def read_one(
        self,
        table: str,
        row_id: Any,
        lang: Optional[str] = None,
        *,
        method: str = "GET",
        route: Optional[str] = None,
    ) -> QueryResult:
        err = self._unknown_table(table)
        if err:
            return err
        sql = f"{select_projection(table, lang)} WHERE id = :id"
        return self._executor.execute(sql, {"id": row_id}, method, route)

    def update(
        self,
        table: str,
        row_id: Any,
        body: Mapping[str, Any],
        *,
        method: str = "PUT",
        route: Optional[str] = None,
    ) -> QueryResult:
        err = self._deny_write(table)
        if err:
            return err
        data, error = self._prepare_body(table, body)
        if error:
            return {"error": error}
        if not data:
            return {"error": "Nothing to update."}
        assignments = ", ".join(f"{k} = :{k}" for k in data)
        sql = f"UPDATE {table} SET {assignments} WHERE id = :id"
        return self._executor.execute(sql, {"id": row_id, **data}, method, route)

    def delete(self, table: str, row_id: Any, *, method: str = "DELETE", route: Optional[str] = None) -> QueryResult:
        err = self._deny_write(table)
        if err:
            return err
        return self._executor.execute(f"DELETE FROM {table} WHERE id = :id", {"id": row_id}, method, route)
