"""Query-string search parsing into a WHERE clause."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..utils.pagination import normalize_paging
from ..utils.validators import coerce_numeric


@dataclass
class SearchResult:
    error: Optional[str] = None
    sql_where: str = ""
    parameters: Dict[str, Any] = field(default_factory=dict)


class RestSearch:
    """Turns ``?col=value&orderby=-col&limit=10&offset=20`` into SQL.

    Equality filters are joined with AND; a value containing ``*`` is
    matched with LIKE. Only known columns may be referenced.
    """

    @staticmethod
    def parse(args: Iterable[Tuple[str, Any]], columns: Iterable[str]) -> SearchResult:
        allowed = set(columns)
        conditions: List[str] = []
        parameters: Dict[str, Any] = {}
        order_by = ""
        limit: Optional[int] = None
        offset: Optional[int] = None

        for key, value in args:
            if key == "orderby":
                col = str(value).lstrip("-")
                if col not in allowed:
                    return SearchResult(error=f"Unknown orderby field: {col}")
                order_by = f" ORDER BY {col} {'DESC' if str(value).startswith('-') else 'ASC'}"
                continue
            if key in ("limit", "offset"):
                num = coerce_numeric(value)
                if not isinstance(num, int):
                    return SearchResult(error=f"{key} must be a whole number")
                if key == "limit":
                    limit = num
                else:
                    offset = num
                continue
            if key not in allowed:
                return SearchResult(error=f"Unknown search field: {key}")
            name = f"s_{key}_{len(parameters)}"
            if isinstance(value, str) and "*" in value:
                conditions.append(f"{key} LIKE :{name}")
                parameters[name] = value.replace("*", "%")
            else:
                conditions.append(f"{key} = :{name}")
                parameters[name] = value

        sql_where = (" WHERE " + " AND ".join(conditions)) if conditions else ""
        sql_where += order_by
        limit, offset = normalize_paging(limit, offset)
        if limit is not None:
            sql_where += f" LIMIT {limit}"
            if offset:
                sql_where += f" OFFSET {offset}"
        return SearchResult(sql_where=sql_where.strip(), parameters=parameters)

    @classmethod
    def parse_request_args(cls, args: Mapping[str, Any], columns: Iterable[str]) -> SearchResult:
        items = args.items(multi=True) if hasattr(args, "getlist") else args.items()
        return cls.parse(list(items), columns)
