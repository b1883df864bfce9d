"""Language projection of multilingual JSON columns."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ...config import DEFAULT_LANG, LANG_PATTERN
from ..models import Base


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    multilingual: bool = False


def _build_registry() -> Dict[str, Tuple[ColumnDescriptor, ...]]:
    registry: Dict[str, Tuple[ColumnDescriptor, ...]] = {}
    for table in Base.metadata.sorted_tables:
        registry[table.name] = tuple(
            ColumnDescriptor(c.name, bool(c.info.get("multilingual"))) for c in table.columns
        )
    return registry


# table name -> columns in schema order
TABLE_REGISTRY: Dict[str, Tuple[ColumnDescriptor, ...]] = _build_registry()


def resolve_lang(lang: Optional[str]) -> str:
    if lang and LANG_PATTERN.match(lang):
        return lang
    return DEFAULT_LANG


def known_table(table: str) -> bool:
    return table in TABLE_REGISTRY


def table_columns(table: str) -> List[str]:
    return [c.name for c in TABLE_REGISTRY.get(table, ())]


def multilingual_columns(table: str) -> List[str]:
    return [c.name for c in TABLE_REGISTRY.get(table, ()) if c.multilingual]


def is_language_aware(table: str) -> bool:
    return bool(multilingual_columns(table))


def lang_expr(column: str, lang: Optional[str], alias: Optional[str] = None) -> str:
    """COALESCE(JSON_EXTRACT(col, '$.<lang>'), JSON_EXTRACT(col, '$.en')) AS alias"""
    lang = resolve_lang(lang)
    expr = f"COALESCE(JSON_EXTRACT({column}, '$.{lang}'), JSON_EXTRACT({column}, '$.{DEFAULT_LANG}'))"
    return f"{expr} AS {alias or column.split('.')[-1]}"


def select_projection(table: str, lang: Optional[str]) -> str:
    """SELECT clause for ``table``; ``*`` unless the table has multilingual columns."""
    if not is_language_aware(table):
        return f"SELECT * FROM {table}"
    parts = [lang_expr(c.name, lang) if c.multilingual else c.name for c in TABLE_REGISTRY[table]]
    return f"SELECT {', '.join(parts)} FROM {table}"
