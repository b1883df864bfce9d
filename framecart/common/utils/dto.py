from typing import Any, Dict, List


def strip_nulls(row: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in row.items() if v is not None}


def to_cart_view(rows: List[Dict[str, Any]]) -> List[Dict]:
    """Keep ITEM rows as they are; the TOTAL row is returned without its null columns."""
    return [strip_nulls(r) if r.get("itemType") == "TOTAL" else r for r in rows]
