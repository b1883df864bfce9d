import re
from typing import Any, Dict, Optional


NUMERIC_STRING = re.compile(r"^-?\d+(\.\d+)?$")


def coerce_numeric(value: Any) -> Any:
    """Turn numeric-looking strings ("12", "-3.5") into numbers, leave the rest alone."""
    if isinstance(value, str) and NUMERIC_STRING.match(value.strip()):
        v = value.strip()
        return float(v) if "." in v else int(v)
    return value


def numeric_values_to_numbers(parameters: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {k: coerce_numeric(v) for k, v in (parameters or {}).items()}


def ensure_positive_int(value: Any, field: str) -> int:
    value = coerce_numeric(value)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or int(value) != value:
        raise ValueError(f"{field} must be a whole number")
    if value <= 0:
        raise ValueError(f"{field} must be > 0")
    return int(value)
