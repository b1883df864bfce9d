from sqlalchemy import Column
from sqlalchemy.orm import declarative_base


Base = declarative_base()


def multilingual(column_type, **kwargs) -> Column:
    """Column holding a JSON object keyed by language code, e.g. {"en": "Fox", "no": "Rev"}."""
    info = dict(kwargs.pop("info", None) or {})
    info["multilingual"] = True
    return Column(column_type, info=info, **kwargs)
