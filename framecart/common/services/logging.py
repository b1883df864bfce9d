import json
import logging
from datetime import datetime, timezone


_event_logger = logging.getLogger("framecart.events")


def log_event(level: str, event: str, **fields) -> None:
    """Emit one JSON line per event through the ``framecart.events`` logger."""
    levelno = logging.getLevelName(level.upper())
    if not isinstance(levelno, int):
        levelno = logging.INFO
    if not _event_logger.isEnabledFor(levelno):
        return
    payload = {
        "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "level": level.lower(),
        "event": event,
    }
    payload.update(fields or {})
    _event_logger.log(levelno, json.dumps(payload, ensure_ascii=False, default=str))
