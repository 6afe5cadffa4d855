"""Structured Logging — one JSON object per ledger log line.

Invariants:
    - timestamp is the moment the record was created, not when it was formatted
    - Only whitelisted ledger extras are emitted; anything else passed via extra= is dropped
    - Extras that json cannot encode (enums, datetimes) are rendered with str()

Design Decisions:
    - stdlib logging + a small Formatter; no logging dependency
    - SQLAlchemy engine chatter held at WARNING so ledger lines stay readable
"""

import logging
import json
from datetime import datetime, timezone

LEDGER_EXTRAS = (
    "order_id", "item_id", "caller", "amount",
    "event_type", "error_code", "path",
)

_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite")


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({
            key: getattr(record, key)
            for key in LEDGER_EXTRAS
            if getattr(record, key, None) is not None
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install a single root handler; returns it so callers can swap its stream."""
    handler = logging.StreamHandler()
    handler.setFormatter(
        JSONFormatter() if fmt == "json"
        else logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s"),
    )
    logging.root.handlers = [handler]
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
