"""Claim Logging — one log line per claim decision, machine-readable in production.

Invariants:
    - Each line names its level, logger and time (UTC, ISO-8601)
    - Claim context travels as logging `extra`: uid, nickname, error_code, attempt, path;
      only keys that were actually set appear in the output
    - Exceptions attached with exc_info are rendered into the line, never into a response
    - setup_logging is idempotent: re-running the app lifespan replaces its own
      handler instead of stacking duplicates

Design Decisions:
    - LOG_FORMAT=json for aggregators, LOG_FORMAT=text for a terminal
    - Values that JSON cannot encode (datetimes, enums) are rendered with str()
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = ("uid", "nickname", "error_code", "attempt", "path")
_TEXT_LAYOUT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Render a record, plus any claim context, as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, record.__dict__[key]) for key in _EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class _ServiceHandler(logging.StreamHandler):
    """Marker type so setup_logging can find the handler it installed."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _ServiceHandler)]:
        root.removeHandler(existing)

    handler = _ServiceHandler()
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_LAYOUT),
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
