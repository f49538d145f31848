"""Structured JSON logging for the telemetry service."""

import json
import logging
import sys
from datetime import datetime, timezone

from telemetry_api.core.settings import settings


_EXTRA_FIELDS = ("user_id", "session_id", "count", "country")


class JSONFormatter(logging.Formatter):
    """One JSON object per line, so log shippers can index request context."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        for key in _EXTRA_FIELDS:
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)
        return json.dumps(log_entry)


def get_logger(name: str) -> logging.Logger:
    """Return ``telemetry.<name>`` with a stdout JSON handler attached once."""
    logger = logging.getLogger(f"telemetry.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    return logger
