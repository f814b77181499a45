# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Structured JSON logging — one JSON line per record.

Context travels through ``extra=``; only the keys in CONTEXT_FIELDS are
copied into the line, so a room id or host can be attached to any record:

    logger.info("Room counted", extra={"host": host, "room_id": room_id})
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from matrix_badge.core.config import settings

CONTEXT_FIELDS: tuple[str, ...] = ("request_id", "host", "room_id", "kind", "members")

# httpx logs every request at INFO, including query strings with access tokens.
NOISY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": settings.SERVICE_NAME,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                line[key] = value
        if record.exc_info and record.exc_info[1]:
            line["error"] = str(record.exc_info[1])
            line["error_type"] = type(record.exc_info[1]).__name__
        return json.dumps(line, default=str)


def configure_logging() -> None:
    """Quiet third-party loggers. Called once from the app lifespan."""
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger writing JSON lines to stdout."""
    logger = logging.getLogger(name or settings.SERVICE_NAME)
    if not logger.handlers:
        logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    return logger
