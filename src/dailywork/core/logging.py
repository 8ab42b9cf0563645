"""JSON logging for the DailyWork service.

Each record is rendered as one JSON object per line. The request id and the
ids of the user, task and project a call touched sit at fixed top-level keys
so log queries can filter on them; any other ``extra`` lands under
``context``.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

from .config import Settings
from .correlation import NO_REQUEST, get_request_id

ENTITY_KEYS = ("user_id", "task_id", "project_id")

_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "request_id"}

_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class JsonLogFormatter(logging.Formatter):
    def __init__(self, *, service: str, environment: str) -> None:
        super().__init__()
        self._static = {"service": service, "environment": environment}

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **self._static,
            "request_id": getattr(record, "request_id", NO_REQUEST),
        }
        context: dict[str, Any] = {}
        for key, value in vars(record).items():
            if key in _RECORD_ATTRS:
                continue
            if key in ENTITY_KEYS:
                entry[key] = value
            else:
                context[key] = value
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp records with the id of the request being served."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.request_id = get_request_id()
        return True


def configure_logging(settings: Settings) -> None:
    """Route the root, uvicorn and SQLAlchemy loggers to one JSON stdout handler."""
    level = logging.getLevelNamesMapping().get(settings.log_level, logging.INFO)
    loggers: dict[str, dict[str, Any]] = {
        name: {"handlers": ["stdout"], "level": level, "propagate": False} for name in _SERVER_LOGGERS
    }
    # Statement logging follows db_echo only; it propagates to the root handler.
    loggers["sqlalchemy.engine"] = {"level": logging.INFO if settings.db_echo else logging.WARNING}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": JsonLogFormatter,
                    "service": settings.project_name,
                    "environment": settings.environment,
                }
            },
            "filters": {"request_id": {"()": RequestIdFilter}},
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "json",
                    "filters": ["request_id"],
                }
            },
            "root": {"handlers": ["stdout"], "level": level},
            "loggers": loggers,
        }
    )
    logging.captureWarnings(True)


__all__ = ["ENTITY_KEYS", "JsonLogFormatter", "RequestIdFilter", "configure_logging"]
