"""Structured logging configuration.

Records carry their key/value context in ``record.structured_fields``
(pass ``extra={"structured_fields": {...}}`` to any stdlib logger call).
Two formatters render those fields:

- ``TextFormatter``: ``2026-01-01 12:00:00 [INFO] [services.resources] msg key=value ...``
- ``JSONFormatter``: one JSON object per line, fields merged at top level.

Usage:
    from app.logging_config import configure_logging

    configure_logging(level="INFO", log_format="json")
"""

import json
import logging
import logging.config
import time
from datetime import datetime, timezone
from typing import Any

STRUCTURED_FIELDS_ATTR = "structured_fields"


class LogFields(dict):
    """Per-call structured field accumulator.

    Each operation creates its own instance, extends it as it learns more
    and hands it to exactly one log call. Nothing is shared between calls.
    """

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self._started = time.perf_counter()

    def extend(self, **fields: Any) -> "LogFields":
        self.update(fields)
        return self

    def with_duration(self) -> "LogFields":
        """Record elapsed milliseconds since the accumulator was created."""
        self["duration_ms"] = round((time.perf_counter() - self._started) * 1000, 3)
        return self

    def as_extra(self) -> dict[str, dict[str, Any]]:
        return {STRUCTURED_FIELDS_ATTR: dict(self)}


def _record_fields(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, STRUCTURED_FIELDS_ATTR, None) or {}


class JSONFormatter(logging.Formatter):
    """JSON log formatter with structured field support."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(_record_fields(record))
        if record.exc_info:
            payload["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else "Unknown",
                "message": str(record.exc_info[1]) if record.exc_info[1] else "",
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter with structured field support."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        parts = [timestamp, f"[{record.levelname}]", f"[{record.name}]", record.getMessage()]
        fields = _record_fields(record)
        if fields:
            parts.append(" ".join(f"{key}={value}" for key, value in fields.items()))
        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def build_logging_config(level: str = "INFO", log_format: str = "text") -> dict[str, Any]:
    """Build a ``dictConfig`` mapping for the given level and format."""
    formatter = "json" if log_format == "json" else "text"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "text": {"()": TextFormatter},
            "json": {"()": JSONFormatter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "app": {"level": level, "handlers": ["console"], "propagate": False},
            "uvicorn.error": {"level": level, "handlers": ["console"], "propagate": False},
            # Replaced by the request log middleware
            "uvicorn.access": {"level": "WARNING", "handlers": ["console"], "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    }


def configure_logging(level: str = "INFO", log_format: str = "text") -> None:
    """Apply logging configuration. Call once at process start."""
    logging.config.dictConfig(build_logging_config(level, log_format))
