"""Structured logging configuration.

Uses standard library logging with a JSON formatter. Under GitHub Actions,
warnings and errors are additionally written as workflow commands so they
show up as annotations on the run.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

_RESERVED_LOG_RECORD_ATTRS: set[str] = {
    "args",
    "asctime",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
}


def _record_extra(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_LOG_RECORD_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """A minimal JSON formatter for logging records."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = _record_extra(record)
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def _escape_command_data(value: str) -> str:
    # Workflow command data must not contain raw newlines or '%'.
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ActionsAnnotationFormatter(logging.Formatter):
    """Render records as `::warning::` / `::error::` workflow commands."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        command = "error" if record.levelno >= logging.ERROR else "warning"
        message = record.getMessage()
        extra = _record_extra(record)
        if extra:
            details = ", ".join(f"{key}={value}" for key, value in extra.items())
            message = f"{message} ({details})"
        return f"::{command} title={record.name}::{_escape_command_data(message)}"


def configure_logging(level: str, *, github_actions: bool = False) -> None:
    """Configure root logging with structured JSON output."""

    root = logging.getLogger()

    # Remove any existing handlers to avoid duplicate logs when re-configuring.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)

    if github_actions:
        annotations = logging.StreamHandler(stream=sys.stdout)
        annotations.setLevel(logging.WARNING)
        annotations.setFormatter(ActionsAnnotationFormatter())
        root.addHandler(annotations)

    root.setLevel(level.upper())

    # Keep third-party loggers reasonably quiet unless explicitly configured.
    logging.getLogger("github").setLevel(max(root.level, logging.INFO))
    logging.getLogger("urllib3").setLevel(max(root.level, logging.INFO))
