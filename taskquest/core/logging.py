"""Structured logging configuration for the application."""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any, TextIO

from .config import settings

# ID HTTP запроса (ставит RequestLoggingMiddleware)
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Имя вызываемого инструмента (ставит ToolRegistry.call)
tool_name_var: ContextVar[str] = ContextVar("tool_name", default="")

# Атрибуты, которые есть у любого LogRecord; всё остальное пришло через extra=
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

# Сторонние логгеры, которые слишком болтливы на INFO
QUIET_LOGGERS: dict[str, int] = {
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}


def _context_fields() -> dict[str, str]:
    fields = {}
    if request_id := request_id_var.get():
        fields["request_id"] = request_id
    if tool_name := tool_name_var.get():
        fields["tool"] = tool_name
    return fields


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line.

    Пример:
    {
        "timestamp": "2026-01-22T12:00:00.123456+00:00",
        "level": "INFO",
        "logger": "taskquest.services.score",
        "message": "Points awarded",
        "request_id": "5f0c...",
        "tool": "update_task",
        "extra": {"points": 5, "total_points": 13}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context_fields(),
        }

        extra = _extra_fields(record)
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class SimpleFormatter(logging.Formatter):
    """
    Human-readable line for development.

    2026-01-22 12:00:00 | INFO     | [5f0c1a2b] <update_task> taskquest.services.score: Points awarded points=5
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%d %H:%M:%S")
        context = _context_fields()

        prefix = ""
        if "request_id" in context:
            prefix += f"[{context['request_id'][:8]}] "
        if "tool" in context:
            prefix += f"<{context['tool']}> "

        line = f"{timestamp} | {record.levelname:8} | {prefix}{record.name}: {record.getMessage()}"

        extra = _extra_fields(record)
        if extra:
            line += " " + " ".join(f"{key}={value}" for key, value in extra.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


def setup_logging(
    log_level: str = "INFO", log_format: str = "json", stream: TextIO | None = None
) -> None:
    """
    Configure the root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR, CRITICAL
        log_format: "json" (production) или "simple" (development)
        stream: Куда писать (по умолчанию stdout)
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter() if log_format.lower() == "json" else SimpleFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DATABASE_ECHO else logging.WARNING
    )


def get_logger(name: str) -> logging.Logger:
    """Logger for a module (usually get_logger(__name__))."""
    return logging.getLogger(name)


def generate_request_id() -> str:
    return str(uuid.uuid4())
