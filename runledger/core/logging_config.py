"""
Structured Logging Configuration for RunLedger

JSON logs for production, human-readable logs for development.
Every record emitted while a query is being served carries its query_id,
so the count, page and name-resolution round trips of one call can be
correlated.
"""

import logging
import json
import os
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

query_id_var: ContextVar[Optional[str]] = ContextVar("query_id", default=None)

# Attributes every LogRecord has; anything else came in through extra={...}
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}


def _record_time(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class JSONFormatter(logging.Formatter):
    """
    Outputs one JSON object per record:
    timestamp, level, logger, message, query_id, exception, context
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": _record_time(record).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        query_id = query_id_var.get()
        if query_id:
            log_data["query_id"] = query_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        }
        if extra_fields:
            log_data["context"] = extra_fields

        return json.dumps(log_data, ensure_ascii=True, default=str)


class StandardFormatter(logging.Formatter):
    """
    Format: [TIMESTAMP] LEVEL - logger - message (query_id)
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = _record_time(record).strftime("%Y-%m-%d %H:%M:%S")
        base = f"[{timestamp}] {record.levelname:8s} - {record.name} - {record.getMessage()}"

        query_id = query_id_var.get()
        if query_id:
            base += f" (query_id={query_id})"

        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)

        return base


def setup_logging(
    level: str = "INFO",
    json_logs: bool = False,
    log_file: Optional[str] = None
) -> None:
    """
    Configure the root logger.

    Environment variables LOG_LEVEL, JSON_LOGS and LOG_FILE override the
    arguments.

    Examples:
        setup_logging(level="DEBUG", json_logs=False)
        setup_logging(level="INFO", json_logs=True, log_file="/var/log/runledger.log")
    """
    level = os.getenv("LOG_LEVEL", level).upper()
    json_logs = os.getenv("JSON_LOGS", "true" if json_logs else "false").lower() == "true"
    log_file = os.getenv("LOG_FILE", log_file)

    numeric_level = getattr(logging, level, logging.INFO)
    formatter = JSONFormatter() if json_logs else StandardFormatter()

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={
            "level": level,
            "json_logs": json_logs,
            "log_file": log_file or "none"
        }
    )


def set_query_id(query_id: str) -> None:
    query_id_var.set(query_id)


def clear_query_id() -> None:
    query_id_var.set(None)


def get_query_id() -> Optional[str]:
    return query_id_var.get()


@contextmanager
def query_context(query_id: Optional[str] = None) -> Iterator[str]:
    """
    Tag all logs inside the block with a query id.

    Nested blocks reuse the outer id unless one is passed explicitly, and
    the previous value is restored on exit.
    """
    current = query_id_var.get()
    effective = query_id or current or uuid.uuid4().hex[:12]
    token = query_id_var.set(effective)
    try:
        yield effective
    finally:
        query_id_var.reset(token)
