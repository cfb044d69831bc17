"""
Logging setup.

Plain text for development, one JSON object per line for production
(LOG_FORMAT=json). Each record carries the id of the HTTP call it belongs to.
"""

import json
import logging
import sys
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict

from .config import settings

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

_RESERVED = {
    "name", "msg", "args", "created", "filename", "funcName", "levelname",
    "levelno", "lineno", "module", "msecs", "pathname", "process",
    "processName", "relativeCreated", "stack_info", "exc_info", "exc_text",
    "thread", "threadName", "message", "taskName", "request_id",
}


def get_request_id() -> str:
    return request_id_var.get() or ""


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def generate_request_id() -> str:
    return str(uuid.uuid4())[:8]


class JSONFormatter(logging.Formatter):
    """Structured output for log aggregation"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = get_request_id()
        if request_id:
            log_data["request_id"] = request_id

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info) if record.exc_info[0] else None
            }

        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ContextualFormatter(logging.Formatter):
    """Readable output with the call id"""

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = get_request_id() or "-"
        return super().format(record)


def setup_logging(level: str = None, log_format: str = None) -> logging.Logger:
    level = (level or settings.LOG_LEVEL).upper()
    log_format = log_format or settings.LOG_FORMAT

    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(ContextualFormatter(
            "%(asctime)s | %(levelname)-8s | %(request_id)s | %(name)s | %(message)s"
        ))

    root = logging.getLogger("student_portal")
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False

    # Keep SQLAlchemy quiet unless asked
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return root


logger = logging.getLogger("student_portal")
