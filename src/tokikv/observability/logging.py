"""
TokiKV — Structured Logging

JSON log formatting for the tokikv logger hierarchy. Every module logs through
logging.getLogger(__name__); setup_logging() attaches a single JSON handler
to the package root logger.
"""

import json
import logging
from datetime import UTC, datetime

from ..config import LogLevel, get_config

# LogRecord attributes that are not user-supplied extra fields
_RESERVED_ATTRS = frozenset(
    (
        "args",
        "msg",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "name",
        "message",
        "taskName",
    )
)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add any extra fields from record.__dict__
        for key, value in record.__dict__.items():
            if key not in log_data and not key.startswith("_") and key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(level: LogLevel | str | None = None, logger_name: str = "tokikv") -> logging.Logger:
    """
    Setup structured JSON logging for the package.

    Args:
        level: Log level for the package logger (default: configured LOG_LEVEL)
        logger_name: Root logger of the hierarchy to configure

    Returns:
        The configured logger
    """
    if level is None:
        level = get_config().log_level

    logger = logging.getLogger(logger_name)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    logger.setLevel(level.value if isinstance(level, LogLevel) else str(level).upper())

    return logger
