"""Logging configuration for the ShoutIt relay.

Usage:
    from shoutit.logging_config import configure_logging

    # Configure once at process startup
    configure_logging(level="DEBUG", format="json")

Environment Variables:
    SHOUTIT_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    SHOUTIT_LOG_FORMAT: Output format ("text" or "json")
    SHOUTIT_LOG_FILE: Optional log file path
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Literal

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TEXT_FORMAT_WITH_MS = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord carries; anything else came in through `extra`
_STANDARD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }
)

_configured = False


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging.

    Outputs one JSON object per record:
    {
        "timestamp": "2026-10-19T14:30:00.123456",
        "level": "INFO",
        "logger": "shoutit.server",
        "message": "[00001_143000_POST_shout] POST /shout -> 200",
        "extra": {...}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


def configure_logging(
    level: str | None = None,
    format: Literal["text", "json"] | None = None,
    file_path: str | None = None,
    include_ms: bool = True,
    force: bool = False,
) -> None:
    """Configure root logging for the process.

    Subsequent calls are ignored unless force=True. Explicit arguments win
    over the SHOUTIT_LOG_* environment variables.

    Args:
        level: Log level. Defaults to SHOUTIT_LOG_LEVEL or "INFO".
        format: Output format. Defaults to SHOUTIT_LOG_FORMAT or "text".
        file_path: Optional log file. Defaults to SHOUTIT_LOG_FILE.
        include_ms: Include milliseconds in text timestamps.
        force: Reconfigure even if already configured.
    """
    global _configured
    if _configured and not force:
        return

    level = level or os.environ.get("SHOUTIT_LOG_LEVEL", "INFO")
    format = format or os.environ.get("SHOUTIT_LOG_FORMAT", "text")  # type: ignore[assignment]
    file_path = file_path or os.environ.get("SHOUTIT_LOG_FILE")

    root_logger = logging.getLogger()
    level_value = logging.getLevelName(level.upper())
    if not isinstance(level_value, int):
        logging.getLogger(__name__).warning("Unknown log level %r, using INFO", level)
        level_value = logging.INFO
    root_logger.setLevel(level_value)
    root_logger.handlers.clear()

    if format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        fmt = TEXT_FORMAT_WITH_MS if include_ms else TEXT_FORMAT
        formatter = logging.Formatter(fmt, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _configured = True
