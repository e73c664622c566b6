"""Structured logging helpers for the fetch client and article pipeline."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import IO, Any, Dict, Optional

# LogRecord bookkeeping attributes that never belong in the JSON payload
_RESERVED = frozenset(
    {
        "name",
        "msg",
        "args",
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
        "taskName",
        "message",
    }
)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        # merge extra dict if provided via logger.info(event, extra={...})
        for key, value in record.__dict__.items():
            if key in _RESERVED or key.startswith("_"):
                continue
            if key in payload:
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


PACKAGE_LOGGERS = ("feed_fetcher", "article_parser")
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_HANDLER_NAME = "user-feeds-core"


def configure_logging(
    level_name: str = "INFO",
    json_enabled: bool = False,
    *,
    stream: Optional[IO[str]] = None,
) -> logging.Handler:
    """Attach one stream handler to the package loggers.

    Reconfiguring swaps the previously installed handler, so repeated calls
    never duplicate lines. The root logger is left alone.
    """
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO
    handler = logging.StreamHandler(stream)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JsonFormatter() if json_enabled else logging.Formatter(TEXT_FORMAT))
    for name in PACKAGE_LOGGERS:
        package_logger = logging.getLogger(name)
        package_logger.setLevel(level)
        for existing in [h for h in package_logger.handlers if h.get_name() == _HANDLER_NAME]:
            package_logger.removeHandler(existing)
        package_logger.addHandler(handler)
        package_logger.propagate = False
    return handler


def configure_from_settings(settings: Any) -> logging.Handler:
    return configure_logging(settings.log_level, json_enabled=settings.log_json)


def get_logger(name: str) -> logging.Logger:
    if not name.startswith(PACKAGE_LOGGERS):
        name = f"feed_fetcher.{name}"
    return logging.getLogger(name)
