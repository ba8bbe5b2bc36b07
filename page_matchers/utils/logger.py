# page_matchers/utils/logger.py
from __future__ import annotations

"""
Logging for the "page_matchers" namespace.

Console output goes through rich; LOG_TO_FILE adds a rotating file of JSON
lines. bind()/unbind() manage key/value context (the running suite, say)
that a filter stamps onto every record as `record.context`.
"""

import json
import logging
import threading
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

from page_matchers.utils.config import LogLevel, Settings, get_settings

__all__ = ["get_logger", "set_log_level", "bind", "unbind", "JsonLinesFormatter"]

ROOT = "page_matchers"

_lock = threading.Lock()
_ready = False
_context: Dict[str, Any] = {}


class _ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.context = dict(_context)
        return True


class JsonLinesFormatter(logging.Formatter):
    """Record -> one JSON object; bound context keys sit beside `msg`."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = dict(getattr(record, "context", {}))
        entry.update(
            ts=datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="seconds"),
            level=record.levelname,
            logger=record.name,
            msg=record.getMessage(),
        )
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def _console_handler(settings: Settings) -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=settings.COLORIZED_OUTPUT,
        omit_repeated_times=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _file_handler(settings: Settings) -> logging.Handler:
    settings.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        settings.LOG_FILE, maxBytes=2 * 1024 * 1024, backupCount=3, encoding="utf-8", delay=True
    )
    handler.setFormatter(JsonLinesFormatter())
    return handler


def _setup() -> None:
    global _ready
    with _lock:
        if _ready:
            return
        settings = get_settings()
        root = logging.getLogger(ROOT)
        root.handlers.clear()
        root.propagate = False
        handlers = [_console_handler(settings)]
        if settings.LOG_TO_FILE:
            handlers.append(_file_handler(settings))
        # handlers stay at NOTSET; the namespace logger's level decides.
        # Filters go on handlers since records from child loggers skip the parent's filters.
        for handler in handlers:
            handler.addFilter(_ContextFilter())
            root.addHandler(handler)
        level = logging.getLevelName(settings.LOG_LEVEL.value)
        root.setLevel(level)
        # playwright's own chatter only at WARNING and up
        logging.getLogger("playwright").setLevel(max(level, logging.WARNING))
        _ready = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the page_matchers namespace (configured on first use)."""
    if not _ready:
        _setup()
    return logging.getLogger(name or ROOT)


def set_log_level(level: Union[LogLevel, str]) -> None:
    """Change the namespace level at runtime, e.g. from --log-level."""
    name = LogLevel(level.upper()) if isinstance(level, str) else level
    get_logger().setLevel(name.value)


def bind(**context: Any) -> None:
    """Attach key/value context to every following record."""
    _context.update(context)


def unbind(*keys: str) -> None:
    for key in keys:
        _context.pop(key, None)
