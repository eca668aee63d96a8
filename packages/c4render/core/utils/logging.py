"""Logging setup for c4render.

Text or JSON-lines output to stdout or a file. Render steps log through a
``ViewLogAdapter`` so the renderer id and view key travel with each record
(as ``[renderer/view]`` prefix in text mode, as fields in JSON mode).
"""

from __future__ import annotations

import functools
import inspect
import json
import logging
import sys
import time
from collections.abc import MutableMapping
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Loggers of libraries that are chatty at DEBUG
NOISY_LOGGERS: dict[str, int] = {
    "asyncio": logging.ERROR,
    "playwright": logging.WARNING,
    "urllib3": logging.ERROR,
}

RENDER_FIELDS = ("renderer", "view_key")

# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


class StructuredJSONFormatter(logging.Formatter):
    """One JSON object per record.

    ``renderer`` and ``view_key`` are lifted to the top level when present so
    a render log can be filtered per view:

    {
        "timestamp": "2026-01-29T12:00:00+00:00",
        "level": "WARNING",
        "message": "SVG not retrieved",
        "renderer": "Structurizr",
        "view_key": "context",
        "context": {"logger_name": "...", "function": "...", "line": 42, ...}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        for field in RENDER_FIELDS:
            if field in extras:
                entry[field] = extras.pop(field)

        context: dict[str, Any] = {
            "logger_name": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            **extras,
        }
        if record.exc_info:
            context.update(self._exception_context(record))
        entry["context"] = context

        return json.dumps(entry, default=str)

    def _exception_context(self, record: logging.LogRecord) -> dict[str, Any]:
        exc_type, exc_value, _ = record.exc_info or (None, None, None)
        return {
            "error_type": exc_type.__name__ if exc_type else None,
            "error_message": str(exc_value) if exc_value else None,
            "stack_trace": record.exc_text or self.formatException(record.exc_info),
        }


class ViewLogAdapter(logging.LoggerAdapter):
    """Attach renderer id and view key to every record of one render step."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        context = {key: value for key, value in (self.extra or {}).items() if value is not None}
        kwargs["extra"] = {**context, **kwargs.get("extra", {})}
        label = "/".join(str(context[field]) for field in RENDER_FIELDS if field in context)
        return (f"[{label}] {msg}" if label else msg), kwargs


def view_logger(
    base: logging.Logger, renderer: str, view_key: str | None = None
) -> ViewLogAdapter:
    """Wrap ``base`` for messages about one renderer (and optionally one view)."""
    return ViewLogAdapter(base, {"renderer": renderer, "view_key": view_key})


def _build_handler(filename: str | None) -> logging.Handler:
    if filename:
        return logging.FileHandler(filename, encoding="utf-8")
    return logging.StreamHandler(sys.stdout)


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    filename: str | None = None,
    structured: bool = False,
) -> None:
    """Configure root logging; safe to call again to reconfigure.

    Args:
        level: Level name, case-insensitive
        format_string: Text format (ignored when ``structured``)
        filename: Log file (UTF-8); stdout when None
        structured: Emit JSON lines instead of text

    Examples:
        >>> configure_logging(level="INFO")
        >>> configure_logging(level="DEBUG", structured=True, filename="render.jsonl")
    """
    handler = _build_handler(filename)
    if structured:
        handler.setFormatter(StructuredJSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))

    logging.basicConfig(level=getattr(logging, level.upper()), handlers=[handler], force=True)

    for name, noisy_level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(noisy_level)


def get_renderer_logger() -> logging.Logger:
    """Logger for render timings and browser console output."""
    return logging.getLogger("C4RENDER_RENDER")


def log_performance(func):
    """Log the wall time of ``func`` (sync or async) at DEBUG."""

    def report(start: float) -> None:
        elapsed = time.perf_counter() - start
        get_renderer_logger().debug(f"{func.__qualname__} finished in {elapsed:.3f}s")

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_timed(*args, **kwargs):
            start = time.perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                report(start)

        return async_timed

    @functools.wraps(func)
    def timed(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            report(start)

    return timed
