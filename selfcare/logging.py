"""Structured logging: per-request context and console formatters.

Application code logs a short snake_case event name and puts the details in
``extra``::

    logger.info("blog_post_created", extra={"post_id": post.pk})

``RequestContextFilter`` adds whatever is bound with ``bind_log_context``
(request id, user, client IP) to every record, and the formatters print all
extras: as JSON keys in production, as ``key=value`` pairs in development.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
from collections.abc import Iterator, Mapping
from datetime import UTC, datetime
from typing import Any

# Attributes every LogRecord has; anything else on a record came from ``extra``
RESERVED_LOG_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_log_context: contextvars.ContextVar[Mapping[str, Any]] = contextvars.ContextVar(
    "log_context", default={}
)


def bind_log_context(**fields: Any) -> contextvars.Token:
    """Add fields to the current context, keeping those already bound.

    ``None`` and empty-string values are skipped. Returns a token for
    ``reset_log_context``.
    """
    merged = {**_log_context.get(), **{k: v for k, v in fields.items() if v not in (None, "")}}
    return _log_context.set(merged)


def reset_log_context(token: contextvars.Token) -> None:
    # A token from another context (e.g. a finished thread) cannot be reset
    with contextlib.suppress(ValueError):
        _log_context.reset(token)


def current_log_context() -> dict[str, Any]:
    """Snapshot of the bound fields, for handing to worker threads."""
    return dict(_log_context.get())


@contextlib.contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    token = bind_log_context(**fields)
    try:
        yield
    finally:
        reset_log_context(token)


class RequestContextFilter(logging.Filter):
    """Copy bound context onto each record. Explicit ``extra`` values win."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            record.__dict__.setdefault(key, value)
        return True


def _extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in RESERVED_LOG_ATTRS and not key.startswith("_")
    }


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class JsonFormatter(logging.Formatter):
    """One JSON object per line; extras become top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update({key: _jsonable(value) for key, value in _extras(record).items()})
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


class DevFormatter(logging.Formatter):
    """Readable single-line output for runserver.

    ``2025-01-01 12:00:00 INFO     selfcare.apps.blog.services blog_post_created | post_id=3``
    """

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            self.formatTime(record, "%Y-%m-%d %H:%M:%S"),
            f"{record.levelname:8}",
            record.name,
            record.getMessage(),
        ]
        line = " ".join(parts)
        extras = _extras(record)
        if extras:
            line += " | " + " ".join(f"{key}={value!r}" for key, value in extras.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line
