"""
Structured JSON logging for the shapey toolkit.

Every record under the ``shapey`` logger namespace is rendered as one JSON
line. Two call-scoped fields ride along automatically while a shaper runs:
``shaper_mode`` (bound by ``Shaper.__call__``) and ``pipeline_step`` (bound
by each ``shapeline`` stage).
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

_LOGGER_PREFIX = "shapey"


class LogContext:
    """Async-safe holder for the fields a running shaper adds to its logs."""

    _fields: dict[str, ContextVar[Any]] = {
        "pipeline_step": ContextVar("shapey_pipeline_step", default=None),
        "shaper_mode": ContextVar("shapey_shaper_mode", default=None),
    }

    @classmethod
    def get_all(cls) -> dict[str, Any]:
        """Bound fields with a value, in declaration order."""
        return {
            name: var.get()
            for name, var in cls._fields.items()
            if var.get() is not None
        }

    @classmethod
    def clear(cls) -> None:
        for var in cls._fields.values():
            var.set(None)

    @classmethod
    @contextmanager
    def bind(cls, **fields: Any) -> Iterator[type["LogContext"]]:
        """
        Bind fields for the duration of a ``with`` block.

        Unknown names and ``None`` values are ignored; previous values are
        restored on exit, including after an exception.
        """
        tokens = [
            (cls._fields[name], cls._fields[name].set(value))
            for name, value in fields.items()
            if name in cls._fields and value is not None
        ]
        try:
            yield cls
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


_STDLIB_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _to_json(obj: Any) -> Any:
    # Shaped values end up in trace records; transforms render as repr().
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=repr)
    return repr(obj)


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        payload.update(
            (key, val)
            for key, val in vars(record).items()
            if key not in _STDLIB_KEYS and key not in payload
        )
        if record.exc_info and record.exc_info[1] is not None:
            payload.update(self._exception_fields(record))
        return json.dumps(payload, default=_to_json)

    def _exception_fields(self, record: logging.LogRecord) -> dict[str, Any]:
        exc = record.exc_info[1]
        fields: dict[str, Any] = {
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
        }
        # ShapeyError subclasses carry a code plus their structured attributes
        if hasattr(exc, "code"):
            fields["exc_code"] = exc.code
        fields.update(
            (f"exc_{k}", v)
            for k, v in vars(exc).items()
            if not k.startswith("_") and k != "code"
        )
        fields["traceback"] = self.formatException(record.exc_info)
        return fields


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the shapey namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Attach a JSON handler to the ``shapey`` logger (first call wins)."""
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    package_logger = logging.getLogger(_LOGGER_PREFIX)
    package_logger.setLevel(level)
    package_logger.propagate = False

    h = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
    h.setFormatter(StructuredFormatter())
    package_logger.addHandler(h)


def reset_logging() -> None:
    """Return the ``shapey`` logger to its silent, unconfigured state."""
    global _configured
    with _lock:
        _configured = False
    package_logger = logging.getLogger(_LOGGER_PREFIX)
    package_logger.handlers.clear()
    package_logger.addHandler(logging.NullHandler())
    package_logger.setLevel(logging.WARNING)
    package_logger.propagate = True
