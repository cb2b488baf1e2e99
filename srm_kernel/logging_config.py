"""
Structured JSON logging for the SRM engine.

Every record is written as one JSON object per line::

    {"ts": ..., "level": "WARNING", "logger": "srm_kernel.engines.identifiers",
     "message": "identifier_fallback", "batch_id": "seed-2025-06-30",
     "region_code": "3701", "prefix_length": 15}

``message`` is a snake_case event name.  Details travel in ``extra=``;
the bound context fields below are merged in between.

Context fields:
    supplier_id   supplier being graded or whose ledger changes
    batch_id      one seeding run
    session_id    one import preprocessing session

Engines log only where data was masked (``identifier_fallback``,
``metric_value_unparsable``, ``score_not_finite``); their traces go
through srm_engines.tracer at DEBUG.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

__all__ = [
    "CONTEXT_FIELDS",
    "LOGGER_NAMESPACE",
    "LogContext",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
    "reset_logging",
]

LOGGER_NAMESPACE = "srm_kernel"

CONTEXT_FIELDS: tuple[str, ...] = ("supplier_id", "batch_id", "session_id")

# Replaced wholesale on every change, never mutated in place.
_context: ContextVar[dict[str, str]] = ContextVar("srm_log_context", default={})


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


def _context_updates(fields: dict[str, Any]) -> dict[str, str]:
    unknown = sorted(set(fields) - set(CONTEXT_FIELDS))
    if unknown:
        raise ValueError(f"Unknown log context field(s): {', '.join(unknown)}")
    return {name: str(value) for name, value in fields.items() if value is not None}


class LogContext:
    """Context fields merged into every record; safe across threads and tasks."""

    @staticmethod
    def set(**fields: Any) -> None:
        """Add or replace fields; None values leave a field untouched."""
        _context.set({**_context.get(), **_context_updates(fields)})

    @staticmethod
    def get_all() -> dict[str, str]:
        return dict(_context.get())

    @staticmethod
    def clear() -> None:
        _context.set({})

    @staticmethod
    @contextmanager
    def bind(**fields: Any) -> Iterator[None]:
        """Set fields for the duration of a ``with`` block, then restore."""
        token = _context.set({**_context.get(), **_context_updates(fields)})
        try:
            yield
        finally:
            _context.reset(token)


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------

_RECORD_ATTRIBUTES: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    # SrmKernelError subclasses keep their details as instance attributes.
    for name, value in vars(exc).items():
        if not name.startswith("_"):
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record: envelope, context, then ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context.get(),
        }
        for name, value in vars(record).items():
            if name not in _RECORD_ATTRIBUTES:
                payload.setdefault(name, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Logger ``srm_kernel.<name>``; every package logs under this namespace."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


_installed: logging.Handler | None = None
_lock = threading.Lock()


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> logging.Handler:
    """
    Attach one JSON handler to the ``srm_kernel`` logger.

    Only the first call has an effect; later calls return the handler
    already installed.
    """
    global _installed
    with _lock:
        if _installed is None:
            installed = handler or logging.StreamHandler(stream or sys.stderr)
            installed.setFormatter(StructuredFormatter())
            namespace = logging.getLogger(LOGGER_NAMESPACE)
            namespace.addHandler(installed)
            namespace.setLevel(level)
            namespace.propagate = False
            _installed = installed
        return _installed


def reset_logging() -> None:
    """Detach the installed handler and restore WARNING.  Tests only."""
    global _installed
    with _lock:
        namespace = logging.getLogger(LOGGER_NAMESPACE)
        if _installed is not None:
            namespace.removeHandler(_installed)
            _installed = None
        namespace.setLevel(logging.WARNING)
        namespace.propagate = True
