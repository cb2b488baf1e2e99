"""
srm_engines.tracer -- Engine invocation tracer emitting SRM_ENGINE_TRACE.

Responsibility:
    Provide a lightweight decorator (``@traced_engine``) that wraps pure
    engine invocations with structured trace logging.  The trace captures
    engine_name, engine_version, input_fingerprint (deterministic SHA-256
    hash of selected inputs), and duration_ms.

Architecture position:
    Engines -- infrastructure support for the pure calculation layer.
    Does NOT introduce I/O into engines; emits a log record only.

Invariants enforced:
    - Fingerprint computation is deterministic: _canonicalize produces
      stable string representations of values; dict keys are sorted; the
      hash is SHA-256 truncated to 16 hex chars.
    - Engine purity: the decorator only reads arguments and emits a log
      record; it does not mutate inputs or inject side effects.

Failure modes:
    - Fingerprint fields missing from the call are recorded as "null".
    - _canonicalize falls back to ``str(value)`` for unknown types.

Usage:
    from srm_engines.tracer import traced_engine

    @traced_engine("identifier", "1.0", fingerprint_fields=("seed", "city"))
    def synthesize_identifier(seed, city=""):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

# Logger lives under the kernel namespace so configure_logging() covers it.
_logger = logging.getLogger("srm_kernel.engines.tracer")


def _canonicalize(value: Any) -> str:
    """Produce a stable string representation of a value for fingerprinting.

    Postconditions:
        Returns a deterministic string for None, int, float, str, mappings
        (sorted keys), list/tuple (order-preserved) and dataclass instances.
        Unknown types fall back to ``str(value)``.
    """
    if value is None:
        return "null"
    if isinstance(value, (bool, int, float)):
        return str(value)
    if isinstance(value, str):
        return value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _canonicalize(dataclasses.asdict(value))
    if isinstance(value, Mapping):
        items = sorted(value.items(), key=lambda kv: str(kv[0]))
        return "{" + ",".join(f"{k}:{_canonicalize(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """Compute a deterministic SHA-256 fingerprint of selected input fields.

    Only the fields listed in fingerprint_fields are included. Missing
    fields are recorded as "null". The result is a hex digest prefix (16 chars).
    """
    parts: list[str] = []
    for field in fingerprint_fields:
        val = arguments.get(field)
        parts.append(f"{field}={_canonicalize(val)}")
    canonical = "|".join(parts)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorator that emits SRM_ENGINE_TRACE for pure engine invocations.

    Args:
        engine_name: Engine identifier (e.g., "scoring").
        engine_version: Engine version (e.g., "1.0").
        fingerprint_fields: Parameter names (positional or keyword) to
            include in the input fingerprint hash.

    Returns:
        Decorator function.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fp = ""
            if fingerprint_fields:
                bound = signature.bind_partial(*args, **kwargs)
                fp = compute_input_fingerprint(fingerprint_fields, bound.arguments)

            t0 = time.monotonic()
            result = func(*args, **kwargs)
            duration_ms = round((time.monotonic() - t0) * 1000, 2)

            if _logger.isEnabledFor(logging.DEBUG):
                _logger.debug(
                    "SRM_ENGINE_TRACE",
                    extra={
                        "trace_type": "SRM_ENGINE_TRACE",
                        "engine_name": engine_name,
                        "engine_version": engine_version,
                        "input_fingerprint": fp,
                        "duration_ms": duration_ms,
                        "function": func.__qualname__,
                    },
                )
            return result

        return wrapper

    return decorator
