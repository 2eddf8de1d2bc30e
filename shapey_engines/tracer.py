"""
shapey_engines.tracer -- Engine invocation tracer emitting SHAPEY_ENGINE_TRACE.

Responsibility:
    Provide a lightweight decorator (``@traced_engine``) that wraps engine
    entry points with structured trace logging. The trace captures
    engine_name, engine_version, input_fingerprint (deterministic SHA-256
    hash of selected arguments), the active LogContext and duration_ms.

Architecture position:
    Engines -- infrastructure support for the pure reshaping layer.
    Does NOT introduce I/O into engines; emits a DEBUG log record only,
    and does no fingerprinting at all when DEBUG is disabled for its
    logger.

Invariants enforced:
    - Fingerprints are deterministic: dict keys are sorted, callables are
      represented by their qualified name, never by their id.
    - Engine purity: the decorator only reads arguments and emits a log
      record; it does not mutate inputs.

Usage:
    from shapey_engines.tracer import traced_engine

    @traced_engine("shapeline", "1.0", fingerprint_fields=("value",))
    def shapeline(steps, value):
        ...
"""

from __future__ import annotations

import functools
import hashlib
import inspect
import logging
import time
from collections.abc import Callable
from typing import Any

from shapey_kernel.domain.spec_types import NormalizedSpec

_logger = logging.getLogger("shapey.engines.tracer")


def _canonicalize(value: Any) -> str:
    """Produce a stable string representation of a value for fingerprinting."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value
    if isinstance(value, NormalizedSpec):
        return _canonicalize(
            {k: f"{e.kind.value}:{_canonicalize(e.value)}" for k, e in value.items()}
        )
    if isinstance(value, dict):
        items = sorted(value.items(), key=lambda kv: str(kv[0]))
        return "{" + ",".join(f"{k}:{_canonicalize(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    if callable(value):
        inner = getattr(value, "transform", value)
        return "fn:" + getattr(inner, "__qualname__", type(inner).__qualname__)
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: dict[str, Any],
) -> str:
    """
    Compute a deterministic SHA-256 fingerprint of selected arguments.

    Missing fields are recorded as "null". The result is a 16-character
    hex digest prefix.
    """
    parts: list[str] = []
    for name in fingerprint_fields:
        parts.append(f"{name}={_canonicalize(arguments.get(name))}")
    canonical = "|".join(parts)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorator that emits SHAPEY_ENGINE_TRACE for engine invocations.

    Args:
        engine_name: Engine identifier (e.g., "make_shaper").
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
            if not _logger.isEnabledFor(logging.DEBUG):
                return func(*args, **kwargs)

            fp = ""
            if fingerprint_fields:
                bound = signature.bind_partial(*args, **kwargs)
                fp = compute_input_fingerprint(fingerprint_fields, bound.arguments)

            t0 = time.monotonic()
            result = func(*args, **kwargs)
            duration_ms = round((time.monotonic() - t0) * 1000, 2)

            _logger.debug(
                "SHAPEY_ENGINE_TRACE",
                extra={
                    "trace_type": "SHAPEY_ENGINE_TRACE",
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
