"""
Error policies -- per-field failure isolation for spec transforms.

Responsibility:
    Wrap every transform of a spec so that an exception raised while
    computing one field never escapes the reshape. What the field becomes
    instead is decided by the spec's ``shapeyDebug`` value:

    ==================  =============================================
    ``shapeyDebug``     Failed field becomes
    ==================  =============================================
    absent / falsy      ``None`` (silently)
    ``True``            ``None``, after logging field, value, exception
    a callable          ``handler(exception, field_name, value)``
    ``"skip"``          the value the transform was given, unchanged
    ==================  =============================================

Architecture position:
    Kernel > Domain. The logging policy writes to an injected
    ``logging.Logger``; the default one lives under the ``shapey``
    namespace, which carries a ``NullHandler`` until the application
    calls ``configure_logging()``.

Failure modes:
    - Only ``Exception`` subclasses are caught; ``KeyboardInterrupt`` and
      friends propagate.
    - A custom handler that raises propagates: it is caller-owned code,
      not a spec transform.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from shapey_kernel.domain.callables import call_shape, transform_arity
from shapey_kernel.domain.predicates import is_transform
from shapey_kernel.logging_config import get_logger

_SKIP = re.compile(r"^skip$", re.IGNORECASE)


class ErrorPolicy(Protocol):
    """Decides the substitute value of a field whose transform raised."""

    def handle(self, exc: Exception, field_name: str, value: Any) -> Any: ...


@dataclass(frozen=True)
class SilentPolicy:
    """Failed fields become ``None``; nothing is reported."""

    def handle(self, exc: Exception, field_name: str, value: Any) -> Any:
        return None


@dataclass(frozen=True)
class LoggingPolicy:
    """Failed fields become ``None``; each failure is logged at ERROR."""

    logger: logging.Logger = field(
        default_factory=lambda: get_logger("transforms")
    )

    def handle(self, exc: Exception, field_name: str, value: Any) -> Any:
        self.logger.error(
            "Transform failed on field: %r",
            field_name,
            exc_info=exc,
            extra={"failed_field": field_name, "input_value": value},
        )
        return None


@dataclass(frozen=True)
class HandlerPolicy:
    """Delegates to a caller-supplied ``handler(exc, field_name, value)``."""

    handler: Callable[[Exception, str, Any], Any]

    def handle(self, exc: Exception, field_name: str, value: Any) -> Any:
        return self.handler(exc, field_name, value)


@dataclass(frozen=True)
class SkipPolicy:
    """Failed fields keep the value the transform was given."""

    def handle(self, exc: Exception, field_name: str, value: Any) -> Any:
        return value


def resolve_error_policy(
    shapey_debug: Any,
    logger: logging.Logger | None = None,
) -> ErrorPolicy:
    """Map a ``shapeyDebug`` value to its error policy."""
    if shapey_debug is True:
        return LoggingPolicy(logger) if logger is not None else LoggingPolicy()
    if is_transform(shapey_debug):
        return HandlerPolicy(shapey_debug)
    if isinstance(shapey_debug, str) and _SKIP.match(shapey_debug):
        return SkipPolicy()
    return SilentPolicy()


class SafeTransform:
    """
    A transform wrapped in its field's error policy.

    Calling it forwards the positional arguments the wrapped transform
    accepts; ``arity`` reports the wrapped transform's required positional
    parameter count so whole-object application can size itself.
    """

    __slots__ = ("transform", "field_name", "policy", "arity", "_shape")

    def __init__(
        self,
        transform: Callable[..., Any],
        field_name: str,
        policy: ErrorPolicy,
    ):
        if isinstance(transform, SafeTransform):
            transform = transform.transform
        self.transform = transform
        self.field_name = field_name
        self.policy = policy
        self.arity = transform_arity(transform)
        self._shape = call_shape(transform)

    def __call__(self, *args: Any) -> Any:
        try:
            return self.transform(*self._shape.fit(args))
        except Exception as exc:
            return self.policy.handle(exc, self.field_name, args[0] if args else None)

    def __repr__(self) -> str:
        return f"SafeTransform({self.field_name!r}, {self.transform!r})"

