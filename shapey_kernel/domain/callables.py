"""
Callables -- arity inspection and arity-aware invocation of transforms.

Transforms are plain Python callables of any shape: ``str.upper``,
``len``, ``lambda: "default"``, ``lambda whole, extra: ...``. The engines
call them with however many values the current strategy supplies, so a
transform only receives as many positional arguments as it declares, and
required positional parameters that were not supplied are filled with
``None``.

Callables whose signature cannot be read (some builtins and C extension
callables) are called with every supplied argument.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True, slots=True)
class CallShape:
    """Positional calling shape of a callable."""

    required: int
    capacity: int | None  # None: accepts any number of positional args

    def fit(self, args: tuple[Any, ...]) -> tuple[Any, ...]:
        """Trim or pad ``args`` to what the callable accepts."""
        if self.capacity is None:
            return args + (None,) * (self.required - len(args))
        args = args[: self.capacity]
        return args + (None,) * (self.required - len(args))


_UNKNOWN_SHAPE = CallShape(required=0, capacity=None)


def call_shape(fn: Callable[..., Any]) -> CallShape:
    shape = getattr(fn, "call_shape", None)
    if isinstance(shape, CallShape):
        return shape
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return _UNKNOWN_SHAPE

    required = 0
    capacity: int | None = 0
    for param in params:
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            capacity = None
        elif param.kind in _POSITIONAL:
            if capacity is not None:
                capacity += 1
            if param.default is inspect.Parameter.empty:
                required += 1
    return CallShape(required=required, capacity=capacity)


def transform_arity(fn: Callable[..., Any]) -> int:
    """Number of required positional parameters of ``fn``."""
    arity = getattr(fn, "arity", None)
    if isinstance(arity, int):
        return arity
    return call_shape(fn).required


def invoke(fn: Callable[..., Any], *args: Any, shape: CallShape | None = None) -> Any:
    """Call ``fn`` with the subset of ``args`` its signature accepts."""
    return fn(*(shape or call_shape(fn)).fit(args))
