"""
Named transforms for spec documents.

A YAML spec cannot hold Python callables, so a document names them
instead (``!transform upper``) and the loader looks the name up in a
``TransformRegistry``. Names are matched after stripping and lowercasing.

The built-ins pass ``None`` through (``length`` and ``sum`` give 0), so
they are safe under ``always_evolve`` where absent keys arrive as
``None``. String built-ins leave non-string values unchanged; ``int`` and
``float`` raise on unconvertible input, which the spec's error policy
then handles like any other failing transform.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from shapey_kernel.exceptions import UnknownTransformError


def _normalize_name(name: str) -> str:
    return (name or "").strip().lower()


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _upper(value: Any) -> Any:
    return value.upper() if isinstance(value, str) else value


def _lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def _title(value: Any) -> Any:
    return value.title() if isinstance(value, str) else value


def _to_int(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        return int(value.strip())
    return int(value)


def _to_float(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        return float(value.strip())
    return float(value)


def _to_str(value: Any) -> Any:
    return None if value is None else str(value)


def _length(value: Any) -> int:
    return 0 if value is None else len(value)


def _sum(value: Any) -> Any:
    return 0 if value is None else sum(value)


def _identity(value: Any) -> Any:
    return value


_BUILTINS: dict[str, Callable[[Any], Any]] = {
    "strip": _strip,
    "trim": _strip,
    "upper": _upper,
    "lower": _lower,
    "title": _title,
    "int": _to_int,
    "float": _to_float,
    "str": _to_str,
    "length": _length,
    "sum": _sum,
    "identity": _identity,
}


class TransformRegistry:
    """Name -> transform lookup used when loading spec documents."""

    def __init__(self, transforms: dict[str, Callable[..., Any]] | None = None):
        self._transforms: dict[str, Callable[..., Any]] = {}
        for name, fn in (transforms or {}).items():
            self.register(name, fn)

    @classmethod
    def with_builtins(cls) -> TransformRegistry:
        return cls(_BUILTINS)

    def register(self, name: str, fn: Callable[..., Any]) -> None:
        """Register ``fn`` under ``name``, replacing any previous entry."""
        if not callable(fn):
            raise TypeError(f"Transform {name!r} is not callable: {fn!r}")
        self._transforms[_normalize_name(name)] = fn

    def get(self, name: str) -> Callable[..., Any]:
        """Look up a transform. Raises UnknownTransformError if absent."""
        try:
            return self._transforms[_normalize_name(name)]
        except KeyError:
            raise UnknownTransformError(name, self.names()) from None

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._transforms))

    def copy(self) -> TransformRegistry:
        return TransformRegistry(dict(self._transforms))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _normalize_name(name) in self._transforms

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._transforms)


def default_registry() -> TransformRegistry:
    """A fresh registry holding the built-in transforms."""
    return TransformRegistry.with_builtins()
