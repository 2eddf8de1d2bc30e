"""
Predicates -- primitive value classifiers used throughout the engines.

Responsibility:
    Decide what a value *is* for reshaping purposes: a plain mapping, an
    array, a number, a transform. Also hosts the tiny coercions the
    engines build on (objectify, constant functions).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by every other domain module and every engine.

Invariants enforced:
    - Mapping-ness and array-ness are exact-type checks: a ``dict``
      subclass, a tuple or a callable object is NOT a plain mapping / array.
    - ``bool`` is never a number (``combine(True, False)`` must not add).
"""

from __future__ import annotations

from collections.abc import Callable
from numbers import Number
from typing import Any

# Reserved spec keys: configuration, never data.
CONTROL_FIELDS: tuple[str, ...] = ("shapeyMode", "shapeyTransforms", "shapeyDebug")


def is_control_field(key: Any) -> bool:
    return key in CONTROL_FIELDS


def is_plain_mapping(value: Any) -> bool:
    """True iff ``value`` is exactly a ``dict``."""
    return type(value) is dict


def is_array(value: Any) -> bool:
    """True iff ``value`` is exactly a ``list``."""
    return type(value) is list


def is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def is_transform(value: Any) -> bool:
    return callable(value)


def is_empty_container(value: Any) -> bool:
    """True iff ``value`` is a mapping, list, tuple or string of length 0."""
    if isinstance(value, (dict, list, tuple, str)):
        return len(value) == 0
    return False


def objectify(value: Any) -> dict:
    """Return ``value`` if it is a plain mapping, otherwise an empty dict."""
    return value if is_plain_mapping(value) else {}


def always_function(value: Any) -> Callable[..., Any]:
    """Return ``value`` if callable, otherwise a function that always returns it."""
    if is_transform(value):
        return value

    def constant(*args: Any) -> Any:
        return value

    return constant

