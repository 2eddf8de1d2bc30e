"""
shapey_engines.combine -- Type-dispatching merge of two values.

Responsibility:
    Combine two values of the same kind when it makes sense to: numbers
    are summed, strings and lists concatenated, plain mappings shallowly
    merged (right side wins). Any other pairing yields the left value.

Architecture position:
    Engines -- pure, total function; never raises for any pair of inputs.
    Numbers that cannot be added to each other yield the left value.

Usage:
    combine(1, 2)                   # 3
    combine("foo", "bar")           # "foobar"
    combine([1, 2], [3])            # [1, 2, 3]
    combine({"a": 1}, {"b": 2})     # {"a": 1, "b": 2}
    combine(2, "two")               # 2
"""

from __future__ import annotations

import functools
from typing import Any

from shapey_engines._missing import MISSING
from shapey_kernel.domain.predicates import is_array, is_number, is_plain_mapping


def combine(first: Any, second: Any = MISSING) -> Any:
    """
    Combine ``second`` into ``first``.

    Called with one argument, returns a function awaiting ``second``.
    ``None`` never matches any kind, so ``combine(None, x)`` is ``None``
    and ``combine(x, None)`` is ``x``.
    """
    if second is MISSING:
        return functools.partial(combine, first)
    if is_number(first) and is_number(second):
        try:
            return first + second
        except TypeError:
            # Decimal + float, Fraction + Decimal and the like.
            return first
    if isinstance(first, str) and isinstance(second, str):
        return first + second
    if is_array(first) and is_array(second):
        return [*first, *second]
    if is_plain_mapping(first) and is_plain_mapping(second):
        return {**first, **second}
    return first
