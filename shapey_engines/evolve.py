"""
shapey_engines.evolve -- Prop-level field applicators.

Responsibility:
    ``evolve_spec`` walks the INPUT's keys: a transform under the same key
    receives that key's value, a nested spec recurses into it, a literal
    overwrites it and an unnamed key passes through. It never adds keys.

    ``always_evolve`` walks the SPEC's keys: every transform is applied to
    the input's value for its key, ``None`` when the key is absent, so
    transforms must tolerate a missing value. Keys that only exist in the
    input are dropped.

Architecture position:
    Engines -- pure reshaping layer, zero I/O. Both functions accept a raw
    spec mapping or a ``NormalizedSpec``; a raw spec is normalised once per
    call (once per partial when used curried).

Invariants enforced:
    - ``evolve_spec`` output keys == input keys.
    - ``always_evolve`` output keys == spec data keys.
    - Recursion depth equals nested-spec depth.
    - A non-mapping input is treated as an empty mapping.
"""

from __future__ import annotations

import functools
from typing import Any

from shapey_engines._missing import MISSING
from shapey_kernel.domain.predicates import objectify
from shapey_kernel.domain.spec_types import EntryKind, normalize_spec


def evolve_spec(spec: Any, value: Any = MISSING) -> Any:
    """Apply ``spec`` at the prop level to the keys present in ``value``."""
    spec = normalize_spec(spec)
    if value is MISSING:
        return functools.partial(evolve_spec, spec)

    result: dict[str, Any] = {}
    for key, val in objectify(value).items():
        entry = spec.entries.get(key)
        if entry is None:
            result[key] = val
        elif entry.kind is EntryKind.TRANSFORM:
            result[key] = entry.value(val)
        elif entry.kind is EntryKind.NESTED:
            result[key] = evolve_spec(entry.value, val)
        else:
            result[key] = entry.value
    return result


def always_evolve(spec: Any, value: Any = MISSING) -> Any:
    """Apply every field of ``spec`` at the prop level, present in ``value`` or not."""
    spec = normalize_spec(spec)
    if value is MISSING:
        return functools.partial(always_evolve, spec)

    obj = objectify(value)
    result: dict[str, Any] = {}
    for key, entry in spec.items():
        if entry.kind is EntryKind.TRANSFORM:
            result[key] = entry.value(obj.get(key))
        elif entry.kind is EntryKind.NESTED:
            result[key] = always_evolve(entry.value, obj.get(key))
        else:
            result[key] = entry.value
    return result
