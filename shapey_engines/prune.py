"""
shapey_engines.prune -- Keep / remove named fields, optionally reshaping them.

Responsibility:
    Select or drop input fields by name before (or instead of) reshaping.
    In the pruning modes a spec field takes part only when its value is
    ``True``, a transform, or its own key name (``{"id": "id"}``); any
    other value is ignored, so ``{"id": 0}`` neither keeps nor removes.

Architecture position:
    Engines -- pure reshaping layer, zero I/O.

Invariants enforced:
    - ``keeper`` output keys are a subset of both the input's keys and the
      pruning spec's keys.
    - ``remover`` never drops a field that carries a transform; that field
      is reshaped instead (see ``remove_and_shape``).
    - Non-mapping input behaves as an empty mapping.
"""

from __future__ import annotations

import functools
from typing import Any

from shapey_engines._missing import MISSING
from shapey_engines.evolve import evolve_spec
from shapey_kernel.domain.predicates import objectify
from shapey_kernel.domain.spec_types import EntryKind, make_pruning_spec, normalize_spec


def keeper(spec: Any, value: Any = MISSING) -> Any:
    """Keep only the input fields named by the pruning spec."""
    spec = normalize_spec(spec)
    if value is MISSING:
        return functools.partial(keeper, spec)

    obj = objectify(value)
    return {key: obj[key] for key in make_pruning_spec(spec) if key in obj}


def remover(spec: Any, value: Any = MISSING) -> Any:
    """Drop the input fields named (without a transform) by the pruning spec."""
    spec = normalize_spec(spec)
    if value is MISSING:
        return functools.partial(remover, spec)

    doomed = {
        key
        for key, entry in make_pruning_spec(spec).items()
        if entry.kind is not EntryKind.TRANSFORM
    }
    return {key: val for key, val in objectify(value).items() if key not in doomed}


def keep_and_shape(spec: Any, value: Any = MISSING) -> Any:
    """``keeper``, then prop-level transforms for the spec's transform fields."""
    spec = normalize_spec(spec)
    if value is MISSING:
        return functools.partial(keep_and_shape, spec)
    return evolve_spec(spec.transforms(), keeper(spec, value))


def remove_and_shape(spec: Any, value: Any = MISSING) -> Any:
    """``remover``, then prop-level transforms for the spec's transform fields."""
    spec = normalize_spec(spec)
    if value is MISSING:
        return functools.partial(remove_and_shape, spec)
    return evolve_spec(spec.transforms(), remover(spec, value))


def implied_remove(spec: Any, value: Any = MISSING) -> Any:
    """Keep only the input fields whose key appears in the spec, whatever its value."""
    spec = normalize_spec(spec)
    if value is MISSING:
        return functools.partial(implied_remove, spec)

    obj = objectify(value)
    return {key: obj[key] for key in spec if key in obj}
