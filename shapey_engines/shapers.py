"""
shapey_engines.shapers -- Composite reshaping strategies.

Responsibility:
    Blend an input with a copy of itself reshaped by a spec. Every
    strategy is the same three-layer composition:

    1. literal spec fields are laid over the input (overwriting);
    2. a prop-level layer computes the spec's transform / nested fields;
    3. a whole-object layer computes the fields the prop-level layer did
       not produce, feeding each transform the prop-level result -- or the
       ORIGINAL input when the prop-level result is empty, which is how a
       list input reaches ``{"total": sum, "count": len}``.

    The strategies differ only in the prop-level layer:

    ====================  ================================================
    shape_loosely         ``evolve_spec``: keys present in the input get
                          prop-level transforms, the rest go whole-object
    shape_strictly        ``shape_loosely``, then only spec keys survive
    shape_super_strictly  ``always_evolve``: every spec field is produced
                          at the prop level (``None`` when absent); only
                          spec keys survive
    shape_super_loosely   ``map_spec``: every transform gets the whole
                          (literal-merged) input; only spec fields survive
    ====================  ================================================

Architecture position:
    Engines -- pure reshaping layer, zero I/O. Dispatched to by
    ``shapey_engines.dispatcher``.

Invariants enforced:
    - ``shape_loosely({}, m) == m`` for any plain mapping ``m``.
    - ``shape_strictly`` / ``shape_super_strictly`` output keys are a
      subset of the spec's data keys.
    - The input is never mutated.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any

from shapey_engines._missing import MISSING
from shapey_engines.evolve import always_evolve, evolve_spec
from shapey_engines.map_spec import map_spec
from shapey_kernel.domain.predicates import objectify
from shapey_kernel.domain.spec_types import (
    NormalizedSpec,
    apply_non_transform_props,
    normalize_spec,
)

# (spec, input with literals laid over it, original input) -> prop-level layer
PropLayer = Callable[[NormalizedSpec, dict, Any], dict]


def _evolve_layer(spec: NormalizedSpec, with_literals: dict, value: Any) -> dict:
    return evolve_spec(spec.prop_level(), with_literals)


def _always_evolve_layer(spec: NormalizedSpec, with_literals: dict, value: Any) -> dict:
    # Literal entries re-emit their own value, so the whole spec is passed.
    return always_evolve(spec, with_literals)


def _whole_object_layer(spec: NormalizedSpec, with_literals: dict, value: Any) -> dict:
    return map_spec(spec.prop_level(), with_literals if with_literals else value)


def _base_shape(prop_layer: PropLayer, spec: NormalizedSpec, value: Any) -> dict:
    with_literals = apply_non_transform_props(spec, objectify(value))
    evolved = prop_layer(spec, with_literals, value)

    prop_level = spec.prop_level()
    remaining = [key for key in prop_level if key not in evolved]
    whole = map_spec(prop_level.pick(remaining), evolved if evolved else value)
    return {**evolved, **whole}


def shape_loosely(spec: Any, value: Any = MISSING) -> Any:
    """
    Reshape ``value`` with ``spec``, keeping every input field.

    Transforms whose key exists in the input are applied at the prop level
    (like ``evolve_spec``); transforms whose key does not exist create that
    key from the whole input (like ``map_spec``). Literal fields are added
    or overwrite.
    """
    spec = normalize_spec(spec)
    if value is MISSING:
        return functools.partial(shape_loosely, spec)
    return _base_shape(_evolve_layer, spec, value)


def shape_strictly(spec: Any, value: Any = MISSING) -> Any:
    """Like ``shape_loosely`` but only fields named in the spec survive."""
    spec = normalize_spec(spec)
    if value is MISSING:
        return functools.partial(shape_strictly, spec)

    shaped = shape_loosely(spec, value)
    return {key: shaped[key] for key in spec if key in shaped}


def shape_super_strictly(spec: Any, value: Any = MISSING) -> Any:
    """
    Produce exactly the spec's fields, every transform at the prop level.

    A transform whose key is absent from the input receives ``None``; it
    is never handed the whole input.
    """
    spec = normalize_spec(spec)
    if value is MISSING:
        return functools.partial(shape_super_strictly, spec)
    return _base_shape(_always_evolve_layer, spec, value)


def shape_super_loosely(spec: Any, value: Any = MISSING) -> Any:
    """
    Compute each transform or nested field from the whole input.

    Only the spec's computed fields are returned; input fields and literals
    do not pass through.
    """
    spec = normalize_spec(spec)
    if value is MISSING:
        return functools.partial(shape_super_loosely, spec)
    return _base_shape(_whole_object_layer, spec, value)


shape = shape_loosely
