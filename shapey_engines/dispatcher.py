"""
shapey_engines.dispatcher -- Mode-driven selection of a reshaping strategy.

Responsibility:
    ``make_shaper`` reads a spec's control fields once and applies the
    matching strategy. Two orthogonal axes are resolved from the spec:

    * ``shapeyTransforms`` (``TransformsMode``, checked first) decides HOW
      fields are computed:
        - PROP:  every field at the prop level (``always_evolve``);
        - WHOLE: every field from the whole input (``map_spec``);
        - DEFAULT: the strategy's own prop / whole split.
    * ``shapeyMode`` (``ShapeyMode``) decides WHICH fields survive:

    ============  =============================================
    REMOVE        ``remove_and_shape``
    KEEP          ``keep_and_shape``
    SUPER_STRICT  ``shape_super_strictly``
    STRICT        ``shape_strictly``
    SUPER_LOOSE   ``shape_super_loosely``
    LOOSE         ``shape_loosely`` (default, also for unknown modes)
    ============  =============================================

    With an explicit transforms mode the computed fields are the result,
    except for KEEP / REMOVE, where the computed transform fields are laid
    over the kept / remaining input fields.

    A spec that is a callable is applied to the input directly; any other
    non-mapping spec is a constant and the input is ignored.

Architecture position:
    Engines -- the single entry point used by ``shapeline``. Pure except
    for the DEBUG trace record emitted per call.

Invariants enforced:
    - Control fields are stripped from a mapping result as the very last
      step, including control-named keys carried in from the input.
    - The spec is normalised once per ``Shaper``; repeated calls do not
      re-parse mode strings.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from shapey_engines._missing import MISSING
from shapey_engines.evolve import always_evolve
from shapey_engines.map_spec import map_spec
from shapey_engines.prune import keep_and_shape, keeper, remove_and_shape, remover
from shapey_engines.shapers import (
    shape_loosely,
    shape_strictly,
    shape_super_loosely,
    shape_super_strictly,
)
from shapey_engines.tracer import traced_engine
from shapey_kernel.domain.callables import invoke
from shapey_kernel.domain.predicates import is_plain_mapping, is_transform
from shapey_kernel.domain.spec_types import (
    NormalizedSpec,
    ShapeyMode,
    TransformsMode,
    normalize_spec,
    remove_control_fields,
)
from shapey_kernel.logging_config import LogContext

if TYPE_CHECKING:
    from shapey_config.schema import ShapeySettings

_STRATEGIES: dict[ShapeyMode, Callable[[NormalizedSpec, Any], Any]] = {
    ShapeyMode.REMOVE: remove_and_shape,
    ShapeyMode.KEEP: keep_and_shape,
    ShapeyMode.SUPER_STRICT: shape_super_strictly,
    ShapeyMode.STRICT: shape_strictly,
    ShapeyMode.SUPER_LOOSE: shape_super_loosely,
    ShapeyMode.LOOSE: shape_loosely,
}

_PRUNERS: dict[ShapeyMode, Callable[[NormalizedSpec, Any], dict]] = {
    ShapeyMode.KEEP: keeper,
    ShapeyMode.REMOVE: remover,
}


def _compute(spec: NormalizedSpec, value: Any) -> dict:
    if spec.transforms_mode is TransformsMode.PROP:
        return always_evolve(spec, value)
    return map_spec(spec, value)


def apply_normalized(spec: NormalizedSpec, value: Any) -> Any:
    """Apply an already normalised spec according to its two mode axes."""
    if spec.transforms_mode is TransformsMode.DEFAULT:
        result = _STRATEGIES[spec.mode](spec, value)
    elif spec.mode in _PRUNERS:
        result = {
            **_PRUNERS[spec.mode](spec, value),
            **_compute(spec.transforms(), value),
        }
    else:
        result = _compute(spec, value)
    return remove_control_fields(result)


class Shaper:
    """
    A spec resolved once into a reusable ``value -> value`` callable.

    Contract:
        ``Shaper(spec)(value) == make_shaper(spec, value)`` for every value.
        Mapping specs are normalised at construction, with ``settings``
        supplying the mode, transforms mode and ``shapeyDebug`` defaults
        for specs that do not declare their own.
    """

    __slots__ = ("spec", "_apply", "_mode_label")

    def __init__(self, spec: Any, *, settings: ShapeySettings | None = None):
        if isinstance(spec, NormalizedSpec) or is_plain_mapping(spec):
            if settings is not None:
                spec = normalize_spec(
                    spec,
                    default_mode=settings.default_mode,
                    default_transforms=settings.default_transforms,
                    default_debug=settings.debug,
                )
            else:
                spec = normalize_spec(spec)
            normalized = spec
            self._apply = lambda value: apply_normalized(normalized, value)
            self._mode_label = f"{spec.mode.value}/{spec.transforms_mode.value}"
        elif is_transform(spec):
            fn = spec
            self._apply = lambda value: invoke(fn, value)
            self._mode_label = "function"
        else:
            constant = spec
            self._apply = lambda value: constant
            self._mode_label = "constant"
        self.spec = spec

    @property
    def mode_label(self) -> str:
        return self._mode_label

    @traced_engine("make_shaper", "1.0", fingerprint_fields=("value",))
    def __call__(self, value: Any) -> Any:
        with LogContext.bind(shaper_mode=self._mode_label):
            return remove_control_fields(self._apply(value))

    def __repr__(self) -> str:
        return f"Shaper({self._mode_label})"


def make_shaper(
    spec: Any,
    value: Any = MISSING,
    *,
    settings: ShapeySettings | None = None,
) -> Any:
    """
    Reshape ``value`` with whichever strategy ``spec`` selects.

    Called without ``value``, returns a reusable ``Shaper``.
    """
    shaper = Shaper(spec, settings=settings)
    if value is MISSING:
        return shaper
    return shaper(value)
