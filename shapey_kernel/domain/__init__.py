"""
Pure domain layer.

Value predicates, callable arity helpers, error policies and the
normalised spec types. No I/O, no global state; every object here is
immutable once built.
"""

from shapey_kernel.domain.callables import (
    CallShape,
    call_shape,
    invoke,
    transform_arity,
)
from shapey_kernel.domain.error_policy import (
    ErrorPolicy,
    HandlerPolicy,
    LoggingPolicy,
    SafeTransform,
    SilentPolicy,
    SkipPolicy,
    resolve_error_policy,
)
from shapey_kernel.domain.predicates import (
    CONTROL_FIELDS,
    always_function,
    is_array,
    is_control_field,
    is_empty_container,
    is_number,
    is_plain_mapping,
    is_transform,
    objectify,
)
from shapey_kernel.domain.spec_types import (
    EntryKind,
    NormalizedSpec,
    ShapeyMode,
    SpecEntry,
    TransformsMode,
    apply_non_transform_props,
    make_pruning_spec,
    normalize_spec,
    remove_control_fields,
)

__all__ = [
    "CONTROL_FIELDS",
    "CallShape",
    "EntryKind",
    "ErrorPolicy",
    "HandlerPolicy",
    "LoggingPolicy",
    "NormalizedSpec",
    "SafeTransform",
    "ShapeyMode",
    "SilentPolicy",
    "SkipPolicy",
    "SpecEntry",
    "TransformsMode",
    "always_function",
    "apply_non_transform_props",
    "call_shape",
    "invoke",
    "is_array",
    "is_control_field",
    "is_empty_container",
    "is_number",
    "is_plain_mapping",
    "is_transform",
    "make_pruning_spec",
    "normalize_spec",
    "objectify",
    "remove_control_fields",
    "resolve_error_policy",
    "transform_arity",
]
