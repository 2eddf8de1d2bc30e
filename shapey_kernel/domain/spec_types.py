"""
Spec types -- the normalised, tagged form of a reshaping spec.

Responsibility:
    Turn a caller-supplied spec mapping into a ``NormalizedSpec`` exactly
    once: every field is tagged TRANSFORM, NESTED or LITERAL, every
    transform is wrapped in its ``SafeTransform``, and the control fields
    (``shapeyMode``, ``shapeyTransforms``, ``shapeyDebug``) are resolved
    into enum values / an error policy and removed from the data fields.
    The engines then match on ``EntryKind`` instead of re-probing values.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Depends on predicates, callables and error_policy only.

Invariants enforced:
    - Control fields never appear among ``NormalizedSpec.entries``.
    - ``normalize_spec`` is idempotent: a ``NormalizedSpec`` is returned
      unchanged.
    - Unrecognised or non-string mode values fall back to the default;
      parsing never raises.
    - A nested spec inherits its parent's error policy unless it declares
      its own ``shapeyDebug``.

Usage:
    spec = normalize_spec({"name": str.strip, "kind": "user", "shapeyMode": "strict"})
    spec.mode                  # ShapeyMode.STRICT
    spec.literals()            # {"kind": "user"}
    spec.transforms().keys()   # ("name",)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from shapey_kernel.domain.error_policy import (
    ErrorPolicy,
    SafeTransform,
    SilentPolicy,
    resolve_error_policy,
)
from shapey_kernel.domain.predicates import (
    CONTROL_FIELDS,
    is_control_field,
    is_plain_mapping,
    is_transform,
    objectify,
)

__all__ = [
    "CONTROL_FIELDS",
    "EntryKind",
    "NormalizedSpec",
    "ShapeyMode",
    "SpecEntry",
    "TransformsMode",
    "apply_non_transform_props",
    "make_pruning_spec",
    "normalize_spec",
    "remove_control_fields",
]

_WHITESPACE = re.compile(r"\s+")


def _squash(value: str) -> str:
    return _WHITESPACE.sub("", value)


class ShapeyMode(str, Enum):
    """Which reshaping strategy decides the fields that survive."""

    LOOSE = "loose"
    STRICT = "strict"
    SUPER_STRICT = "super strict"
    SUPER_LOOSE = "super loose"
    KEEP = "keep"
    REMOVE = "remove"

    @classmethod
    def parse(cls, value: Any, default: ShapeyMode | None = None) -> ShapeyMode:
        """Resolve a ``shapeyMode`` value (case and whitespace insensitive)."""
        fallback = default if default is not None else cls.LOOSE
        if isinstance(value, ShapeyMode):
            return value
        if not isinstance(value, str):
            return fallback
        squashed = _squash(value)
        for pattern, mode in _MODE_PATTERNS:
            if pattern.search(squashed):
                return mode
        return fallback


# Order matters: "super strict" must be tested before "strict".
_MODE_PATTERNS: tuple[tuple[re.Pattern[str], ShapeyMode], ...] = (
    (re.compile(r"remove", re.IGNORECASE), ShapeyMode.REMOVE),
    (re.compile(r"keep", re.IGNORECASE), ShapeyMode.KEEP),
    (re.compile(r"super.?strict", re.IGNORECASE), ShapeyMode.SUPER_STRICT),
    (re.compile(r"strict", re.IGNORECASE), ShapeyMode.STRICT),
    (re.compile(r"super.?loose", re.IGNORECASE), ShapeyMode.SUPER_LOOSE),
    (re.compile(r"loose", re.IGNORECASE), ShapeyMode.LOOSE),
)


class TransformsMode(str, Enum):
    """How transform fields are computed."""

    DEFAULT = "default"  # prop-level when the key exists, whole-object otherwise
    PROP = "prop"  # always prop-level, even for absent keys
    WHOLE = "whole"  # always fed the entire input

    @classmethod
    def parse(
        cls, value: Any, default: TransformsMode | None = None
    ) -> TransformsMode:
        fallback = default if default is not None else cls.DEFAULT
        if isinstance(value, TransformsMode):
            return value
        if not isinstance(value, str):
            return fallback
        squashed = _squash(value).lower()
        if "prop" in squashed:
            return cls.PROP
        if "whole" in squashed:
            return cls.WHOLE
        return fallback


class EntryKind(str, Enum):
    TRANSFORM = "transform"
    NESTED = "nested"
    LITERAL = "literal"


@dataclass(frozen=True, slots=True)
class SpecEntry:
    """
    One data field of a spec.

    ``value`` is a ``SafeTransform`` for TRANSFORM, a ``NormalizedSpec``
    for NESTED and the raw value for LITERAL.
    """

    kind: EntryKind
    value: Any


@dataclass(frozen=True)
class NormalizedSpec:
    """
    A spec resolved into tagged entries plus its control settings.

    Contract:
        ``entries`` preserves the spec's key order and holds data fields
        only. Subset helpers (``transforms``, ``prop_level``, ``pick``)
        keep the mode, transforms mode and error policy.

    Guarantees:
        Frozen; helpers return new instances.
    """

    entries: Mapping[str, SpecEntry] = field(default_factory=dict)
    mode: ShapeyMode = ShapeyMode.LOOSE
    transforms_mode: TransformsMode = TransformsMode.DEFAULT
    error_policy: ErrorPolicy = field(default_factory=SilentPolicy)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def keys(self) -> tuple[str, ...]:
        return tuple(self.entries)

    def items(self) -> Iterable[tuple[str, SpecEntry]]:
        return self.entries.items()

    def _where(self, predicate) -> NormalizedSpec:
        return NormalizedSpec(
            entries={k: e for k, e in self.entries.items() if predicate(k, e)},
            mode=self.mode,
            transforms_mode=self.transforms_mode,
            error_policy=self.error_policy,
        )

    def transforms(self) -> NormalizedSpec:
        """Only the TRANSFORM entries."""
        return self._where(lambda k, e: e.kind is EntryKind.TRANSFORM)

    def nested(self) -> NormalizedSpec:
        return self._where(lambda k, e: e.kind is EntryKind.NESTED)

    def prop_level(self) -> NormalizedSpec:
        """TRANSFORM and NESTED entries (everything that computes a value)."""
        return self._where(lambda k, e: e.kind is not EntryKind.LITERAL)

    def pick(self, keys: Iterable[str]) -> NormalizedSpec:
        wanted = set(keys)
        return self._where(lambda k, e: k in wanted)

    def literals(self) -> dict[str, Any]:
        """Raw values of the LITERAL entries."""
        return {
            k: e.value
            for k, e in self.entries.items()
            if e.kind is EntryKind.LITERAL
        }


def normalize_spec(
    spec: Any,
    *,
    default_mode: ShapeyMode | None = None,
    default_transforms: TransformsMode | None = None,
    default_debug: Any = None,
    policy: ErrorPolicy | None = None,
    logger: logging.Logger | None = None,
) -> NormalizedSpec:
    """
    Resolve ``spec`` into a ``NormalizedSpec``.

    Args:
        spec: A spec mapping (non-mappings normalise to an empty spec) or
            an already normalised spec, which is returned as-is.
        default_mode: Mode used when the spec has no usable ``shapeyMode``.
        default_transforms: Same, for ``shapeyTransforms``.
        default_debug: ``shapeyDebug`` value used when the spec has none.
        policy: Inherited error policy (nested specs); wins over
            ``default_debug`` but not over the spec's own ``shapeyDebug``.
        logger: Logger for the logging policy.
    """
    if isinstance(spec, NormalizedSpec):
        return spec

    raw = objectify(spec)
    if "shapeyDebug" in raw:
        policy = resolve_error_policy(raw["shapeyDebug"], logger)
    elif policy is None:
        policy = resolve_error_policy(default_debug, logger)

    entries: dict[str, SpecEntry] = {}
    for key, val in raw.items():
        if is_control_field(key):
            continue
        if isinstance(val, NormalizedSpec):
            entries[key] = SpecEntry(EntryKind.NESTED, val)
        elif is_transform(val):
            entries[key] = SpecEntry(
                EntryKind.TRANSFORM, SafeTransform(val, key, policy)
            )
        elif is_plain_mapping(val):
            entries[key] = SpecEntry(
                EntryKind.NESTED,
                normalize_spec(val, policy=policy, logger=logger),
            )
        else:
            entries[key] = SpecEntry(EntryKind.LITERAL, val)

    return NormalizedSpec(
        entries=entries,
        mode=ShapeyMode.parse(raw.get("shapeyMode"), default_mode),
        transforms_mode=TransformsMode.parse(
            raw.get("shapeyTransforms"), default_transforms
        ),
        error_policy=policy,
    )


def remove_control_fields(value: Any) -> Any:
    """Drop the control fields from a plain mapping; other values pass through."""
    if not is_plain_mapping(value):
        return value
    return {k: v for k, v in value.items() if not is_control_field(k)}



def make_pruning_spec(spec: Any) -> NormalizedSpec:
    """
    Keep the entries acceptable to the keep/remove modes.

    A field takes part in pruning when its value is ``True``, a transform,
    or the field's own name (``{"id": "id"}``). Anything else is ignored.
    """
    return normalize_spec(spec)._where(
        lambda k, e: e.kind is EntryKind.TRANSFORM
        or (
            e.kind is EntryKind.LITERAL
            and (e.value is True or (isinstance(e.value, str) and e.value == k))
        )
    )


def apply_non_transform_props(spec: Any, value: Any) -> Any:
    """Merge the spec's literal fields onto ``value`` when it is a plain mapping."""
    if not is_plain_mapping(value):
        return value
    return {**value, **normalize_spec(spec).literals()}
