"""
Typed exception hierarchy for shapey.

The reshaping engines never raise: a failing transform is routed through
its spec's error policy, a shape mismatch is coerced, and an unknown mode
string falls back to the default strategy. The exceptions below belong to
the surfaces around the engines (settings and spec documents), where a
bad value is a configuration mistake that should stop the caller early.

    ShapeyError (base)
    |
    +-- ConfigError
        +-- InvalidSettingError
        +-- UnknownTransformError
        +-- SpecDocumentError

Every class carries a ``code`` class attribute (machine-readable) and
keeps its context as attributes, so structured log records can pick them
up (see ``StructuredFormatter``):

    try:
        settings = load_settings(path)
    except InvalidSettingError as e:
        log.error("bad_setting", extra={"code": e.code, "setting": e.setting})
"""

from __future__ import annotations

from typing import Any


class ShapeyError(Exception):
    """Base exception for all shapey errors."""

    code: str = "SHAPEY_ERROR"


class ConfigError(ShapeyError):
    """Base exception for settings and spec document problems."""

    code: str = "CONFIG_ERROR"


class InvalidSettingError(ConfigError):
    """A settings value is not one of the accepted choices."""

    code: str = "INVALID_SETTING"

    def __init__(self, setting: str, value: Any, expected: str):
        self.setting = setting
        self.value = value
        self.expected = expected
        super().__init__(
            f"Invalid value {value!r} for setting {setting!r}: expected {expected}"
        )


class UnknownTransformError(ConfigError):
    """A spec document names a transform that is not registered."""

    code: str = "UNKNOWN_TRANSFORM"

    def __init__(self, name: str, available: tuple[str, ...] = ()):
        self.name = name
        self.available = available
        super().__init__(
            f"Unknown transform {name!r}"
            + (f" (available: {', '.join(available)})" if available else "")
        )


class SpecDocumentError(ConfigError):
    """A spec document could not be turned into a spec mapping."""

    code: str = "SPEC_DOCUMENT_ERROR"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid spec document {source}: {reason}")
