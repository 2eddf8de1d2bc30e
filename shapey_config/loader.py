"""
Settings and spec document loader (``shapey_config.loader``).

Responsibility
--------------
Loads YAML files and parses them into the typed objects the engines
consume: ``ShapeySettings`` from a settings document, and plain spec
mappings from a spec document. Spec documents name their transforms with
a ``!transform <name>`` tag, resolved against a ``TransformRegistry``:

    # user.yaml
    shapeyMode: strict
    name: !transform strip
    email: !transform lower
    source: import

Architecture position
---------------------
**Config layer** -- sits above ``shapey_kernel`` and beside
``shapey_engines``. The engines never read files; callers load a spec or
settings here and pass the result to ``make_shaper`` / ``shapeline``.

Invariants enforced
-------------------
* Settings values are validated strictly: a mode string must name a mode
  exactly (case, spacing and ``_``/``-`` separators aside). The lenient
  parsing of ``shapeyMode`` inside specs does not apply here.
* Every parsed settings object is a frozen ``ShapeySettings``.
* YAML is read with a ``SafeLoader`` subclass; only the ``!transform``
  tag is added.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid or unknown setting  -> ``InvalidSettingError``.
* Unregistered transform name  -> ``UnknownTransformError``.
* Spec document that is not a mapping  -> ``SpecDocumentError``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from yaml.constructor import ConstructorError

from shapey_config.schema import ShapeySettings
from shapey_config.transforms import TransformRegistry, default_registry
from shapey_kernel.domain.spec_types import ShapeyMode, TransformsMode
from shapey_kernel.exceptions import InvalidSettingError, SpecDocumentError
from shapey_kernel.logging_config import get_logger

_logger = get_logger("config")

_SETTING_KEYS = ("default_mode", "default_transforms", "debug", "log_level")


def load_yaml_file(path: Path) -> Any:
    """
    Load a single YAML file and return its contents.

    Preconditions:
        - ``path`` must point to an existing, readable YAML file.
    Postconditions:
        - Returns the parsed document, ``{}`` if the file is empty.
    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        data = yaml.safe_load(f)
    return {} if data is None else data


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def _canonical_choice(value: str) -> str:
    return " ".join(value.replace("_", " ").replace("-", " ").lower().split())


def parse_mode(value: Any) -> ShapeyMode:
    """Parse ``default_mode``. Raises InvalidSettingError on anything but an exact mode name."""
    if isinstance(value, ShapeyMode):
        return value
    if isinstance(value, str):
        try:
            return ShapeyMode(_canonical_choice(value))
        except ValueError:
            pass
    raise InvalidSettingError(
        "default_mode", value, "one of " + ", ".join(m.value for m in ShapeyMode)
    )


def parse_transforms_mode(value: Any) -> TransformsMode:
    if isinstance(value, TransformsMode):
        return value
    if isinstance(value, str):
        try:
            return TransformsMode(_canonical_choice(value))
        except ValueError:
            pass
    raise InvalidSettingError(
        "default_transforms",
        value,
        "one of " + ", ".join(m.value for m in TransformsMode),
    )


def parse_debug(value: Any) -> bool | str | None:
    """``debug``: null/false (silent), true (log failures) or "skip"."""
    if value is None or value is False:
        return None
    if value is True:
        return True
    if isinstance(value, str) and value.strip().lower() == "skip":
        return "skip"
    raise InvalidSettingError("debug", value, 'null, true, false or "skip"')


def parse_log_level(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        level = logging.getLevelNamesMapping().get(value.strip().upper())
        if level is not None:
            return level
    raise InvalidSettingError(
        "log_level", value, "a logging level name or number"
    )


def parse_settings(data: dict[str, Any] | None) -> ShapeySettings:
    """
    Parse ``ShapeySettings`` from a dict.

    Preconditions:
        - ``data`` is a mapping of setting name to value; a top-level
          ``shapey`` key, when present, holds that mapping instead.
    Postconditions:
        - Absent settings take the ``ShapeySettings`` defaults.
    Raises:
        InvalidSettingError: on an unknown key or an invalid value.
    """
    data = data or {}
    if not isinstance(data, dict):
        raise InvalidSettingError("<document>", data, "a mapping of settings")
    if isinstance(data.get("shapey"), dict):
        data = data["shapey"]

    for key in data:
        if key not in _SETTING_KEYS:
            raise InvalidSettingError(
                str(key), data[key], "a known setting (" + ", ".join(_SETTING_KEYS) + ")"
            )

    defaults = ShapeySettings()
    return ShapeySettings(
        default_mode=(
            parse_mode(data["default_mode"])
            if "default_mode" in data
            else defaults.default_mode
        ),
        default_transforms=(
            parse_transforms_mode(data["default_transforms"])
            if "default_transforms" in data
            else defaults.default_transforms
        ),
        debug=parse_debug(data.get("debug")),
        log_level=(
            parse_log_level(data["log_level"])
            if "log_level" in data
            else defaults.log_level
        ),
    )


def load_settings(path: Path | str) -> ShapeySettings:
    """Load and parse a settings YAML file."""
    settings = parse_settings(load_yaml_file(Path(path)))
    _logger.debug(
        "settings_loaded",
        extra={
            "path": str(path),
            "default_mode": settings.default_mode.value,
            "default_transforms": settings.default_transforms.value,
        },
    )
    return settings


# ---------------------------------------------------------------------------
# Spec documents
# ---------------------------------------------------------------------------


class SpecLoader(yaml.SafeLoader):
    """SafeLoader that resolves ``!transform <name>`` through a registry."""

    def __init__(self, stream: Any, registry: TransformRegistry):
        super().__init__(stream)
        self.registry = registry


def _construct_transform(loader: SpecLoader, node: yaml.Node) -> Any:
    if not isinstance(node, yaml.ScalarNode):
        raise ConstructorError(
            None, None, "!transform expects a transform name", node.start_mark
        )
    return loader.registry.get(loader.construct_scalar(node))


SpecLoader.add_constructor("!transform", _construct_transform)


def parse_spec_document(
    text: str,
    registry: TransformRegistry | None = None,
    *,
    source: str = "<string>",
) -> dict[str, Any]:
    """
    Parse a YAML spec document into a spec mapping.

    Raises:
        UnknownTransformError: if a ``!transform`` names an unregistered transform.
        SpecDocumentError: if the document is not a mapping.
        yaml.YAMLError: if the text is not valid YAML.
    """
    loader = SpecLoader(text, registry if registry is not None else default_registry())
    try:
        data = loader.get_single_data()
    finally:
        loader.dispose()

    if not isinstance(data, dict):
        raise SpecDocumentError(
            source, f"expected a mapping at the top level, got {type(data).__name__}"
        )
    return data


def load_spec(
    path: Path | str,
    registry: TransformRegistry | None = None,
) -> dict[str, Any]:
    """Load a YAML spec document from ``path``."""
    path = Path(path)
    with open(path) as f:
        text = f.read()
    spec = parse_spec_document(text, registry, source=str(path))
    _logger.debug("spec_loaded", extra={"path": str(path), "fields": len(spec)})
    return spec
