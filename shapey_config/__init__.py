"""
shapey_config -- settings and YAML spec documents.

Responsibility:
    Load process-level ``ShapeySettings`` and YAML spec documents for the
    reshaping engines. Settings supply the defaults a spec does not
    declare; spec documents name their transforms via ``!transform`` and a
    ``TransformRegistry``.

Architecture position:
    Configuration -- above ``shapey_kernel``. ``shapey_engines`` only sees
    the resulting ``ShapeySettings`` / spec mappings, never a file.

Failure modes:
    - ``InvalidSettingError`` -- unknown setting or invalid value.
    - ``UnknownTransformError`` -- a document names an unregistered transform.
    - ``SpecDocumentError`` -- a spec document is not a mapping.

Usage:
    settings = load_settings("shapey.yaml")
    configure_from_settings(settings)
    spec = load_spec("user.yaml")
    make_shaper(spec, record, settings=settings)
"""

from __future__ import annotations

import logging
from typing import Any

from shapey_config.loader import (
    load_settings,
    load_spec,
    load_yaml_file,
    parse_settings,
    parse_spec_document,
)
from shapey_config.schema import ShapeySettings
from shapey_config.transforms import TransformRegistry, default_registry
from shapey_kernel.logging_config import configure_logging

__all__ = [
    "ShapeySettings",
    "TransformRegistry",
    "configure_from_settings",
    "default_registry",
    "load_settings",
    "load_spec",
    "load_yaml_file",
    "parse_settings",
    "parse_spec_document",
]


def configure_from_settings(
    settings: ShapeySettings,
    *,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Configure shapey logging at ``settings.log_level`` (idempotent)."""
    configure_logging(level=settings.log_level, stream=stream, handler=handler)
