"""
Shapey settings schema.

Process-level defaults for the reshaping engines. A spec's own control
fields always win; settings only fill in what a spec leaves unsaid:

  default_mode        -> ``shapeyMode`` of specs without one
  default_transforms  -> ``shapeyTransforms`` of specs without one
  debug               -> ``shapeyDebug`` of specs without one
  log_level           -> level handed to ``configure_logging``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from shapey_kernel.domain.spec_types import ShapeyMode, TransformsMode


@dataclass(frozen=True)
class ShapeySettings:
    """Defaults applied by ``make_shaper`` / ``shapeline``."""

    default_mode: ShapeyMode = ShapeyMode.LOOSE
    default_transforms: TransformsMode = TransformsMode.DEFAULT
    debug: bool | str | None = None  # None, True or "skip"
    log_level: int = logging.INFO
