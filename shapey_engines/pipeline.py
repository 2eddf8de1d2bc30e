"""
shapey_engines.pipeline -- Sequential composition of shapers.

Responsibility:
    ``shapeline`` threads one value through a list of specs, each stage
    reshaping the previous stage's output with ``make_shaper``. A stage
    may be any spec ``make_shaper`` accepts: a spec mapping, a callable or
    a constant.

Architecture position:
    Engines -- the outermost reshaping entry point. Stateless; the only
    side effect is the DEBUG trace record per run and per stage.

Invariants enforced:
    - Strictly ordered, single pass: stage ``i`` sees the output of stage
      ``i - 1`` and nothing else.
    - ``None`` as the step list is the identity pipeline.
    - Every stage runs under ``LogContext.bind(pipeline_step=i)``, so a
      failed-transform record logged by stage ``i`` carries ``i``.

Usage:
    average = shapeline([
        {"sum": sum, "count": len},
        lambda s: s["sum"] / (s["count"] or 1),
    ])
    average([100, 200])   # 150.0
"""

from __future__ import annotations

import functools
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from shapey_engines._missing import MISSING
from shapey_engines.dispatcher import Shaper
from shapey_engines.tracer import traced_engine
from shapey_kernel.logging_config import LogContext

if TYPE_CHECKING:
    from shapey_config.schema import ShapeySettings


@traced_engine("shapeline", "1.0", fingerprint_fields=("value",))
def _run(shapers: tuple[Shaper, ...], value: Any) -> Any:
    for index, shaper in enumerate(shapers):
        with LogContext.bind(pipeline_step=index):
            value = shaper(value)
    return value


def shapeline(
    steps: Iterable[Any] | None,
    value: Any = MISSING,
    *,
    settings: ShapeySettings | None = None,
) -> Any:
    """
    Run ``value`` through every step in order.

    Called without ``value``, the steps are resolved into shapers once and
    a reusable ``value -> value`` function is returned.
    """
    shapers = tuple(Shaper(step, settings=settings) for step in (steps or ()))
    if value is MISSING:
        return functools.partial(_run, shapers)
    return _run(shapers, value)
