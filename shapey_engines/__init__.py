"""
Shapey Engines

Pure reshaping engines over plain mappings:
- combine: type-dispatching merge of two values
- evolve / map_spec: prop-level and whole-object field applicators
- prune: keep / remove named fields
- shapers: composite loose / strict / super strict / super loose strategies
- dispatcher: mode-driven strategy selection (``make_shaper``)
- pipeline: sequential composition (``shapeline``)

Every operation takes its data argument last and optionally; called with
the spec alone it returns a reusable callable.
"""

from shapey_engines.combine import combine
from shapey_engines.dispatcher import Shaper, make_shaper
from shapey_engines.evolve import always_evolve, evolve_spec
from shapey_engines.map_spec import (
    SpecApplicator,
    build_spec_applicator,
    map_spec,
    merge_spec,
)
from shapey_engines.pipeline import shapeline
from shapey_engines.prune import (
    implied_remove,
    keep_and_shape,
    keeper,
    remove_and_shape,
    remover,
)
from shapey_engines.shapers import (
    shape,
    shape_loosely,
    shape_strictly,
    shape_super_loosely,
    shape_super_strictly,
)

__all__ = [
    "Shaper",
    "SpecApplicator",
    "always_evolve",
    "build_spec_applicator",
    "combine",
    "evolve_spec",
    "implied_remove",
    "keep_and_shape",
    "keeper",
    "make_shaper",
    "map_spec",
    "merge_spec",
    "remove_and_shape",
    "remover",
    "shape",
    "shape_loosely",
    "shape_strictly",
    "shape_super_loosely",
    "shape_super_strictly",
    "shapeline",
]
