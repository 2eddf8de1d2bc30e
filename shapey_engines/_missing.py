"""Sentinel for the optional trailing data argument of engine functions."""

from enum import Enum


class _Missing(Enum):
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "<MISSING>"


# ``None`` is a legitimate input value, so "not given" needs its own marker.
MISSING = _Missing.MISSING
