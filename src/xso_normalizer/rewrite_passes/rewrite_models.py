"""Rewrite pass entities."""

from __future__ import annotations

from dataclasses import dataclass

FOR_SUFFIX = "_for_"
NIL_SUFFIX = "_nil"
UNBOUNDED = "unbounded"

Bound = int | str


class UnexpectedTransformError(Exception):
    """Raised when an optional optimization cannot be computed for the current graph."""


@dataclass(frozen=True)
class CloneTarget:
    """Name of a hierarchy clone and the (renamed) base it must extend."""

    base: str
    name: str
