"""Schema traversal entities."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

SchemaObject = dict[str, Any]
PathKey = str | int


@dataclass(frozen=True)
class SchemaWalk:
    """Position of one schema object (XSO) inside the document being walked."""

    ns_name: str | None
    path: tuple[PathKey, ...]
    stack: tuple[SchemaObject, ...]
    is_root: bool

    @property
    def key(self) -> PathKey | None:
        """Return the last path segment (the slot holding the current XSO)."""
        return self.path[-1] if self.path else None

    @property
    def parent_key(self) -> PathKey | None:
        """Return the second-to-last path segment."""
        return self.path[-2] if len(self.path) > 1 else None

    def descend(self, parent: SchemaObject, *keys: PathKey) -> SchemaWalk:
        """Return the walk position of a child reached from ``parent`` through ``keys``."""
        return SchemaWalk(
            ns_name=self.ns_name,
            path=self.path + keys,
            stack=self.stack + (parent,),
            is_root=False,
        )


SchemaVisitor = Callable[[SchemaObject, SchemaWalk], SchemaObject]
JsonVisitor = Callable[[Any, tuple[PathKey, ...]], Any]
