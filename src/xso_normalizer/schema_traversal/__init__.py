"""Schema traversal exports."""

from .schema_walker import (
    COMBINATOR_KEYS,
    definitions_of,
    walk_json,
    walk_schema_object,
    walk_schema_objects,
)
from .walk_models import SchemaObject, SchemaVisitor, SchemaWalk

__all__ = [
    "COMBINATOR_KEYS",
    "SchemaObject",
    "SchemaVisitor",
    "SchemaWalk",
    "definitions_of",
    "walk_json",
    "walk_schema_object",
    "walk_schema_objects",
]
