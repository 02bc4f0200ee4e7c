"""Depth-first traversal of schema objects with pre- and post-order visitors."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .walk_models import JsonVisitor, PathKey, SchemaObject, SchemaVisitor, SchemaWalk

COMBINATOR_KEYS: tuple[str, ...] = ("allOf", "oneOf", "anyOf")
_SCHEMA_SLOT_SECTIONS: tuple[str, ...] = ("paths", "parameters", "responses")


def walk_schema_objects(
    document: SchemaObject,
    post_visit: SchemaVisitor | None = None,
    pre_visit: SchemaVisitor | None = None,
) -> SchemaObject:
    """Visit every XSO of a Swagger/OpenAPI document.

    Definition roots come from ``definitions`` and ``components.schemas``; non-root
    XSOs are the ``schema`` slots found under ``paths``, ``parameters``, ``responses``
    and the other ``components`` sections. The value returned by a visitor replaces
    the visited node in its parent slot.
    """
    definitions = document.get("definitions")
    if isinstance(definitions, dict):
        _walk_definitions(definitions, ("definitions",), post_visit, pre_visit)

    components = document.get("components")
    if isinstance(components, dict):
        schemas = components.get("schemas")
        if isinstance(schemas, dict):
            _walk_definitions(schemas, ("components", "schemas"), post_visit, pre_visit)
        for section in list(components):
            if section != "schemas":
                _walk_schema_slots(
                    components[section], ("components", section), post_visit, pre_visit
                )

    for section in _SCHEMA_SLOT_SECTIONS:
        if section in document:
            _walk_schema_slots(document[section], (section,), post_visit, pre_visit)
    return document


def walk_schema_object(
    xso: SchemaObject,
    post_visit: SchemaVisitor | None = None,
    pre_visit: SchemaVisitor | None = None,
    *,
    ns_name: str | None = None,
) -> SchemaObject:
    """Visit one XSO subtree, treating ``xso`` itself as a root."""
    walk = SchemaWalk(ns_name=ns_name, path=(), stack=(), is_root=True)
    return _visit(xso, walk, post_visit, pre_visit)


def walk_json(value: Any, visit: JsonVisitor, path: tuple[PathKey, ...] = ()) -> Any:
    """Post-order walk over any JSON value; the visitor's result replaces each value."""
    if isinstance(value, dict):
        for key in list(value):
            if key in value:
                value[key] = walk_json(value[key], visit, path + (key,))
    elif isinstance(value, list):
        for index, item in enumerate(value):
            value[index] = walk_json(item, visit, path + (index,))
    return visit(value, path)


def definitions_of(document: Mapping[str, Any]) -> SchemaObject:
    """Return the definitions mapping of a Swagger 2 or OpenAPI 3 document."""
    definitions = document.get("definitions")
    if isinstance(definitions, dict):
        return definitions
    components = document.get("components")
    if isinstance(components, dict) and isinstance(components.get("schemas"), dict):
        return components["schemas"]
    return {}


def _walk_definitions(
    definitions: SchemaObject,
    base_path: tuple[PathKey, ...],
    post_visit: SchemaVisitor | None,
    pre_visit: SchemaVisitor | None,
) -> None:
    for ns_name in list(definitions):
        xso = definitions.get(ns_name)
        if not isinstance(xso, dict):
            continue
        walk = SchemaWalk(ns_name=ns_name, path=base_path + (ns_name,), stack=(), is_root=True)
        result = _visit(xso, walk, post_visit, pre_visit)
        if ns_name in definitions:
            definitions[ns_name] = result


def _walk_schema_slots(
    value: Any,
    path: tuple[PathKey, ...],
    post_visit: SchemaVisitor | None,
    pre_visit: SchemaVisitor | None,
) -> None:
    if isinstance(value, dict):
        for key in list(value):
            child = value.get(key)
            if key == "schema" and isinstance(child, dict):
                walk = SchemaWalk(ns_name=None, path=path + (key,), stack=(), is_root=False)
                value[key] = _visit(child, walk, post_visit, pre_visit)
            elif isinstance(child, dict | list):
                _walk_schema_slots(child, path + (key,), post_visit, pre_visit)
    elif isinstance(value, list):
        for index, child in enumerate(value):
            if isinstance(child, dict | list):
                _walk_schema_slots(child, path + (index,), post_visit, pre_visit)


def _visit(
    xso: SchemaObject,
    walk: SchemaWalk,
    post_visit: SchemaVisitor | None,
    pre_visit: SchemaVisitor | None,
) -> SchemaObject:
    if pre_visit is not None:
        xso = pre_visit(xso, walk)
    if not isinstance(xso, dict):
        return xso

    properties = xso.get("properties")
    if isinstance(properties, dict):
        for name in list(properties):
            child = properties.get(name)
            if isinstance(child, dict):
                result = _visit(child, walk.descend(xso, "properties", name), post_visit, pre_visit)
                if name in properties:
                    properties[name] = result

    items = xso.get("items")
    if isinstance(items, dict):
        xso["items"] = _visit(items, walk.descend(xso, "items"), post_visit, pre_visit)

    for key in COMBINATOR_KEYS:
        members = xso.get(key)
        if not isinstance(members, list):
            continue
        for index in range(len(members)):
            if index < len(members) and isinstance(members[index], dict):
                members[index] = _visit(
                    members[index], walk.descend(xso, key, index), post_visit, pre_visit
                )

    if post_visit is not None:
        xso = post_visit(xso, walk)
    return xso
