"""Conversion of ``default`` and ``enum`` values to their declared primitive type.

Generation copies facet values as strings. A default must have the type of its
schema, so values are converted to booleans and numbers where declared. When
the holder has no own ``type`` the referenced chain is inlined until a
primitive is found and the values move there.
"""

from __future__ import annotations

import copy
from typing import Any

from xso_normalizer.reference_resolution import def_name_from_ref, get_def
from xso_normalizer.schema_traversal import SchemaObject, SchemaWalk, walk_schema_objects

_TRUE_TEXT = ("true", "1")
_FALSE_TEXT = ("false", "0")


def adjust_defaults(document: SchemaObject, *, request_context: str | None = None) -> None:
    """Convert every default and enum to the primitive type it describes."""

    def visit(xso: SchemaObject, walk: SchemaWalk) -> SchemaObject:
        if xso.get("default") is None and xso.get("enum") is None:
            return xso
        if xso.get("type"):
            _convert_values(xso, xso, xso["type"])
            return xso

        primitive = _find_primitive(document, xso, set(), request_context, walk.ns_name)
        if primitive is not None:
            _convert_values(xso, primitive, primitive["type"])
        if primitive is not xso:
            xso.pop("default", None)
            xso.pop("enum", None)
        return xso

    walk_schema_objects(document, visit)


def convert_to(schema_type: str, value: Any) -> Any:
    """Convert ``value`` to ``schema_type``; values that do not parse are returned unchanged."""
    if schema_type == "boolean":
        if isinstance(value, str):
            text = value.strip().lower()
            if text in _TRUE_TEXT:
                return True
            if text in _FALSE_TEXT:
                return False
            return value
        if isinstance(value, int | float) and not isinstance(value, bool):
            if value == 1:
                return True
            if value == 0:
                return False
        return value
    if schema_type in ("number", "integer") and isinstance(value, str):
        return _parse_number(value)
    return value


def _parse_number(text: str) -> Any:
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


def _convert_values(source: SchemaObject, target: SchemaObject, schema_type: str) -> None:
    default = source.get("default")
    enum = source.get("enum")
    if default is not None:
        target["default"] = convert_to(schema_type, default)
    if isinstance(enum, list):
        target["enum"] = [convert_to(schema_type, value) for value in enum]


def _find_primitive(
    document: SchemaObject,
    xso: Any,
    seen: set[str],
    request_context: str | None,
    definition: str | None = None,
) -> SchemaObject | None:
    if not isinstance(xso, dict):
        return None
    reference = xso.get("$ref")
    if isinstance(reference, str):
        name = def_name_from_ref(reference)
        if name in seen:
            return None
        seen.add(name)
        target = get_def(document, xso, definition=definition, request_context=request_context)
        del xso["$ref"]
        for key, value in target.items():
            xso.setdefault(key, copy.deepcopy(value))

    schema_type = xso.get("type")
    if schema_type == "array":
        return _find_primitive(document, xso.get("items"), seen, request_context, definition)
    if schema_type == "object":
        return None
    if schema_type:
        return xso

    members = xso.get("anyOf") or xso.get("oneOf") or xso.get("allOf")
    for member in members or ():
        primitive = _find_primitive(document, member, seen, request_context, definition)
        if primitive is not None:
            return primitive
    return None
