"""Propagation of occurrence bounds from anonymous arrays.

A sequence, all, choice or group with an occurrence is generated as an array
without a name::

    allOf:
      - type: array
        minItems: 2
        maxItems: 3
        items:
          allOf: [...]

The map runtime has no element to hang those bounds on, so they are multiplied
into the contents of the inner ``allOf``/``oneOf``.
"""

from __future__ import annotations

import copy
from typing import Any

from xso_normalizer.reference_resolution import get_def
from xso_normalizer.schema_traversal import SchemaObject, SchemaWalk, walk_schema_objects

from .rewrite_models import UNBOUNDED, Bound

GROUP_KEY = "x-ibm-group"


def remove_unnamed_occurrence(
    document: SchemaObject, *, request_context: str | None = None
) -> None:
    """Replace anonymous arrays of combinators with their items, bounds applied."""

    def visit(xso: SchemaObject, walk: SchemaWalk) -> SchemaObject:
        members = xso.get("allOf") or xso.get("oneOf")
        if not isinstance(members, list):
            return xso
        for index, inner in enumerate(members):
            if not _is_unnamed_occurrence(inner):
                continue
            members[index] = _propagate_occurrence(
                document,
                inner["items"],
                inner.get("minItems") or 0,
                inner.get("maxItems") or UNBOUNDED,
                inner.get(GROUP_KEY),
                request_context,
                walk.ns_name,
            )
        return xso

    walk_schema_objects(document, visit)


def _is_unnamed_occurrence(xso: Any) -> bool:
    if not isinstance(xso, dict) or xso.get("type") != "array":
        return False
    items = xso.get("items")
    return isinstance(items, dict) and bool(items.get("allOf") or items.get("oneOf"))


def _propagate_occurrence(
    document: SchemaObject,
    xso: SchemaObject,
    min_items: Bound,
    max_items: Bound,
    group: Any,
    request_context: str | None,
    definition: str | None = None,
) -> SchemaObject:
    if "$ref" in xso:
        xso = copy.deepcopy(
            get_def(document, xso, definition=definition, request_context=request_context)
        )

    members = xso.get("oneOf") or xso.get("allOf")
    if isinstance(members, list):
        for index, member in enumerate(members):
            if isinstance(member, dict) and "$ref" in member:
                member = copy.deepcopy(
                    get_def(
                        document, member, definition=definition, request_context=request_context
                    )
                )
            members[index] = _propagate_occurrence(
                document, member, min_items, max_items, group, request_context, definition
            )

    if xso.get("type") == "array":
        _scale_array(xso, min_items, max_items, group)
    elif isinstance(xso.get("properties"), dict):
        required = xso.get("required") or []
        properties = xso["properties"]
        for name in list(properties):
            prop = properties[name]
            prop_min: Bound = min_items if name in required else 0
            if prop.get("type") == "array":
                _propagate_occurrence(
                    document, prop, prop_min, max_items, group, request_context, definition
                )
            elif max_items != 1:
                properties[name] = _wrap_in_array(
                    document, prop, prop_min, max_items, group, request_context, definition
                )
        if min_items == 0:
            xso.pop("required", None)
    return xso


def _scale_array(xso: SchemaObject, min_items: Bound, max_items: Bound, group: Any) -> None:
    if xso.get("minItems") and min_items != UNBOUNDED:
        xso["minItems"] *= min_items
    if xso.get("maxItems"):
        if max_items == UNBOUNDED:
            del xso["maxItems"]
        else:
            xso["maxItems"] *= max_items
    if xso.get("minItems") == 0:
        del xso["minItems"]
    if xso.get("maxItems") == UNBOUNDED:
        del xso["maxItems"]
    if max_items != 1:
        inner_group = xso.get(GROUP_KEY)
        if inner_group:
            xso[GROUP_KEY] = _as_list(group) + _as_list(inner_group)
        elif group is not None:
            xso[GROUP_KEY] = copy.deepcopy(group)


def _wrap_in_array(
    document: SchemaObject,
    prop: SchemaObject,
    min_items: Bound,
    max_items: Bound,
    group: Any,
    request_context: str | None,
    definition: str | None = None,
) -> SchemaObject:
    wrapper: SchemaObject = {"type": "array", "items": copy.deepcopy(prop)}
    if group is not None:
        wrapper[GROUP_KEY] = copy.deepcopy(group)
    if min_items != 0:
        wrapper["minItems"] = min_items
    if max_items != UNBOUNDED:
        wrapper["maxItems"] = max_items
    target = get_def(document, prop, definition=definition, request_context=request_context)
    if "xml" in target:
        wrapper["xml"] = copy.deepcopy(target["xml"])
    return wrapper


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return copy.deepcopy(value)
    return [value]
