"""Simplification of ``allOf``, ``anyOf`` and ``oneOf`` combinators."""

from __future__ import annotations

import copy
import logging
from typing import Any

from xso_normalizer.reference_resolution import get_def
from xso_normalizer.schema_traversal import SchemaObject, SchemaWalk, walk_schema_objects

_LOGGER = logging.getLogger("xso_normalizer.rewrite.combinators")

_MERGEABLE_KEYS: tuple[str, ...] = ("properties", "required")


def squash_all_of(xso: SchemaObject) -> SchemaObject:
    """Flatten the ``allOf`` of one object until nothing more can be squashed.

    ``$ref`` members are never merged into the holder; they carry the extension link.
    """
    while True:
        members = xso.get("allOf")
        if not isinstance(members, list):
            return xso
        flattened: list[Any] = []
        for member in members:
            if not member:
                continue
            if isinstance(member, dict) and list(member) == ["allOf"] and isinstance(
                member["allOf"], list
            ):
                flattened.extend(member["allOf"])
            else:
                flattened.append(member)
        if not flattened:
            del xso["allOf"]
            return xso
        changed = flattened != members
        xso["allOf"] = flattened
        if len(flattened) == 1 and _can_merge(xso, flattened[0]):
            member = xso.pop("allOf")[0]
            _merge_into(xso, member)
            changed = True
        if not changed:
            return xso


def squash_all_ofs(document: SchemaObject) -> None:
    """Squash the ``allOf`` of every schema object of the document."""
    walk_schema_objects(document, lambda xso, walk: squash_all_of(xso))


def remove_any_ofs(document: SchemaObject, *, request_context: str | None = None) -> None:
    """Collapse every ``anyOf`` into one best common primitive type.

    Members sharing type and format keep the union of their enums; when any
    member has no enum the enum is dropped. Otherwise the result degrades to an
    unformatted ``string`` without enum.
    """

    def visit(xso: SchemaObject, walk: SchemaWalk) -> SchemaObject:
        members = xso.get("anyOf")
        if not isinstance(members, list):
            return xso
        for index, member in enumerate(members):
            if isinstance(member, dict) and "$ref" in member:
                target = get_def(
                    document, member, definition=walk.ns_name, request_context=request_context
                )
                inlined = {key: value for key, value in member.items() if key != "$ref"}
                inlined.update(copy.deepcopy(target))
                members[index] = inlined
        del xso["anyOf"]
        if not members:
            return xso

        first = members[0]
        common: SchemaObject = {"type": first.get("type")}
        if first.get("enum") is not None:
            common["enum"] = copy.deepcopy(first["enum"])
        if first.get("format"):
            common["format"] = first["format"]
        for other in members[1:]:
            if common.get("type") != other.get("type") or common.get("format") != other.get(
                "format"
            ):
                common["type"] = "string"
                common.pop("format", None)
                common.pop("enum", None)
            if "enum" in common:
                if other.get("enum") is not None:
                    common["enum"].extend(
                        value for value in other["enum"] if value not in common["enum"]
                    )
                else:
                    del common["enum"]
        if common.get("type") is None:
            common.pop("type")
        _LOGGER.debug("Collapsed anyOf of %s into %s.", walk.ns_name, common.get("type"))
        xso.update(common)
        return xso

    walk_schema_objects(document, visit)


def remove_one_ofs(document: SchemaObject) -> None:
    """Turn choices without a discriminator into ``allOf`` with every branch optional."""

    def visit(xso: SchemaObject, walk: SchemaWalk) -> SchemaObject:
        members = xso.get("oneOf")
        if not isinstance(members, list) or "discriminator" in xso:
            return xso
        del xso["oneOf"]
        _remove_required(members)
        existing = xso.get("allOf")
        if isinstance(existing, list):
            existing.extend(members)
        else:
            xso["allOf"] = members
        return xso

    walk_schema_objects(document, visit)


def _remove_required(members: list[Any]) -> None:
    for member in members:
        if not isinstance(member, dict):
            continue
        properties = member.get("properties")
        if isinstance(properties, dict):
            for prop in properties.values():
                if isinstance(prop, dict):
                    prop.pop("minItems", None)
            member.pop("required", None)
        nested = member.get("allOf")
        if isinstance(nested, list):
            _remove_required(nested)


def _can_merge(holder: SchemaObject, member: Any) -> bool:
    if not isinstance(member, dict) or "$ref" in member:
        return False
    for key, value in member.items():
        if key in _MERGEABLE_KEYS or key not in holder:
            continue
        if holder[key] != value:
            return False
    properties = member.get("properties")
    if isinstance(properties, dict) and isinstance(holder.get("properties"), dict):
        for name, prop in properties.items():
            if name in holder["properties"] and holder["properties"][name] != prop:
                return False
    return True


def _merge_into(holder: SchemaObject, member: SchemaObject) -> None:
    for key, value in member.items():
        if key == "properties" and isinstance(holder.get("properties"), dict):
            holder["properties"].update(value)
        elif key == "required" and isinstance(holder.get("required"), list):
            holder["required"].extend(name for name in value if name not in holder["required"])
        else:
            holder[key] = value
