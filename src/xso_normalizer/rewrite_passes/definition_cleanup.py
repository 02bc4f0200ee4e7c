"""Final definition cleanup: typedef renaming and attribute inlining."""

from __future__ import annotations

import copy
import logging

from xso_normalizer.reference_resolution import def_name_from_ref, ref_to, replace_refs
from xso_normalizer.schema_traversal import (
    SchemaObject,
    SchemaWalk,
    definitions_of,
    walk_schema_objects,
)

_LOGGER = logging.getLogger("xso_normalizer.rewrite.cleanup")

TYPEDEF_MARKER = "_typedef_"
TYPE_MARKER = "_type_"
_POLYMORPHISM_REF_KEYS: tuple[str, ...] = ("x-anc-ref", "x-desc-ref")


def cleanup_definitions(document: SchemaObject) -> dict[str, str]:
    """Drop working keys and rename ``_typedef_`` definitions to ``_type_``.

    A typedef replaces an existing type of the same name only when both agree on
    nullability and the type is not a discriminated union. Typedefs that are
    members of such a union keep their name. Returns the applied rename map.
    """
    definitions = definitions_of(document)

    keep_names: set[str] = set()
    for xso in definitions.values():
        if xso.get("discriminator") and isinstance(xso.get("oneOf"), list):
            keep_names.update(
                def_name_from_ref(member["$ref"])
                for member in xso["oneOf"]
                if isinstance(member, dict) and isinstance(member.get("$ref"), str)
            )

    rename_map: dict[str, str] = {}

    def visit(xso: SchemaObject, walk: SchemaWalk) -> SchemaObject:
        for key in _POLYMORPHISM_REF_KEYS:
            xso.pop(key, None)
        unique_name = xso.get("x-xsi-type-uniquename")
        if isinstance(unique_name, str):
            xso["x-xsi-type-uniquename"] = unique_name.replace(TYPEDEF_MARKER, TYPE_MARKER, 1)
        ns_name = walk.ns_name
        if walk.is_root and ns_name and TYPEDEF_MARKER in ns_name and ns_name not in keep_names:
            type_name = ns_name.replace(TYPEDEF_MARKER, TYPE_MARKER, 1)
            if type_name not in definitions or _can_replace(definitions, type_name, ns_name):
                rename_map[ns_name] = type_name
        return xso

    walk_schema_objects(document, visit)

    for source, target in rename_map.items():
        xso = definitions.pop(source)
        if target not in definitions:
            definitions[target] = xso
    if rename_map:
        _LOGGER.debug("Renamed %d typedef definitions.", len(rename_map))
    replace_refs(document, rename_map)
    return rename_map


def _can_replace(definitions: dict[str, SchemaObject], target: str, source: str) -> bool:
    target_xso = definitions.get(target)
    if target_xso is None:
        return False
    source_xso = definitions[source]
    if _is_nullable(target_xso) != _is_nullable(source_xso):
        return False
    return not target_xso.get("discriminator")


def _is_nullable(xso: SchemaObject) -> bool:
    return bool(xso.get("x-nullable") or xso.get("nullable"))


def inline_swagger_attributes(document: SchemaObject) -> list[str]:
    """Replace references to attribute definitions by their content and drop those definitions."""
    definitions = definitions_of(document)
    attributes = {
        ref_to(document, ns_name): ns_name
        for ns_name, xso in definitions.items()
        if isinstance(xso.get("xml"), dict) and xso["xml"].get("attribute")
    }
    if not attributes:
        return []

    def visit(xso: SchemaObject, walk: SchemaWalk) -> SchemaObject:
        ns_name = attributes.get(xso.get("$ref"))
        if ns_name is not None:
            del xso["$ref"]
            for key, value in definitions[ns_name].items():
                xso.setdefault(key, copy.deepcopy(value))
        return xso

    walk_schema_objects(document, pre_visit=visit)

    for ns_name in attributes.values():
        definitions.pop(ns_name, None)
    return list(attributes.values())
