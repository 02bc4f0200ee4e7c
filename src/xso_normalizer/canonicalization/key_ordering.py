"""Canonical key order of schema objects and definitions."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from xso_normalizer.schema_traversal import SchemaObject, SchemaWalk, walk_schema_objects

XSO_KEYS: tuple[str, ...] = (
    "not",
    "$ref",
    "xml",
    "description",
    "type",
    "format",
    "default",
    "enum",
    "minimum",
    "maximum",
    "exclusiveMinimum",
    "exclusiveMaximum",
    "minItems",
    "maxItems",
    "pattern",
    "minLength",
    "maxLength",
    "items",
    "properties",
    "allOf",
    "oneOf",
    "anyOf",
    "additionalProperties",
    "required",
    "nullable",
    "x-nullable",
    "x-ibm-whiteSpace",
    "x-ibm-fractionDigits",
    "x-ibm-totalDigits",
    "discriminator",
    "x-ibm-discriminator",
    "x-xsi-type",
    "x-xsi-type-xml",
    "x-xsi-type-abstract",
    "x-xsi-type-uniquename",
    "x-ibm-group",
    "x-anyType",
    "x-ibm-complex-restriction",
    "x-ibm-schema",
    "x-ibm-messages",
    "example",
)
# Working keys that never reach the output.
XSO_TEMP_KEYS: tuple[str, ...] = ("x-ibm-basic-choice",)
XML_KEYS: tuple[str, ...] = ("namespace", "prefix", "name", "attribute")


def c14n_object(
    source: Mapping[str, Any],
    key_order: Sequence[str],
    temporary_keys: Sequence[str] = XSO_TEMP_KEYS,
) -> dict[str, Any]:
    """Return a copy of ``source`` with listed keys first, the rest sorted, ``None`` dropped."""
    target: dict[str, Any] = {}
    for key in key_order:
        if key in source and source[key] is not None:
            target[key] = source[key]
    listed = set(key_order)
    for key in sorted(k for k in source if k not in listed):
        if key not in temporary_keys and source[key] is not None:
            target[key] = source[key]
    return target


def c14n_xso(document: SchemaObject, v3_nullable: bool | None = None) -> SchemaObject:
    """Put every schema object of the document in canonical form.

    ``v3_nullable`` selects the nullability key: True emits ``nullable``, False
    emits ``x-nullable`` and None keeps whichever is present.
    """

    def visit(xso: SchemaObject, walk: SchemaWalk) -> SchemaObject:
        if v3_nullable is True and xso.get("x-nullable") is not None:
            xso["nullable"] = xso.pop("x-nullable")
        elif v3_nullable is False and xso.get("nullable") is not None:
            xso["x-nullable"] = xso.pop("nullable")
        xso = c14n_object(xso, XSO_KEYS)
        for key in ("xml", "x-xsi-type-xml"):
            if isinstance(xso.get(key), dict):
                xso[key] = c14n_object(xso[key], XML_KEYS)
        if xso.get("type") != "object" and xso.get("properties") == {}:
            del xso["properties"]
        return xso

    return walk_schema_objects(document, visit)


def sort_definitions(document: SchemaObject) -> SchemaObject:
    """Order ``definitions`` and ``components.schemas`` by name."""
    definitions = document.get("definitions")
    if isinstance(definitions, dict):
        document["definitions"] = dict(sorted(definitions.items()))
    components = document.get("components")
    if isinstance(components, dict) and isinstance(components.get("schemas"), dict):
        components["schemas"] = dict(sorted(components["schemas"].items()))
    return document
