"""Reference lookup, counting and rewriting service."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from xso_normalizer.schema_traversal import SchemaObject, walk_json
from xso_normalizer.schema_traversal.walk_models import PathKey

from .reference_models import ReferenceIndex, RefUsage, UnresolvedReferenceError

DEFINITIONS_PREFIX = "#/definitions/"
COMPONENTS_PREFIX = "#/components/schemas/"


def def_name_from_ref(reference: str) -> str:
    """Return the definition name (last path segment) of a ``$ref`` string."""
    return reference[reference.rfind("/") + 1 :]


def ref_prefix(document: Mapping[str, Any]) -> str:
    """Return the ``$ref`` prefix used for definitions of this document."""
    if "definitions" not in document:
        components = document.get("components")
        if isinstance(components, Mapping) and "schemas" in components:
            return COMPONENTS_PREFIX
    return DEFINITIONS_PREFIX


def ref_to(document: Mapping[str, Any], ns_name: str) -> str:
    """Return the ``$ref`` string addressing definition ``ns_name``."""
    return ref_prefix(document) + ns_name


def find_refs(value: Any) -> ReferenceIndex:
    """Count every ``$ref`` in ``value``.

    Occurrences that are the first member of an ``allOf`` list are structural
    extension links and are additionally counted in ``all_of_count``.
    """
    index = ReferenceIndex()

    def visit(node: Any, path: tuple[PathKey, ...]) -> Any:
        if isinstance(node, dict):
            reference = node.get("$ref")
            if isinstance(reference, str):
                usage = index.refs.setdefault(reference, RefUsage())
                usage.count += 1
                if len(path) >= 2 and path[-1] == 0 and path[-2] == "allOf":
                    usage.all_of_count += 1
        return node

    walk_json(value, visit)
    return index


def get_ref(
    document: Mapping[str, Any],
    reference: str,
    *,
    definition: str | None = None,
    request_context: str | None = None,
) -> Any:
    """Dereference a local ``#/a/b/c`` pointer against ``document``."""
    node: Any = document
    for segment in reference.split("/"):
        if segment == "#":
            continue
        key = segment.replace("~1", "/").replace("~0", "~")
        if not isinstance(node, Mapping) or node.get(key) is None:
            raise UnresolvedReferenceError(
                reference, definition=definition, request_context=request_context
            )
        node = node[key]
    return node


def get_def(
    document: Mapping[str, Any],
    xso: SchemaObject,
    *,
    definition: str | None = None,
    request_context: str | None = None,
) -> SchemaObject:
    """Return ``xso`` itself, or the node its ``$ref`` points to."""
    reference = xso.get("$ref")
    if isinstance(reference, str):
        return get_ref(
            document, reference, definition=definition, request_context=request_context
        )
    return xso


def replace_refs(document: SchemaObject, rename_map: Mapping[str, str]) -> SchemaObject:
    """Point every ``$ref`` and discriminator mapping value at the renamed definitions."""
    if not rename_map:
        return document

    def visit(value: Any, path: tuple[PathKey, ...]) -> Any:
        if not isinstance(value, str) or not path:
            return value
        is_ref = path[-1] == "$ref"
        is_mapping = len(path) > 2 and path[-3] == "discriminator" and path[-2] == "mapping"
        if is_ref or is_mapping:
            target = rename_map.get(def_name_from_ref(value))
            if target:
                return value[: value.rfind("/") + 1] + target
        return value

    return walk_json(document, visit)


def verify_reference_integrity(
    document: SchemaObject, *, request_context: str | None = None
) -> None:
    """Raise UnresolvedReferenceError for the first local ``$ref`` that does not resolve."""

    def visit(value: Any, path: tuple[PathKey, ...]) -> Any:
        if path and path[-1] == "$ref" and isinstance(value, str) and value.startswith("#/"):
            get_ref(
                document,
                value,
                definition=_enclosing_definition(path),
                request_context=request_context,
            )
        return value

    walk_json(document, visit)


def _enclosing_definition(path: tuple[PathKey, ...]) -> str | None:
    if len(path) > 1 and path[0] == "definitions":
        return str(path[1])
    if len(path) > 2 and path[0] == "components" and path[1] == "schemas":
        return str(path[2])
    return None
