"""Per-root-element duplication of polymorphic type hierarchies.

A root element declared with a polymorphic type, e.g. ``<xs:element name="Foo"
type="s1:Base"/>``, yields definitions ``Foo`` and ``Base``. When ``Base`` has
extensions ``Ext1`` and ``Ext2``, the gateway map needs them duplicated inside
the namespace context of ``Foo``: ``Ext1_for_Foo`` and ``Ext2_for_Foo``.
Because that can produce many definitions, element definitions are first
replaced by their types when duplicating them would be too expensive.
"""

from __future__ import annotations

import copy
import logging

from xso_normalizer.configuration.runtime_settings import ELEMENT, NamespaceDictionary
from xso_normalizer.hierarchy_analysis import (
    base_ref,
    get_ancestor_refs,
    get_sub_types,
    in_poly_hierarchy,
)
from xso_normalizer.reference_resolution import (
    def_name_from_ref,
    find_refs,
    ref_prefix,
    replace_refs,
)
from xso_normalizer.schema_traversal import SchemaObject, definitions_of

from .rewrite_models import FOR_SUFFIX, CloneTarget, UnexpectedTransformError

_LOGGER = logging.getLogger("xso_normalizer.rewrite.polymorphism")

ELEMENT_OPTIMIZATION_THRESHOLD = 75


def duplicate_poly_hierarchy(document: SchemaObject, dictionary: NamespaceDictionary) -> None:
    """Clone the ancestor and descendant hierarchy of each typed root element."""
    definitions = definitions_of(document)
    if not definitions:
        return
    prefix = ref_prefix(document)

    try:
        candidates = optimize_root_elements_map(definitions, dictionary)
    except UnexpectedTransformError as exc:
        _LOGGER.warning("%s Processing continues.", exc)
        candidates = {}

    try:
        clone_map = _build_clone_map(definitions, get_sub_types(definitions))
    except UnexpectedTransformError as exc:
        _LOGGER.warning("%s Processing continues.", exc)
        clone_map = {}

    duplicates_for_elements = 0
    for element in candidates:
        if element in clone_map:
            duplicates_for_elements += len(clone_map[element])
            duplicates_for_elements += len(get_ancestor_refs(definitions, element))

    if duplicates_for_elements > ELEMENT_OPTIMIZATION_THRESHOLD:
        _LOGGER.debug(
            "Replacing %d root elements with their types instead of creating %d duplicates.",
            len(candidates),
            duplicates_for_elements,
        )
        replace_refs(document, candidates)
        for element in candidates:
            definitions.pop(element, None)

    for ns_name in list(definitions):
        root = definitions.get(ns_name)
        targets = clone_map.get(ns_name)
        if root is None or targets is None:
            continue
        _clone_descendants(definitions, root, targets, dictionary, prefix)
        _clone_ancestors(definitions, ns_name, root)


def optimize_root_elements_map(
    definitions: dict[str, SchemaObject], dictionary: NamespaceDictionary
) -> dict[str, str]:
    """Map each replaceable root element name to the name of its type definition.

    An element qualifies when its type definition exists with the same xml
    namespace and either of them takes part in a polymorphic hierarchy.
    """
    try:
        ref_index = find_refs(definitions)
        candidates: dict[str, str] = {}
        for ns_name, xso in definitions.items():
            entry = dictionary.entry(ns_name)
            if (
                entry is None
                or entry.for_kind != ELEMENT
                or not entry.type_ns_name
                or entry.prevent_optimize
            ):
                continue
            type_name = entry.type_ns_name
            type_xso = definitions.get(type_name)
            if type_xso is None or not xso.get("xml") or not type_xso.get("xml"):
                continue
            if xso["xml"].get("namespace") != type_xso["xml"].get("namespace"):
                continue
            if in_poly_hierarchy(
                definitions, ns_name, get_ancestor_refs(definitions, ns_name), ref_index
            ) or in_poly_hierarchy(
                definitions, type_name, get_ancestor_refs(definitions, type_name), ref_index
            ):
                candidates[ns_name] = type_name
    except (AttributeError, KeyError, TypeError) as exc:
        raise UnexpectedTransformError(
            f"An unexpected error ({exc!r}) occurred while constructing the "
            "'element optimization map'."
        ) from exc
    return candidates


def _build_clone_map(
    definitions: dict[str, SchemaObject], sub_types: dict[str, list[str]]
) -> dict[str, dict[str, CloneTarget]]:
    clone_map: dict[str, dict[str, CloneTarget]] = {}
    try:
        for ns_name, xso in definitions.items():
            type_name = xso.get("x-xsi-type-uniquename")
            if type_name and type_name != ns_name:
                targets: dict[str, CloneTarget] = {}
                _collect_clone_targets(targets, sub_types, type_name, ns_name, ns_name)
                clone_map[ns_name] = targets
    except (AttributeError, TypeError) as exc:
        raise UnexpectedTransformError(
            f"An unexpected error ({exc!r}) was encountered while constructing the "
            "'subTypes map'."
        ) from exc
    return clone_map


def _collect_clone_targets(
    targets: dict[str, CloneTarget],
    sub_types: dict[str, list[str]],
    base: str,
    new_base: str,
    root: str,
) -> None:
    for sub_type in sub_types.get(base, ()):
        if sub_type in targets:
            continue
        target = CloneTarget(base=new_base, name=sub_type + FOR_SUFFIX + root)
        targets[sub_type] = target
        _collect_clone_targets(targets, sub_types, sub_type, target.name, root)


def _clone_descendants(
    definitions: dict[str, SchemaObject],
    root: SchemaObject,
    targets: dict[str, CloneTarget],
    dictionary: NamespaceDictionary,
    prefix: str,
) -> None:
    for sub_type, target in targets.items():
        entry = dictionary.entry(sub_type)
        if entry is not None and entry.for_kind == ELEMENT:
            continue
        if target.name in definitions or sub_type not in definitions:
            continue
        clone = copy.deepcopy(definitions[sub_type])
        _copy_root_xml(clone, root)
        if base_ref(clone):
            clone["allOf"][0]["$ref"] = prefix + target.base
        clone["x-xsi-type-uniquename"] = target.name
        definitions[target.name] = clone


def _clone_ancestors(
    definitions: dict[str, SchemaObject], ns_name: str, root: SchemaObject
) -> None:
    ancestors = get_ancestor_refs(definitions, ns_name)
    suffix = FOR_SUFFIX + ns_name
    if not ancestors or ancestors[0].endswith(suffix):
        return

    for position, reference in enumerate(ancestors):
        ancestor = def_name_from_ref(reference)
        clone_name = ancestor + suffix
        if clone_name in definitions or ancestor not in definitions:
            continue
        clone = copy.deepcopy(definitions[ancestor])
        _copy_root_xml(clone, root)
        if position < len(ancestors) - 1 and base_ref(clone):
            clone["allOf"][0]["$ref"] += suffix
        if clone.get("x-xsi-type-uniquename"):
            clone["x-xsi-type-uniquename"] += suffix
        definitions[clone_name] = clone

    if base_ref(root):
        root["allOf"][0]["$ref"] += suffix


def _copy_root_xml(clone: SchemaObject, root: SchemaObject) -> None:
    # Clones serialize inside the root element, so they take its namespace.
    if "xml" in root:
        clone["xml"] = copy.deepcopy(root["xml"])
    else:
        clone.pop("xml", None)
