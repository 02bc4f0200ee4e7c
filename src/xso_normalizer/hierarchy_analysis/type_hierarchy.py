"""Subtype, ancestor and XSI type analysis over ``allOf`` extension links."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from xso_normalizer.reference_resolution import ReferenceIndex, def_name_from_ref
from xso_normalizer.schema_traversal import SchemaObject

_LOGGER = logging.getLogger("xso_normalizer.hierarchy")

MAX_HIERARCHY_DEPTH = 100
NO_XSI_TYPE = "NONE"


def base_ref(xso: Any) -> str | None:
    """Return the ``allOf[0].$ref`` extension link of ``xso``, if any."""
    if not isinstance(xso, Mapping):
        return None
    members = xso.get("allOf")
    if isinstance(members, list) and members and isinstance(members[0], Mapping):
        reference = members[0].get("$ref")
        if isinstance(reference, str):
            return reference
    return None


def get_sub_types(definitions: Mapping[str, SchemaObject]) -> dict[str, list[str]]:
    """Map each base definition name to the names of its direct extensions."""
    sub_types: dict[str, list[str]] = {}
    for ns_name, xso in definitions.items():
        reference = base_ref(xso)
        if reference:
            sub_types.setdefault(def_name_from_ref(reference), []).append(ns_name)
    return sub_types


def get_ancestor_refs(definitions: Mapping[str, SchemaObject], ns_name: str) -> list[str]:
    """Return the ``$ref`` chain of ancestors of ``ns_name``, nearest ancestor first.

    A cycle, or a chain deeper than MAX_HIERARCHY_DEPTH, is reported as a warning
    and the ancestors collected so far are returned.
    """
    refs: list[str] = []
    seen = {ns_name}
    current = definitions.get(ns_name)
    while current is not None:
        reference = base_ref(current)
        if reference is None:
            break
        ancestor = def_name_from_ref(reference)
        if ancestor in seen or len(refs) >= MAX_HIERARCHY_DEPTH:
            _LOGGER.warning(
                "The extension hierarchy of %s loops or is too deep at %s; "
                "ancestor lookup stops here.",
                ns_name,
                reference,
            )
            break
        seen.add(ancestor)
        refs.append(reference)
        current = definitions.get(ancestor)
    return refs


def get_extensions(
    definitions: Mapping[str, SchemaObject],
    reference: str,
    _seen: set[str] | None = None,
) -> list[str]:
    """Return the names of all definitions extending ``reference``.

    Extensions of an extension are followed only when that extension is itself
    a discriminated (polymorphic) definition.
    """
    seen = _seen if _seen is not None else set()
    prefix = reference[: reference.rfind("/") + 1]
    extensions: list[str] = []
    for ns_name, xso in definitions.items():
        if ns_name in seen or base_ref(xso) != reference:
            continue
        seen.add(ns_name)
        extensions.append(ns_name)
        if xso.get("x-ibm-discriminator"):
            extensions.extend(get_extensions(definitions, prefix + ns_name, seen))
    return extensions


def in_poly_hierarchy(
    definitions: Mapping[str, SchemaObject],
    ns_name: str,
    ancestor_refs: list[str],
    ref_index: ReferenceIndex,
) -> bool:
    """Return True when ``ns_name`` takes part in a polymorphic extension hierarchy."""
    names = [ns_name] + [def_name_from_ref(reference) for reference in ancestor_refs]
    for name in names:
        xso = definitions.get(name)
        if isinstance(xso, Mapping) and xso.get("x-ibm-discriminator"):
            return True
    return any(
        usage.all_of_count > 0 and def_name_from_ref(reference) == ns_name
        for reference, usage in ref_index.refs.items()
    )


def get_xsi_type(
    xso: Any, definitions: Mapping[str, SchemaObject], qualified: bool = True
) -> str:
    """Return the xsi:type value (``{namespace}local`` or ``local``) of an XSO.

    ``typeOf`` links are followed to find the type information. Objects without
    an XSI type, and abstract types, yield NO_XSI_TYPE.
    """
    seen: set[str] = set()
    while (
        isinstance(xso, Mapping)
        and "x-xsi-type" not in xso
        and isinstance(xso.get("typeOf"), Mapping)
    ):
        target = def_name_from_ref(str(xso["typeOf"].get("$ref", "")))
        if target in seen:
            break
        seen.add(target)
        xso = definitions.get(target)

    if not isinstance(xso, Mapping):
        return NO_XSI_TYPE
    local_name = xso.get("x-xsi-type")
    if not local_name or xso.get("x-xsi-type-abstract"):
        return NO_XSI_TYPE
    if not qualified:
        return str(local_name)
    xsi_xml = xso.get("x-xsi-type-xml") or xso.get("xml") or {}
    namespace = xsi_xml.get("namespace") if isinstance(xsi_xml, Mapping) else None
    return f"{{{namespace}}}{local_name}" if namespace else str(local_name)
