"""Removal of definitions that cannot be reached from the operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from xso_normalizer.hierarchy_analysis import get_extensions
from xso_normalizer.reference_resolution import RefUsage, def_name_from_ref, find_refs, ref_to
from xso_normalizer.schema_traversal import SchemaObject, definitions_of

_LOGGER = logging.getLogger("xso_normalizer.pruning")

SECURITY_DEFINITION = "Security"
HEADER_SUFFIX = "_Header"


@dataclass
class _KeepState:
    traversed: bool = False
    poly_expanded: bool = False


def remove_unreferenced_definitions(
    document: SchemaObject, *, keep_root_elements: bool = False
) -> list[str]:
    """Delete every definition not reachable from ``paths`` and return the removed names.

    ``Security`` and implicit ``*_Header`` definitions are always kept; with
    ``keep_root_elements`` so is every definition carrying an ``xml.name``.
    A discriminated definition reached by a value reference keeps all of its
    extensions, since any of them may appear on the wire.
    """
    definitions = definitions_of(document)
    path_refs = find_refs(document.get("paths") or {})

    keep: dict[str, _KeepState] = {}
    for ns_name, xso in definitions.items():
        xml = xso.get("xml")
        if (
            ns_name == SECURITY_DEFINITION
            or ns_name.endswith(HEADER_SUFFIX)
            or (keep_root_elements and isinstance(xml, dict) and xml.get("name"))
        ):
            keep[ns_name] = _KeepState()
    for reference, usage in path_refs.refs.items():
        if reference == ref_to(document, def_name_from_ref(reference)):
            _reach(keep, definitions, reference, usage)

    pending = True
    while pending:
        pending = False
        for ns_name in list(keep):
            state = keep[ns_name]
            if state.traversed:
                continue
            pending = True
            state.traversed = True
            xso = definitions.get(ns_name)
            if xso is None:
                continue
            for reference, usage in find_refs(xso).refs.items():
                _reach(keep, definitions, reference, usage)

    removed = [ns_name for ns_name in definitions if ns_name not in keep]
    for ns_name in removed:
        del definitions[ns_name]
    if removed:
        _LOGGER.debug("Removed %d unreferenced definitions.", len(removed))
    return removed


def _reach(
    keep: dict[str, _KeepState],
    definitions: dict[str, SchemaObject],
    reference: str,
    usage: RefUsage,
) -> None:
    target_name = def_name_from_ref(reference)
    target_state = keep.setdefault(target_name, _KeepState())
    if usage.is_structural_only or target_state.poly_expanded:
        return
    target = definitions.get(target_name)
    if target is None or not target.get("x-ibm-discriminator"):
        return
    target_state.poly_expanded = True
    for extension in get_extensions(definitions, reference):
        keep.setdefault(extension, _KeepState()).poly_expanded = True
