"""Complex content restriction handling.

The particles of an ``xsd:restriction`` do not repeat the attributes of the
restricted base; they are inherited from the whole ancestor chain. A restricted
object therefore swaps its base reference for a plain object carrying those
attributes.
"""

from __future__ import annotations

import copy
import logging

from xso_normalizer.reference_resolution import def_name_from_ref
from xso_normalizer.schema_traversal import (
    SchemaObject,
    SchemaWalk,
    definitions_of,
    walk_schema_objects,
)

from .structural_simplification import squash_all_ofs

_LOGGER = logging.getLogger("xso_normalizer.rewrite.restriction")

RESTRICTION_MARKER = "x-ibm-complex-restriction"


def process_complex_content_restriction(document: SchemaObject) -> bool:
    """Inline inherited attributes into restricted objects.

    Returns True when at least one restriction was processed, in which case the
    ``allOf`` lists are squashed again.
    """
    definitions = definitions_of(document)
    found = False

    def visit(xso: SchemaObject, walk: SchemaWalk) -> SchemaObject:
        nonlocal found
        if xso.get(RESTRICTION_MARKER):
            found = True
            _LOGGER.debug("Processing complex content restriction in %s.", walk.ns_name)
            _restrict(xso, definitions)
        return xso

    walk_schema_objects(document, visit)
    if found:
        squash_all_ofs(document)
    return found


def _restrict(xso: SchemaObject, definitions: dict[str, SchemaObject]) -> None:
    del xso[RESTRICTION_MARKER]
    members = xso.get("allOf")
    if not (
        isinstance(members, list)
        and len(members) > 1
        and isinstance(members[0], dict)
        and isinstance(members[0].get("$ref"), str)
    ):
        return

    base_name: str | None = def_name_from_ref(members[0]["$ref"])
    attributes: SchemaObject = {}
    replacement: SchemaObject = {"type": "object", "properties": attributes}
    if "xml" in members[1]:
        replacement = {"xml": copy.deepcopy(members[1]["xml"]), **replacement}
    members[0] = replacement
    restricted = members[1].get("properties") or {}

    seen: set[str] = set()
    while base_name and base_name not in seen:
        seen.add(base_name)
        base = definitions.get(base_name)
        base_name = None
        if base is None:
            break
        _collect_attributes(base.get("properties"), restricted, attributes)
        for member in base.get("allOf") or ():
            if not isinstance(member, dict):
                continue
            if isinstance(member.get("$ref"), str):
                base_name = def_name_from_ref(member["$ref"])
            else:
                _collect_attributes(member.get("properties"), restricted, attributes)

    for name in [name for name, prop in restricted.items() if prop.get("x-prohibited")]:
        del restricted[name]


def _collect_attributes(
    properties: SchemaObject | None, restricted: SchemaObject, attributes: SchemaObject
) -> None:
    for name, prop in (properties or {}).items():
        if name in restricted:
            continue
        xml = prop.get("xml")
        if isinstance(xml, dict) and xml.get("attribute"):
            attributes[name] = copy.deepcopy(prop)
