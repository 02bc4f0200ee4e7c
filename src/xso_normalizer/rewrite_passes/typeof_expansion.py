"""Expansion of ``typeOf`` indirections.

Generation records a ``typeOf`` when:

- a root element is a typeOf a root type (``myElement_element_s1`` typeOf ``myType_type_s1``)
- a root attribute is a typeOf a root type
- a type used in another referencing context is a typeOf the root type
  (``myType_type_s1_unqual`` typeOf ``myType_type_s1``)
- a message part is a typeOf a type (``myPart_tns`` typeOf ``myType_type_s1``)
- a substitutionGroup element is located through another element

The gateway map cannot follow this indirection, so the shape of the target is
copied into the referencing object.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from xso_normalizer.configuration.runtime_settings import TYPEDEF, NamespaceDictionary
from xso_normalizer.hierarchy_analysis import NO_XSI_TYPE, base_ref, get_xsi_type
from xso_normalizer.reference_resolution import def_name_from_ref, get_ref
from xso_normalizer.schema_traversal import (
    SchemaObject,
    SchemaWalk,
    definitions_of,
    walk_schema_object,
    walk_schema_objects,
)

_LOGGER = logging.getLogger("xso_normalizer.rewrite.typeof")

DISCRIMINATOR_PROPERTY = "x-ibm-discriminator"

_KEPT_FROM_REFERENCING_XSO: tuple[str, ...] = ("xml", "example", "x-anc-ref", "x-desc-ref")
_XSI_TYPE_KEYS: tuple[str, ...] = (
    "x-ibm-discriminator",
    "x-xsi-type",
    "x-xsi-type-xml",
    "x-xsi-type-uniquename",
    "x-xsi-type-abstract",
)
_REPLACED_BY_UNION: tuple[str, ...] = (
    "oneOf",
    "allOf",
    "anyOf",
    "properties",
    "type",
    "x-anc-ref",
    "x-desc-ref",
)


def expand_type_ofs(
    document: SchemaObject,
    dictionary: NamespaceDictionary,
    *,
    v3_discriminator: bool | None = None,
) -> None:
    """Replace every ``typeOf`` object with a copy of its (ultimate) target."""
    use_union = (
        dictionary.create_options.v3_discriminator
        if v3_discriminator is None
        else v3_discriminator
    )
    request_context = dictionary.create_options.request_context
    definitions = definitions_of(document)
    expanding: set[str] = set()

    def visit(xso: SchemaObject, walk: SchemaWalk) -> SchemaObject:
        type_of = xso.get("typeOf")
        if not isinstance(type_of, dict):
            return xso
        is_part_usage = xso.pop("forPart", None)

        descendant_refs = xso.get("x-desc-ref")
        target_ref = type_of["$ref"]
        target = get_ref(
            document, target_ref, definition=walk.ns_name, request_context=request_context
        )
        descendant_refs = descendant_refs or target.get("x-desc-ref")
        seen = {target_ref}
        while isinstance(target.get("typeOf"), dict):
            next_ref = target["typeOf"]["$ref"]
            if next_ref in seen:
                _LOGGER.warning("The typeOf chain of %s loops at %s.", walk.ns_name, next_ref)
                break
            seen.add(next_ref)
            target_ref = next_ref
            target = get_ref(
                document, target_ref, definition=walk.ns_name, request_context=request_context
            )
            descendant_refs = descendant_refs or target.get("x-desc-ref")

        type_entry = dictionary.entry(def_name_from_ref(type_of["$ref"]))
        entry = dictionary.entry(walk.ns_name)

        expanded = copy.deepcopy(target)
        expanded.pop("typeOf", None)
        if target_ref in expanding:
            _LOGGER.warning(
                "The typeOf target %s of %s contains itself; nested typeOfs are kept.",
                target_ref,
                walk.ns_name,
            )
        else:
            # The copy was not part of the walk, so its own typeOfs are expanded here.
            expanding.add(target_ref)
            expanded = walk_schema_object(expanded, visit, ns_name=walk.ns_name)
            expanding.discard(target_ref)
        for key in _KEPT_FROM_REFERENCING_XSO:
            if xso.get(key):
                expanded[key] = xso[key]

        xml = expanded.get("xml")
        is_attribute = isinstance(xml, dict) and bool(xml.get("attribute"))
        if isinstance(xml, dict) and not is_attribute:
            xml.pop("attribute", None)

        own_ancestor = expanded.get("x-anc-ref")
        if isinstance(own_ancestor, dict) and base_ref(expanded):
            expanded["allOf"][0]["$ref"] = own_ancestor["$ref"]

        if is_attribute or is_part_usage or (entry is not None and entry.suppress_xsi_type):
            for key in _XSI_TYPE_KEYS:
                expanded.pop(key, None)
        if (
            expanded.get("x-xsi-type-uniquename")
            and walk.ns_name
            and type_entry is not None
            and type_entry.for_kind == TYPEDEF
        ):
            expanded["x-xsi-type-uniquename"] = walk.ns_name

        if use_union and expanded.get(DISCRIMINATOR_PROPERTY):
            for key in _REPLACED_BY_UNION:
                expanded.pop(key, None)
            members = [{"$ref": target_ref}]
            members.extend(copy.deepcopy(descendant_refs or []))
            expanded["oneOf"] = members
            expanded["discriminator"] = {
                "propertyName": DISCRIMINATOR_PROPERTY,
                "mapping": build_discriminator_mapping(
                    document,
                    members,
                    definition=walk.ns_name,
                    request_context=request_context,
                ),
            }
        return expanded

    walk_schema_objects(document, visit)

    # Every union now carries a discriminator; the typedefs no longer need the marker.
    if use_union:
        for xso in definitions.values():
            xso.pop(DISCRIMINATOR_PROPERTY, None)


def build_discriminator_mapping(
    document: SchemaObject,
    members: list[dict[str, Any]],
    *,
    definition: str | None = None,
    request_context: str | None = None,
) -> dict[str, str]:
    """Map every spelling of each member's XSI type to the member's ``$ref``.

    Each member is reachable by ``{namespace}local``, ``local``, the raw ``$ref``
    and the bare definition name. The empty key selects the first (base) member.
    """
    definitions = definitions_of(document)
    mapping: dict[str, str] = {}
    for position, member in enumerate(members):
        reference = member["$ref"]
        member_xso = get_ref(
            document, reference, definition=definition, request_context=request_context
        )
        xsi_type = get_xsi_type(member_xso, definitions, qualified=True)
        if xsi_type == NO_XSI_TYPE:
            continue
        if position == 0:
            mapping[""] = reference
        mapping[xsi_type] = reference
        if "}" in xsi_type:
            mapping[xsi_type[xsi_type.rfind("}") + 1 :]] = reference
        mapping[reference] = reference
        mapping[def_name_from_ref(reference)] = reference
    return mapping
