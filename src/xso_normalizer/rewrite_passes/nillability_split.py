"""Split definitions referenced both as nillable and as non-nillable."""

from __future__ import annotations

import copy
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from xso_normalizer.hierarchy_analysis import base_ref, get_ancestor_refs, get_sub_types
from xso_normalizer.reference_resolution import def_name_from_ref
from xso_normalizer.schema_traversal import (
    SchemaObject,
    SchemaWalk,
    definitions_of,
    walk_schema_objects,
)

from .rewrite_models import NIL_SUFFIX


@dataclass
class NullabilityUsage:
    """Definitions referenced in nullable and in non-nullable contexts."""

    nullable_refs: dict[str, list[SchemaObject]] = field(default_factory=dict)
    non_nullable: dict[str, bool] = field(default_factory=dict)


def find_refs_and_nullables(document: SchemaObject) -> NullabilityUsage:
    """Collect reference holders by nullability, consuming their ``x-nullable`` markers.

    ``allOf`` members are extension links, not value usages, and are ignored.
    """
    usage = NullabilityUsage()

    def visit(xso: SchemaObject, walk: SchemaWalk) -> SchemaObject:
        reference = xso.get("$ref")
        if not isinstance(reference, str) or walk.parent_key == "allOf":
            return xso
        ns_name = def_name_from_ref(reference)
        if xso.get("x-nullable"):
            usage.nullable_refs.setdefault(ns_name, []).append(xso)
            del xso["x-nullable"]
        else:
            usage.non_nullable[ns_name] = True
        return xso

    walk_schema_objects(document, visit)
    return usage


def fixup_for_nil_and_non_nil(document: SchemaObject) -> None:
    """Give nillable usages their own ``<name>_nil`` definition when both usages exist."""
    definitions = definitions_of(document)
    usage = find_refs_and_nullables(document)

    # A nullable extension makes its base nullable too (and vice versa).
    sub_types = get_sub_types(definitions)
    changed = True
    while changed:
        changed = _spread(usage.nullable_refs, definitions, sub_types, list)
        changed = _spread(usage.non_nullable, definitions, sub_types, lambda: True) or changed

    for ns_name, holders in usage.nullable_refs.items():
        if ns_name in usage.non_nullable:
            for holder in holders:
                reference = holder["$ref"]
                holder["$ref"] = reference[: reference.rfind("/") + 1] + ns_name + NIL_SUFFIX

    for ns_name in list(usage.nullable_refs):
        xso = definitions.get(ns_name)
        if xso is None:
            continue
        if ns_name not in usage.non_nullable:
            xso["x-nullable"] = True
            continue
        clone_name = ns_name + NIL_SUFFIX
        if clone_name in definitions:
            continue
        clone = copy.deepcopy(xso)
        members = clone.get("allOf")
        if (
            get_ancestor_refs(definitions, ns_name)
            and isinstance(members, list)
            and len(members) > 1
            and base_ref(clone)
        ):
            members[0]["$ref"] += NIL_SUFFIX
        unique_name = clone.get("x-xsi-type-uniquename")
        clone["x-xsi-type-uniquename"] = unique_name + NIL_SUFFIX if unique_name else clone_name
        clone["x-nullable"] = True
        xso.pop("x-nullable", None)
        definitions[clone_name] = clone


def _spread(
    flagged: dict[str, Any],
    definitions: dict[str, SchemaObject],
    sub_types: dict[str, list[str]],
    empty: Callable[[], Any],
) -> bool:
    added = False
    for ns_name in list(flagged):
        related = list(sub_types.get(ns_name, ()))
        related.extend(
            def_name_from_ref(reference) for reference in get_ancestor_refs(definitions, ns_name)
        )
        for other in related:
            if other not in flagged:
                flagged[other] = empty()
                added = True
    return added
