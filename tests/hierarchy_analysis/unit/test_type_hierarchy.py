"""Hierarchy analysis tests."""

from __future__ import annotations

import logging

from xso_normalizer.hierarchy_analysis import (
    NO_XSI_TYPE,
    get_ancestor_refs,
    get_extensions,
    get_sub_types,
    get_xsi_type,
    in_poly_hierarchy,
)
from xso_normalizer.reference_resolution import find_refs


def _extends(base: str) -> dict:
    return {"allOf": [{"$ref": f"#/definitions/{base}"}, {"type": "object"}]}


def _definitions() -> dict:
    return {
        "Base": {"type": "object", "x-ibm-discriminator": True},
        "Mid": {**_extends("Base"), "x-ibm-discriminator": True},
        "Leaf": _extends("Mid"),
        "Plain": {"type": "object"},
    }


def test_sub_types_and_ancestors_follow_first_allof_member() -> None:
    definitions = _definitions()

    assert get_sub_types(definitions) == {"Base": ["Mid"], "Mid": ["Leaf"]}
    assert get_ancestor_refs(definitions, "Leaf") == ["#/definitions/Mid", "#/definitions/Base"]
    assert get_ancestor_refs(definitions, "Plain") == []


def test_ancestor_cycle_is_reported_and_cut(caplog) -> None:
    definitions = {"A": _extends("B"), "B": _extends("A")}

    with caplog.at_level(logging.WARNING, logger="xso_normalizer.hierarchy"):
        refs = get_ancestor_refs(definitions, "A")

    assert refs == ["#/definitions/B"]
    assert "loops" in caplog.text


def test_extensions_follow_discriminated_descendants() -> None:
    definitions = _definitions()

    assert get_extensions(definitions, "#/definitions/Base") == ["Mid", "Leaf"]


def test_in_poly_hierarchy_checks_discriminators_and_structural_bases() -> None:
    definitions = _definitions()
    definitions["Shape"] = {"type": "object"}
    definitions["Square"] = _extends("Shape")
    index = find_refs(definitions)

    assert in_poly_hierarchy(definitions, "Leaf", get_ancestor_refs(definitions, "Leaf"), index)
    assert in_poly_hierarchy(definitions, "Shape", [], index)
    assert not in_poly_hierarchy(definitions, "Plain", [], index)


def test_xsi_type_is_qualified_and_follows_type_of() -> None:
    definitions = {
        "Car_type_s1": {
            "x-xsi-type": "Car",
            "x-xsi-type-xml": {"namespace": "urn:cars", "prefix": "s1"},
        },
        "Car_element_s1": {"typeOf": {"$ref": "#/definitions/Car_type_s1"}},
        "Vehicle_type_s1": {"x-xsi-type": "Vehicle", "x-xsi-type-abstract": True},
    }

    assert get_xsi_type(definitions["Car_element_s1"], definitions) == "{urn:cars}Car"
    assert get_xsi_type(definitions["Car_type_s1"], definitions, qualified=False) == "Car"
    assert get_xsi_type(definitions["Vehicle_type_s1"], definitions) == NO_XSI_TYPE
    assert get_xsi_type({"type": "string"}, definitions) == NO_XSI_TYPE
