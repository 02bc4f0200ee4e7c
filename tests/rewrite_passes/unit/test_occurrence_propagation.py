"""Unnamed occurrence propagation tests."""

from __future__ import annotations

import pytest
from xso_normalizer.reference_resolution import UnresolvedReferenceError
from xso_normalizer.rewrite_passes import remove_unnamed_occurrence


def _holder(outer: dict) -> dict:
    return {"definitions": {"Holder": {"type": "object", "allOf": [outer]}}}


def _sequence(**bounds) -> dict:
    return {
        "type": "array",
        **bounds,
        "items": {
            "allOf": [
                {
                    "type": "object",
                    "properties": {
                        "item": {
                            "type": "array",
                            "minItems": 1,
                            "maxItems": 2,
                            "items": {"type": "string"},
                        },
                        "single": {"type": "string", "xml": {"name": "single"}},
                        "optional": {"type": "string"},
                    },
                    "required": ["item", "single"],
                }
            ]
        },
    }


def test_bounds_multiply_into_inner_arrays() -> None:
    document = _holder(_sequence(minItems=2, maxItems=3, **{"x-ibm-group": "g1"}))

    remove_unnamed_occurrence(document)

    inner = document["definitions"]["Holder"]["allOf"][0]
    content = inner["allOf"][0]
    item = content["properties"]["item"]
    assert item["minItems"] == 2
    assert item["maxItems"] == 6
    assert item["x-ibm-group"] == "g1"
    assert content["required"] == ["item", "single"]


def test_scalar_properties_are_wrapped_in_arrays() -> None:
    document = _holder(_sequence(minItems=2, maxItems=3, **{"x-ibm-group": "g1"}))

    remove_unnamed_occurrence(document)

    properties = document["definitions"]["Holder"]["allOf"][0]["allOf"][0]["properties"]
    assert properties["single"] == {
        "type": "array",
        "items": {"type": "string", "xml": {"name": "single"}},
        "x-ibm-group": "g1",
        "minItems": 2,
        "maxItems": 3,
        "xml": {"name": "single"},
    }
    assert properties["optional"] == {
        "type": "array",
        "items": {"type": "string"},
        "x-ibm-group": "g1",
        "maxItems": 3,
    }


def test_absent_bounds_mean_optional_and_unbounded() -> None:
    document = _holder(_sequence())

    remove_unnamed_occurrence(document)

    content = document["definitions"]["Holder"]["allOf"][0]["allOf"][0]
    assert content["properties"]["item"] == {"type": "array", "items": {"type": "string"}}
    assert content["properties"]["single"]["type"] == "array"
    assert "maxItems" not in content["properties"]["single"]
    assert "minItems" not in content["properties"]["single"]
    assert "required" not in content


def test_single_occurrence_leaves_scalars_alone() -> None:
    document = _holder(_sequence(minItems=1, maxItems=1))

    remove_unnamed_occurrence(document)

    properties = document["definitions"]["Holder"]["allOf"][0]["allOf"][0]["properties"]
    assert properties["single"] == {"type": "string", "xml": {"name": "single"}}
    assert properties["item"]["minItems"] == 1
    assert properties["item"]["maxItems"] == 2


def test_groups_concatenate_outer_first() -> None:
    outer = _sequence(maxItems=2, **{"x-ibm-group": ["outer"]})
    outer["items"]["allOf"][0]["properties"]["item"]["x-ibm-group"] = ["inner"]
    document = _holder(outer)

    remove_unnamed_occurrence(document)

    item = document["definitions"]["Holder"]["allOf"][0]["allOf"][0]["properties"]["item"]
    assert item["x-ibm-group"] == ["outer", "inner"]


def test_referenced_members_are_inlined_before_scaling() -> None:
    document = {
        "definitions": {
            "Part": {
                "type": "object",
                "properties": {"value": {"type": "string"}},
                "required": ["value"],
            },
            "Holder": {
                "allOf": [
                    {
                        "type": "array",
                        "minItems": 1,
                        "maxItems": 4,
                        "items": {"oneOf": [{"$ref": "#/definitions/Part"}]},
                    }
                ]
            },
        }
    }

    remove_unnamed_occurrence(document)

    member = document["definitions"]["Holder"]["allOf"][0]["oneOf"][0]
    assert member["properties"]["value"]["maxItems"] == 4
    assert document["definitions"]["Part"]["properties"]["value"] == {"type": "string"}


def test_dangling_member_reference_names_the_holding_definition() -> None:
    document = _holder(
        {"type": "array", "maxItems": 2, "items": {"allOf": [{"$ref": "#/definitions/Missing"}]}}
    )

    with pytest.raises(UnresolvedReferenceError) as error:
        remove_unnamed_occurrence(document)

    assert error.value.reference == "#/definitions/Missing"
    assert error.value.definition == "Holder"
