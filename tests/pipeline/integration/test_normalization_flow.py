"""End-to-end normalization of a small generated service document."""

from __future__ import annotations

import copy
import json
from pathlib import Path

import yaml
from xso_normalizer.canonicalization import c14n_xso
from xso_normalizer.configuration import (
    ELEMENT,
    TYPEDEF,
    DictionaryEntry,
    NamespaceDictionary,
)
from xso_normalizer.pipeline import NormalizationRequest, normalize_document, run_normalization
from xso_normalizer.reference_resolution import verify_reference_integrity


def _ref(name: str) -> dict:
    return {"$ref": f"#/definitions/{name}"}


def _document() -> dict:
    xml_o = {"namespace": "urn:o", "prefix": "o"}
    return {
        "swagger": "2.0",
        "info": {"title": "orders", "version": "1.0.0"},
        "paths": {
            "/orders": {
                "post": {
                    "parameters": [
                        {"name": "body", "in": "body", "schema": _ref("OrderRequest_tns")}
                    ],
                    "responses": {
                        "200": {"description": "OK", "schema": _ref("OrderResponse_tns")}
                    },
                }
            }
        },
        "definitions": {
            "OrderRequest_tns": {
                "xml": {**xml_o, "name": "OrderRequest"},
                "type": "object",
                "properties": {"order": _ref("Order_element_o")},
            },
            "Order_element_o": {
                "xml": {**xml_o, "name": "Order"},
                "typeOf": _ref("Order_typedef_o"),
            },
            "Order_typedef_o": {
                "xml": dict(xml_o),
                "type": "object",
                "properties": {
                    "id": {"type": "integer", "default": "7"},
                    "express": {"type": "boolean", "default": "1"},
                    "status": {
                        "anyOf": [
                            _ref("Status_typedef_o"),
                            {"type": "string", "enum": ["OTHER"]},
                        ]
                    },
                    "note": {**_ref("Note_typedef_o"), "x-nullable": True},
                    "memo": _ref("Note_typedef_o"),
                    "lang": _ref("lang_attribute_o"),
                },
            },
            "Status_typedef_o": {"type": "string", "enum": ["NEW", "DONE"]},
            "Note_typedef_o": {"type": "string", "maxLength": 200},
            "lang_attribute_o": {"type": "string", "xml": {"name": "lang", "attribute": True}},
            "OrderResponse_tns": {
                "xml": {**xml_o, "name": "OrderResponse"},
                "type": "object",
                "properties": {"accepted": {"type": "boolean"}},
            },
            "Unused_typedef_o": {"type": "string"},
        },
    }


def _dictionary() -> NamespaceDictionary:
    return NamespaceDictionary(
        entries={
            "Order_element_o": DictionaryEntry(for_kind=ELEMENT, type_ns_name="Order_typedef_o"),
            "Order_typedef_o": DictionaryEntry(for_kind=TYPEDEF),
        }
    )


def test_normalization_flow_produces_a_map_ready_document() -> None:
    document = _document()

    outcome = normalize_document(document, _dictionary())

    definitions = document["definitions"]
    assert list(definitions) == [
        "Note_type_o",
        "Note_type_o_nil",
        "OrderRequest_tns",
        "OrderResponse_tns",
        "Order_element_o",
    ]
    assert outcome.definitions_before == 8
    assert outcome.definitions_after == 5
    assert outcome.removed_definitions == (
        "Order_typedef_o",
        "Status_typedef_o",
        "Unused_typedef_o",
    )

    order = definitions["Order_element_o"]
    assert order["xml"] == {"namespace": "urn:o", "prefix": "o", "name": "Order"}
    assert "typeOf" not in order
    properties = order["properties"]
    assert properties["id"] == {
        "xml": {"namespace": "urn:o", "prefix": "o"},
        "type": "integer",
        "default": 7,
    }
    assert properties["express"]["default"] is True
    assert properties["status"]["type"] == "string"
    assert properties["status"]["enum"] == ["NEW", "DONE", "OTHER"]
    assert properties["note"] == {"$ref": "#/definitions/Note_type_o_nil"}
    assert properties["memo"] == {"$ref": "#/definitions/Note_type_o"}
    assert properties["lang"]["xml"] == {"namespace": "", "name": "lang", "attribute": True}

    assert definitions["Note_type_o_nil"]["x-nullable"] is True
    assert "x-nullable" not in definitions["Note_type_o"]
    verify_reference_integrity(document)


def test_normalized_document_is_already_canonical() -> None:
    document = _document()
    normalize_document(document, _dictionary())
    normalized = copy.deepcopy(document)

    c14n_xso(document)

    assert document == normalized


def test_run_normalization_reads_and_writes_files(tmp_path: Path) -> None:
    input_path = tmp_path / "orders.json"
    input_path.write_text(json.dumps(_document()), encoding="utf-8")
    dictionary_path = tmp_path / "orders.dictionary.yaml"
    dictionary_path.write_text(
        yaml.safe_dump(
            {
                "dictEntry": {
                    "Order_element_o": {"for": "element", "typeNSName": "Order_typedef_o"},
                    "Order_typedef_o": {"for": "typedef"},
                },
                "createOptions": {"v3discriminator": False},
            }
        ),
        encoding="utf-8",
    )
    config_path = tmp_path / "xso-normalizer.yaml"
    config_path.write_text("normalization:\n  v3_nullable: true\n", encoding="utf-8")
    output_path = tmp_path / "out" / "orders.yaml"

    outcome = run_normalization(
        NormalizationRequest(
            input_path=str(input_path),
            dictionary_path=str(dictionary_path),
            output_path=str(output_path),
            config_path=str(config_path),
        )
    )

    assert outcome.output_path == output_path.resolve()
    written = yaml.safe_load(output_path.read_text(encoding="utf-8"))
    assert sorted(written["definitions"]) == list(outcome.document["definitions"])
    assert written["definitions"]["Note_type_o_nil"]["nullable"] is True
    assert "x-nullable" not in written["definitions"]["Note_type_o_nil"]
