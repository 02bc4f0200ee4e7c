"""Pipeline orchestration unit tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from xso_normalizer.configuration import NamespaceDictionary, NormalizationOptions
from xso_normalizer.pipeline import (
    NormalizationError,
    NormalizationRequest,
    normalize_document,
    run_normalization,
)
from xso_normalizer.reference_resolution import UnresolvedReferenceError

EXPECTED_PASSES = (
    "duplicate_poly_hierarchy",
    "fixup_for_nil_and_non_nil",
    "expand_type_ofs",
    "process_complex_content_restriction",
    "squash_all_ofs",
    "remove_any_ofs",
    "remove_one_ofs",
    "remove_unnamed_occurrence",
    "adjust_defaults",
    "remove_unreferenced_definitions",
    "cleanup_definitions",
    "inline_swagger_attributes",
    "c14n_xml_objects",
    "remove_redundant_prefixes",
    "c14n_xso",
    "sort_definitions",
)


def test_passes_run_in_fixed_order() -> None:
    document = {"definitions": {"A": {"type": "string"}}}

    outcome = normalize_document(document, NamespaceDictionary())

    assert outcome.passes == EXPECTED_PASSES


def test_dangling_reference_is_fatal() -> None:
    document = {
        "paths": {"/a": {"get": {"responses": {"200": {"schema": {"$ref": "#/definitions/A"}}}}}},
        "definitions": {
            "A": {"type": "object", "properties": {"b": {"$ref": "#/definitions/Missing"}}}
        },
    }

    with pytest.raises(UnresolvedReferenceError) as excinfo:
        normalize_document(document, NamespaceDictionary())

    assert excinfo.value.reference == "#/definitions/Missing"
    assert excinfo.value.definition == "A"


def test_keep_root_elements_option_is_honoured() -> None:
    document = {"definitions": {"Root": {"type": "object", "xml": {"name": "Root"}}}}

    outcome = normalize_document(
        document, NamespaceDictionary(), NormalizationOptions(keep_root_elements=True)
    )

    assert "Root" in document["definitions"]
    assert outcome.removed_definitions == ()


def test_openapi3_documents_use_component_schemas() -> None:
    document = {
        "openapi": "3.0.0",
        "paths": {
            "/a": {
                "get": {
                    "responses": {
                        "200": {
                            "content": {
                                "application/xml": {
                                    "schema": {"$ref": "#/components/schemas/B_tns"}
                                }
                            }
                        }
                    }
                }
            }
        },
        "components": {
            "schemas": {
                "B_tns": {"type": "object", "x-nullable": True},
                "Unused": {"type": "string"},
            }
        },
    }

    outcome = normalize_document(
        document, NamespaceDictionary(), NormalizationOptions(v3_nullable=True)
    )

    assert document["components"]["schemas"] == {"B_tns": {"type": "object", "nullable": True}}
    assert outcome.removed_definitions == ("Unused",)


def test_missing_input_file_is_reported(tmp_path: Path) -> None:
    request = NormalizationRequest(
        input_path=str(tmp_path / "missing.json"),
        dictionary_path=str(tmp_path / "missing.dictionary.json"),
        output_path=str(tmp_path / "out.json"),
    )

    with pytest.raises(NormalizationError, match="Unable to read document"):
        run_normalization(request)
