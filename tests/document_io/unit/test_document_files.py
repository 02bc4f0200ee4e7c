"""Document and dictionary file handling tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from xso_normalizer.configuration import ELEMENT
from xso_normalizer.document_io import (
    DocumentError,
    load_dictionary,
    load_document,
    parse_dictionary,
    write_document,
)


def test_load_document_reads_json_and_yaml(tmp_path: Path) -> None:
    document = {"swagger": "2.0", "definitions": {"A": {"type": "string"}}}
    json_path = tmp_path / "api.json"
    json_path.write_text(json.dumps(document), encoding="utf-8")
    yaml_path = tmp_path / "api.yml"
    yaml_path.write_text(yaml.safe_dump(document), encoding="utf-8")

    assert load_document(json_path) == document
    assert load_document(yaml_path) == document


def test_load_document_accepts_component_schemas(tmp_path: Path) -> None:
    path = tmp_path / "api.yaml"
    path.write_text("openapi: 3.0.0\ncomponents:\n  schemas: {}\n", encoding="utf-8")

    assert load_document(path)["components"] == {"schemas": {}}


def test_load_document_requires_definitions(tmp_path: Path) -> None:
    path = tmp_path / "api.json"
    path.write_text(json.dumps({"swagger": "2.0", "paths": {}}), encoding="utf-8")

    with pytest.raises(DocumentError, match="neither 'definitions' nor 'components.schemas'"):
        load_document(path)


def test_load_document_reports_invalid_content(tmp_path: Path) -> None:
    broken = tmp_path / "api.json"
    broken.write_text("{not json", encoding="utf-8")
    scalar = tmp_path / "api.yaml"
    scalar.write_text("just text\n", encoding="utf-8")

    with pytest.raises(DocumentError, match="Invalid document"):
        load_document(broken)
    with pytest.raises(DocumentError, match="mapping at the top level"):
        load_document(scalar)


def test_parse_dictionary_maps_serialized_fields() -> None:
    dictionary = parse_dictionary(
        {
            "dictEntry": {
                "Foo_element_s1": {
                    "for": "element",
                    "typeNSName": "Foo_type_s1",
                    "schemaType": "complex",
                    "preventOptimize": True,
                    "suppressXSIType": True,
                }
            },
            "createOptions": {"v3discriminator": True},
        },
        request_context="service.wsdl",
    )

    entry = dictionary.entry("Foo_element_s1")
    assert entry is not None
    assert entry.for_kind == ELEMENT
    assert entry.type_ns_name == "Foo_type_s1"
    assert entry.schema_type == "complex"
    assert entry.prevent_optimize is True
    assert entry.suppress_xsi_type is True
    assert dictionary.entry("Unknown") is None
    assert dictionary.create_options.v3_discriminator is True
    assert dictionary.create_options.request_context == "service.wsdl"


def test_parse_dictionary_rejects_malformed_entries() -> None:
    with pytest.raises(DocumentError, match="'Foo' must be a mapping"):
        parse_dictionary({"dictEntry": {"Foo": "element"}})


def test_load_dictionary_uses_the_file_as_request_context(tmp_path: Path) -> None:
    path = tmp_path / "service.dictionary.json"
    path.write_text(json.dumps({"dictEntry": {}}), encoding="utf-8")

    dictionary = load_dictionary(path)

    assert dictionary.entries == {}
    assert dictionary.create_options.request_context == str(path)


def test_write_document_selects_format_by_suffix(tmp_path: Path) -> None:
    document = {"swagger": "2.0", "definitions": {"B": {}, "A": {}}}

    json_path = write_document(document, tmp_path / "out" / "api.json")
    yaml_path = write_document(document, tmp_path / "out" / "api.yaml")

    json_text = json_path.read_text(encoding="utf-8")
    assert json_text.endswith("}\n")
    assert json.loads(json_text) == document
    written = yaml.safe_load(yaml_path.read_text(encoding="utf-8"))
    assert written == document
    assert list(written["definitions"]) == ["B", "A"]
