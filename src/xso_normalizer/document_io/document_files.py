"""Reading and writing of API documents and namespace dictionaries."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from xso_normalizer.configuration.runtime_settings import (
    CreateOptions,
    DictionaryEntry,
    NamespaceDictionary,
)

YAML_SUFFIXES = (".yaml", ".yml")


class DocumentError(Exception):
    """Raised when a document or dictionary cannot be read, parsed or written."""


def load_document(path: str | Path) -> dict[str, Any]:
    """Load a Swagger/OpenAPI document from a JSON or YAML file."""
    document = _load_mapping(Path(path), "document")
    components = document.get("components")
    has_schemas = isinstance(components, dict) and isinstance(components.get("schemas"), dict)
    if not isinstance(document.get("definitions"), dict) and not has_schemas:
        raise DocumentError(
            f"Document {path} has neither 'definitions' nor 'components.schemas'."
        )
    return document


def load_dictionary(path: str | Path, *, request_context: str | None = None) -> NamespaceDictionary:
    """Load a namespace dictionary file (``dictEntry`` plus ``createOptions``)."""
    file_path = Path(path)
    return parse_dictionary(
        _load_mapping(file_path, "dictionary"),
        request_context=request_context or str(file_path),
    )


def parse_dictionary(
    raw: Mapping[str, Any], *, request_context: str | None = None
) -> NamespaceDictionary:
    """Build a NamespaceDictionary from its serialized mapping form."""
    raw_entries = raw.get("dictEntry") or {}
    if not isinstance(raw_entries, Mapping):
        raise DocumentError("Dictionary field 'dictEntry' must be a mapping.")

    entries: dict[str, DictionaryEntry] = {}
    for ns_name, raw_entry in raw_entries.items():
        if not isinstance(raw_entry, Mapping):
            raise DocumentError(f"Dictionary entry '{ns_name}' must be a mapping.")
        entries[str(ns_name)] = DictionaryEntry(
            for_kind=raw_entry.get("for"),
            type_ns_name=raw_entry.get("typeNSName"),
            schema_type=raw_entry.get("schemaType"),
            prevent_optimize=bool(raw_entry.get("preventOptimize", False)),
            suppress_xsi_type=bool(raw_entry.get("suppressXSIType", False)),
        )

    raw_options = raw.get("createOptions") or {}
    if not isinstance(raw_options, Mapping):
        raise DocumentError("Dictionary field 'createOptions' must be a mapping.")
    return NamespaceDictionary(
        entries=entries,
        create_options=CreateOptions(
            v3_discriminator=bool(raw_options.get("v3discriminator", False)),
            request_context=request_context,
        ),
    )


def write_document(document: Mapping[str, Any], path: str | Path) -> Path:
    """Write ``document`` as YAML (by suffix) or indented JSON and return the resolved path."""
    file_path = Path(path)
    if file_path.suffix.lower() in YAML_SUFFIXES:
        text = yaml.safe_dump(dict(document), sort_keys=False, allow_unicode=True)
    else:
        text = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise DocumentError(f"Unable to write document {file_path}: {exc}") from exc
    return file_path.resolve()


def _load_mapping(path: Path, label: str) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentError(f"Unable to read {label} {path}: {exc}") from exc

    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DocumentError(f"Invalid {label} {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise DocumentError(f"The {label} {path} must contain a mapping at the top level.")
    return data
