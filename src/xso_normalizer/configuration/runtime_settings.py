"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

ELEMENT = "element"
TYPEDEF = "typedef"


@dataclass(frozen=True)
class DictionaryEntry:
    """Origin metadata of one definition, as produced by the namespace dictionary."""

    for_kind: str | None = None
    type_ns_name: str | None = None
    schema_type: str | None = None
    prevent_optimize: bool = False
    suppress_xsi_type: bool = False


@dataclass(frozen=True)
class CreateOptions:
    """Generation options carried by the namespace dictionary."""

    v3_discriminator: bool = False
    request_context: str | None = None


@dataclass(frozen=True)
class NamespaceDictionary:
    """Read-only dictionary of definition origins consulted by the rewrite passes."""

    entries: Mapping[str, DictionaryEntry] = field(default_factory=dict)
    create_options: CreateOptions = field(default_factory=CreateOptions)

    def entry(self, ns_name: str | None) -> DictionaryEntry | None:
        """Return the entry for ``ns_name`` or None when the name is unknown."""
        if ns_name is None:
            return None
        return self.entries.get(ns_name)


@dataclass(frozen=True)
class NormalizationOptions:
    """Global options of one normalization run."""

    keep_root_elements: bool = False
    pure_xml: bool = True
    v3_nullable: bool | None = None
    v3_discriminator: bool | None = None
    verify_references: bool = True


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    normalization: NormalizationOptions
