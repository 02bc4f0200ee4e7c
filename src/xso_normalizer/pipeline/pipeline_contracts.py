"""Pipeline entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class NormalizationRequest:
    """Input contract for normalizing one document file."""

    input_path: str
    dictionary_path: str
    output_path: str
    config_path: str | None = None


@dataclass(frozen=True)
class NormalizationOutcome:
    """Output contract for one completed normalization."""

    document: dict[str, Any]
    passes: tuple[str, ...]
    definitions_before: int
    definitions_after: int
    removed_definitions: tuple[str, ...] = ()
    output_path: Path | None = None
