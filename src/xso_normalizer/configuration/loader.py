"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import Configuration, NormalizationOptions

_NORMALIZATION_KEYS = frozenset(
    {
        "keep_root_elements",
        "pure_xml",
        "v3_nullable",
        "v3_discriminator",
        "verify_references",
    }
)


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    normalization = _parse_normalization_section(parsed.get("normalization"))
    return Configuration(path=path, normalization=normalization)


def _parse_normalization_section(value: Any) -> NormalizationOptions:
    if value is None:
        return NormalizationOptions()
    section = _require_mapping(value, "normalization")
    unknown = sorted(str(key) for key in section if key not in _NORMALIZATION_KEYS)
    if unknown:
        raise ConfigurationError(f"Unknown normalization settings: {', '.join(unknown)}")

    defaults = NormalizationOptions()
    return NormalizationOptions(
        keep_root_elements=_require_bool(
            section.get("keep_root_elements", defaults.keep_root_elements),
            "normalization.keep_root_elements",
        ),
        pure_xml=_require_bool(
            section.get("pure_xml", defaults.pure_xml), "normalization.pure_xml"
        ),
        v3_nullable=_optional_bool(section.get("v3_nullable"), "normalization.v3_nullable"),
        v3_discriminator=_optional_bool(
            section.get("v3_discriminator"), "normalization.v3_discriminator"
        ),
        verify_references=_require_bool(
            section.get("verify_references", defaults.verify_references),
            "normalization.verify_references",
        ),
    )


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be true or false.")
    return value


def _optional_bool(value: Any, field_name: str) -> bool | None:
    if value is None:
        return None
    return _require_bool(value, field_name)
