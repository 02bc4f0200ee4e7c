"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "xso-normalizer.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Normalization configuration for xso-normalizer.
# Every setting is optional; remove a line to fall back to its default.

normalization:
  # Keep definitions that declare xml.name (schema root elements) even when no
  # path operation references them.
  keep_root_elements: false
  # Remove xml objects that are not on a definition root, a property or an array item.
  pure_xml: true
  # null keeps the nullability key as generated, true emits `nullable`,
  # false emits `x-nullable`.
  v3_nullable: null
  # null uses the dictionary's createOptions.v3discriminator; true or false overrides it.
  v3_discriminator: null
  # Fail the run as soon as a pass leaves a $ref that does not resolve.
  verify_references: true
"""


def build_placeholder_configuration() -> str:
    """Build a YAML configuration template with defaults and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
