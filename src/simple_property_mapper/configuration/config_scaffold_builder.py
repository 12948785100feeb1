"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "mapper.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Mapper configuration template for simple-property-mapper.
# Replace every <REQUIRED> placeholder before running describe, read or rewrite.
# Remove <OPTIONAL> entries you do not need; omitted entries use their defaults.

record_format:
  # Comment line written above the records. Use null to write no comment.
  comment: "Properties serialized by simple-property-mapper"
  # Write the generation date as a second comment line.
  timestamp: true
  sort_keys: false
  # Text encoding of the properties files that are read and written.
  encoding: "iso-8859-1"

types:
  # Each entry references an importable class as 'package.module:ClassName'.
  - type: "<REQUIRED>"
    # Key prefix for this type; defaults to the class name.
    root: "<OPTIONAL>"
    # Fields may be omitted for classes decorated with @property_type.
    fields:
      - name: "<REQUIRED>"
        # External key; defaults to the field name.
        key: "<OPTIONAL>"
        # Converter class as 'package.module:ConverterName'.
        converter: "<OPTIONAL>"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML mapper configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder mapper configuration template to the requested output path.

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
        raise FileExistsError(
            f"Mapper configuration file already exists: {destination.resolve()}"
        )
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
