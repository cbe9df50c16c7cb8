"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "collections.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Project configuration template for collection-schema-resolver.
# Replace every <REQUIRED> placeholder before running resolve or export-workbook.
# Replace <OPTIONAL> placeholders only when your project layout needs them.
# Relative paths are resolved against the directory holding this file.

project:
  # Content config file declaring the collections (defineCollection calls).
  content_config: "<REQUIRED>"
  # Directory holding the generated <name>.schema.json files.
  schema_dir: ".astro/collections"

collections:
  - name: "<REQUIRED>"
    # schema_path: "<OPTIONAL>"
    # source_path: "<OPTIONAL>"

output:
  # Key casing of the resolved field model JSON (camel or snake).
  casing: "camel"

logging:
  # One of DEBUG, INFO, WARNING, ERROR.
  level: "WARNING"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML project configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder project configuration template to the requested output path.

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
