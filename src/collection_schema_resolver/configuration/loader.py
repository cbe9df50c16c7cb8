"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    SUPPORTED_CASINGS,
    SUPPORTED_LOG_LEVELS,
    CollectionSettings,
    Configuration,
    LoggingSettings,
    OutputSettings,
    ProjectSettings,
)

DEFAULT_SCHEMA_DIR = ".astro/collections"
SCHEMA_FILE_SUFFIX = ".schema.json"


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
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    base_path = path.parent
    project = _parse_project_section(parsed.get("project"), base_path)
    collections = _parse_collections_section(parsed.get("collections"), project, base_path)
    output = _parse_output_section(parsed.get("output"))
    logging_settings = _parse_logging_section(parsed.get("logging"))

    return Configuration(
        path=path,
        project=project,
        collections=collections,
        output=output,
        logging=logging_settings,
    )


def _parse_project_section(value: Any, base_path: Path) -> ProjectSettings:
    section = _require_mapping(value, "project")
    content_config = _require_non_empty_string(
        section.get("content_config"), "project.content_config"
    )
    schema_dir = _require_non_empty_string(
        section.get("schema_dir", DEFAULT_SCHEMA_DIR), "project.schema_dir"
    )
    return ProjectSettings(
        content_config=_resolve_path(base_path, content_config),
        schema_dir=_resolve_path(base_path, schema_dir),
    )


def _parse_collections_section(
    value: Any, project: ProjectSettings, base_path: Path
) -> tuple[CollectionSettings, ...]:
    if not isinstance(value, Sequence) or isinstance(value, str):
        raise ConfigurationError("Configuration section 'collections' must be a list.")
    if not value:
        raise ConfigurationError("collections must contain at least one collection.")

    collections: list[CollectionSettings] = []
    seen_names: set[str] = set()
    for index, entry in enumerate(value):
        label = f"collections[{index}]"
        if isinstance(entry, str):
            entry = {"name": entry}
        section = _require_mapping(entry, label)
        name = _require_non_empty_string(section.get("name"), f"{label}.name")
        if name in seen_names:
            raise ConfigurationError(f"Duplicate collection name: {name}")
        seen_names.add(name)

        schema_path_value = _optional_string(section.get("schema_path"), f"{label}.schema_path")
        source_path_value = _optional_string(section.get("source_path"), f"{label}.source_path")
        collections.append(
            CollectionSettings(
                name=name,
                schema_path=(
                    _resolve_path(base_path, schema_path_value)
                    if schema_path_value
                    else project.schema_dir / f"{name}{SCHEMA_FILE_SUFFIX}"
                ),
                source_path=(
                    _resolve_path(base_path, source_path_value)
                    if source_path_value
                    else project.content_config
                ),
            )
        )
    return tuple(collections)


def _parse_output_section(value: Any) -> OutputSettings:
    section = _optional_mapping(value, "output")
    casing = _require_non_empty_string(section.get("casing", "camel"), "output.casing").lower()
    if casing not in SUPPORTED_CASINGS:
        raise ConfigurationError(
            f"output.casing must be one of: {', '.join(SUPPORTED_CASINGS)}."
        )
    return OutputSettings(casing=casing)


def _parse_logging_section(value: Any) -> LoggingSettings:
    section = _optional_mapping(value, "logging")
    level = _require_non_empty_string(section.get("level", "WARNING"), "logging.level").upper()
    if level not in SUPPORTED_LOG_LEVELS:
        raise ConfigurationError(
            f"logging.level must be one of: {', '.join(SUPPORTED_LOG_LEVELS)}."
        )
    return LoggingSettings(level=level)


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None
