"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

SUPPORTED_CASINGS = ("camel", "snake")
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class ProjectSettings:
    """Locations of the content project inputs."""

    content_config: Path
    schema_dir: Path


@dataclass(frozen=True)
class CollectionSettings:
    """Inputs of one content collection."""

    name: str
    schema_path: Path
    source_path: Path


@dataclass(frozen=True)
class OutputSettings:
    """Field model serialization options."""

    casing: str


@dataclass(frozen=True)
class LoggingSettings:
    """Diagnostic logging options."""

    level: str


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    project: ProjectSettings
    collections: tuple[CollectionSettings, ...]
    output: OutputSettings
    logging: LoggingSettings

    def collection(self, name: str) -> CollectionSettings | None:
        """Return the settings of the named collection, if configured."""
        for settings in self.collections:
            if settings.name == name:
                return settings
        return None
