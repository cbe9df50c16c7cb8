"""Collection schema resolution use-case service."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Sequence
from pathlib import Path

from collection_schema_resolver.configuration.runtime_settings import (
    CollectionSettings,
    Configuration,
)
from collection_schema_resolver.field_model.field_models import CompleteSchema
from collection_schema_resolver.schema_merging import merge_document
from collection_schema_resolver.source_scanning import (
    extract_annotations,
    extract_collection_source,
)

from .resolution_contracts import CollectionInputs

_LOGGER = logging.getLogger("collection_schema_resolver.resolution")


class ResolutionError(Exception):
    """Raised when a collection has no usable inputs at all."""


def resolve_collection_schema(
    collection_name: str,
    schema_text: str | None,
    source_text: str,
) -> CompleteSchema:
    """Resolve one collection from its generated schema and schema source texts.

    ``source_text`` may be a whole content config file; the collection's own
    definition is isolated when possible and the whole text is scanned otherwise.
    """
    collection_source = extract_collection_source(source_text, collection_name)
    if collection_source is None:
        _LOGGER.debug("Scanning whole source for collection %s", collection_name)
        collection_source = source_text
    annotations = extract_annotations(collection_source)
    return merge_document(collection_name, schema_text, annotations)


def resolve_inputs(inputs: CollectionInputs) -> CompleteSchema:
    return resolve_collection_schema(inputs.collection_name, inputs.schema_text, inputs.source_text)


def read_collection_inputs(settings: CollectionSettings) -> CollectionInputs:
    """Read the generated schema and source files of one collection.

    Raises:
      ResolutionError: If neither file can be read.
    """
    schema_text = _read_optional(settings.schema_path)
    source_text = _read_optional(settings.source_path)
    if schema_text is None and source_text is None:
        raise ResolutionError(
            f"No inputs found for collection '{settings.name}': "
            f"{settings.schema_path} and {settings.source_path} are unreadable."
        )
    if schema_text is None:
        _LOGGER.warning("Generated schema not readable: %s", settings.schema_path)
    if source_text is None:
        _LOGGER.warning("Schema source not readable: %s", settings.source_path)
    return CollectionInputs(
        collection_name=settings.name,
        schema_text=schema_text,
        source_text=source_text or "",
        schema_path=settings.schema_path,
        source_path=settings.source_path,
    )


def resolve_configured_collections(
    configuration: Configuration,
    names: Sequence[str] | None = None,
) -> list[tuple[CollectionInputs, CompleteSchema]]:
    """Resolve the requested (or all) configured collections in configuration order.

    Raises:
      ResolutionError: If a requested name is not configured or has no inputs.
    """
    selected = list(configuration.collections)
    if names:
        unknown = [name for name in names if configuration.collection(name) is None]
        if unknown:
            raise ResolutionError(f"Unknown collection(s): {', '.join(unknown)}")
        selected = [settings for settings in selected if settings.name in names]

    resolved: list[tuple[CollectionInputs, CompleteSchema]] = []
    for settings in selected:
        inputs = read_collection_inputs(settings)
        resolved.append((inputs, resolve_inputs(inputs)))
    return resolved


def resolution_cache_key(collection_name: str, schema_text: str | None, source_text: str) -> str:
    """Return a key identifying one resolution by collection and input contents."""
    digest = hashlib.sha256()
    digest.update(collection_name.encode("utf-8"))
    for text in (schema_text, source_text):
        digest.update(b"\x00")
        digest.update(content_hash(text).encode("ascii"))
    return digest.hexdigest()


def content_hash(text: str | None) -> str:
    if text is None:
        return ""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def _read_optional(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
