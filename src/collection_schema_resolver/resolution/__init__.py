"""Resolution domain exports."""

from .collection_resolution_use_case import (
    ResolutionError,
    content_hash,
    read_collection_inputs,
    resolution_cache_key,
    resolve_collection_schema,
    resolve_configured_collections,
    resolve_inputs,
)
from .resolution_contracts import CollectionInputs

__all__ = [
    "CollectionInputs",
    "ResolutionError",
    "content_hash",
    "read_collection_inputs",
    "resolution_cache_key",
    "resolve_collection_schema",
    "resolve_configured_collections",
    "resolve_inputs",
]
