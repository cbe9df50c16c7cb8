"""Source scanning exports."""

from .annotation_models import Annotations, ReferenceMapping
from .annotation_scanner import extract_annotations
from .collection_blocks import exported_collection_names, extract_collection_source

__all__ = [
    "Annotations",
    "ReferenceMapping",
    "exported_collection_names",
    "extract_annotations",
    "extract_collection_source",
]
