"""Schema merging exports."""

from .fallback_fields import build_fallback_fields
from .schema_merger import merge, merge_document

__all__ = ["build_fallback_fields", "merge", "merge_document"]
