"""Resolution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CollectionInputs:
    """Raw texts of one collection as read from disk."""

    collection_name: str
    schema_text: str | None
    source_text: str
    schema_path: Path | None = None
    source_path: Path | None = None
