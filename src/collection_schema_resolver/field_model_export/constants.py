"""Shared field model export constants."""

from __future__ import annotations

SOURCES_SHEET_NAME = "Sources"
MAX_SHEET_TITLE_LENGTH = 31

FIELD_COLUMNS: tuple[str, ...] = (
    "Order",
    "Name",
    "Type",
    "Required",
    "Nullable",
    "Nested",
    "Parent",
    "Reference Collection",
    "Constraints",
    "Description",
    "Default",
)
SOURCE_COLUMNS: tuple[str, ...] = (
    "Collection",
    "Degraded",
    "Schema Path",
    "Schema Hash",
    "Source Path",
    "Source Hash",
    "Cache Key",
    "Issues",
)
