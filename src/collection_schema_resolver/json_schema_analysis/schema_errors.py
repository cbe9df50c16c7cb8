"""JSON Schema analysis errors."""

from __future__ import annotations


class SchemaError(Exception):
    """Raised for schema parsing or classification failures."""


class MalformedPropertyError(SchemaError):
    """A single property could not be classified."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Malformed property '{path}': {reason}")
        self.path = path
        self.reason = reason


class MalformedDocumentError(SchemaError):
    """The schema document is unreadable as a whole."""
