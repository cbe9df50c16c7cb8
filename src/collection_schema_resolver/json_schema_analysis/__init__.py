"""JSON Schema analysis exports."""

from .entry_schema_parser import parse_entry_schema
from .property_classifier import PropertyClassification, classify_property
from .schema_errors import MalformedDocumentError, MalformedPropertyError, SchemaError
from .schema_properties import JsonSchemaProperty, load_collection_schema, parse_schema_document

__all__ = [
    "JsonSchemaProperty",
    "MalformedDocumentError",
    "MalformedPropertyError",
    "PropertyClassification",
    "SchemaError",
    "classify_property",
    "load_collection_schema",
    "parse_entry_schema",
    "parse_schema_document",
]
