"""Minimal field model built from schema source alone."""

from __future__ import annotations

from collection_schema_resolver.field_model.field_models import FieldKind, FieldType, SchemaField
from collection_schema_resolver.source_scanning.annotation_models import Annotations


def build_fallback_fields(annotations: Annotations) -> list[SchemaField]:
    """Return one string field per field name found in source.

    Declared fields are required unless chained with an optional modifier;
    names known only from annotations are optional. Array references are
    built as ``Array<String>`` so the overlay can resolve them.
    """
    if annotations.declared_fields:
        return [
            SchemaField(
                name=name,
                field_type=_fallback_type(name, annotations),
                required=name not in annotations.optional_fields,
                order=index,
            )
            for index, name in enumerate(annotations.declared_fields)
        ]
    return [
        SchemaField(name=name, field_type=_fallback_type(name, annotations), order=index)
        for index, name in enumerate(annotations.annotated_fields)
    ]


def _fallback_type(name: str, annotations: Annotations) -> FieldType:
    mapping = annotations.reference_for(name)
    if mapping is not None and mapping.is_array:
        return FieldType.array_of(FieldType.of(FieldKind.STRING))
    return FieldType.of(FieldKind.STRING)
