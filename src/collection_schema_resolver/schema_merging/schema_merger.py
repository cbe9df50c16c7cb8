"""Overlay of source annotations onto analysed schema fields."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from collection_schema_resolver.field_model.field_models import (
    REFERENCE_KINDS,
    CompleteSchema,
    FieldKind,
    FieldType,
    IssueKind,
    ResolutionIssue,
    SchemaField,
)
from collection_schema_resolver.field_model.field_paths import is_path_prefix
from collection_schema_resolver.json_schema_analysis import (
    MalformedDocumentError,
    load_collection_schema,
    parse_entry_schema,
)
from collection_schema_resolver.source_scanning.annotation_models import Annotations

from .fallback_fields import build_fallback_fields

_LOGGER = logging.getLogger("collection_schema_resolver.schema_merging")


def merge(
    fields: Sequence[SchemaField],
    annotations: Annotations,
    *,
    collection_name: str,
    issues: Sequence[ResolutionIssue] = (),
    degraded: bool = False,
) -> CompleteSchema:
    """Return the canonical schema for ``fields`` with annotations applied in place.

    Field order is taken from ``fields`` unchanged; annotations naming fields
    that are not present are ignored.
    """
    merged_issues = list(issues)
    merged_fields = tuple(
        _overlay(schema_field, annotations, merged_issues) for schema_field in fields
    )

    known_names = {schema_field.name for schema_field in fields}
    for name in annotations.annotated_fields:
        if name in known_names:
            continue
        if any(is_path_prefix(name, known) for known in known_names):
            _LOGGER.debug("Ignoring annotation for flattened object %s", name)
        else:
            _LOGGER.debug("Ignoring annotation for undiscovered field %s", name)

    return CompleteSchema(
        collection_name=collection_name,
        fields=merged_fields,
        degraded=degraded,
        issues=tuple(merged_issues),
    )


def merge_document(
    collection_name: str,
    schema_text: str | None,
    annotations: Annotations,
) -> CompleteSchema:
    """Analyse ``schema_text`` and merge it with ``annotations``.

    When the document is missing or unreadable, fields are rebuilt from the
    annotations alone and the result is marked degraded.
    """
    issues: list[ResolutionIssue] = []
    try:
        if schema_text is None:
            raise MalformedDocumentError("JSON Schema document is missing.")
        root = load_collection_schema(schema_text, collection_name)
        fields = parse_entry_schema(root, issues=issues)
    except MalformedDocumentError as exc:
        _LOGGER.warning(
            "Collection %s loaded from schema source only: %s", collection_name, exc
        )
        fallback = build_fallback_fields(annotations)
        return merge(
            fallback,
            annotations,
            collection_name=collection_name,
            issues=[
                ResolutionIssue(kind=IssueKind.MALFORMED_DOCUMENT, path=None, message=str(exc))
            ],
            degraded=True,
        )
    return merge(fields, annotations, collection_name=collection_name, issues=issues)


def _overlay(
    schema_field: SchemaField,
    annotations: Annotations,
    issues: list[ResolutionIssue],
) -> SchemaField:
    mapping = annotations.reference_for(schema_field.name)

    if schema_field.kind in REFERENCE_KINDS:
        if mapping is not None:
            return replace(schema_field, reference_collection=mapping.collection_name)
        _LOGGER.debug("Reference field %s has no target collection", schema_field.name)
        issues.append(
            ResolutionIssue(
                kind=IssueKind.AMBIGUOUS_REFERENCE,
                path=schema_field.name,
                message="reference target collection is unknown",
            )
        )
        return replace(schema_field, reference_collection=None)

    if mapping is not None:
        upgraded = _upgrade_to_reference(schema_field, mapping.is_array)
        if upgraded is not None:
            return replace(upgraded, reference_collection=mapping.collection_name)
        _LOGGER.debug(
            "Reference annotation for %s does not fit field type %s",
            schema_field.name,
            schema_field.kind.value,
        )

    if schema_field.kind is FieldKind.STRING and schema_field.name in annotations.images:
        return replace(schema_field, field_type=FieldType.of(FieldKind.IMAGE))
    return schema_field


def _upgrade_to_reference(schema_field: SchemaField, is_array: bool) -> SchemaField | None:
    field_type = schema_field.field_type
    if not is_array and field_type.kind is FieldKind.STRING:
        return replace(schema_field, field_type=FieldType.of(FieldKind.REFERENCE))
    if (
        is_array
        and field_type.kind is FieldKind.ARRAY
        and field_type.item_type is not None
        and field_type.item_type.kind is FieldKind.STRING
    ):
        return replace(schema_field, field_type=FieldType.of(FieldKind.ARRAY_REFERENCE))
    return None
