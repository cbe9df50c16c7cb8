"""Flattening of a collection entry schema into ordered fields."""

from __future__ import annotations

import logging
from dataclasses import replace

from collection_schema_resolver.field_model.field_models import (
    FieldKind,
    FieldType,
    IssueKind,
    ResolutionIssue,
    SchemaField,
)
from collection_schema_resolver.field_model.field_paths import join_path

from .property_classifier import classify_property
from .schema_errors import MalformedDocumentError, MalformedPropertyError
from .schema_properties import META_PROPERTIES, JsonSchemaProperty

_LOGGER = logging.getLogger("collection_schema_resolver.json_schema_analysis")


def parse_entry_schema(
    root: JsonSchemaProperty,
    *,
    issues: list[ResolutionIssue] | None = None,
) -> list[SchemaField]:
    """Return the flattened fields of an entry schema in declaration order.

    Properties that cannot be classified are downgraded to ``unknown`` fields
    and reported through ``issues``; their siblings are unaffected.

    Raises:
      MalformedDocumentError: If ``root`` is not an object schema with properties.
    """
    if root.is_malformed:
        raise MalformedDocumentError(f"JSON Schema root is malformed: {root.malformed_reason}")
    if not root.looks_like_object() or root.properties is None:
        raise MalformedDocumentError("JSON Schema root must define object properties.")

    collector = _FieldCollector(issues if issues is not None else [])
    collector.flatten(root, parent=None)
    return [replace(schema_field, order=index) for index, schema_field in enumerate(collector.fields)]


class _FieldCollector:
    """Accumulates flattened fields and absorbs field-level failures."""

    def __init__(self, issues: list[ResolutionIssue]) -> None:
        self.fields: list[SchemaField] = []
        self._issues = issues
        self._seen_paths: set[str] = set()

    def flatten(self, node: JsonSchemaProperty, *, parent: str | None) -> None:
        for name, child in node.properties or ():
            if parent is None and name in META_PROPERTIES:
                continue
            path = join_path(parent, name)
            required = name in node.required
            for schema_field in self._fields_for(child, path, parent, required):
                self._register(schema_field)

    def _fields_for(
        self,
        child: JsonSchemaProperty,
        path: str,
        parent: str | None,
        required: bool,
    ) -> list[SchemaField]:
        try:
            classification = classify_property(child)
        except MalformedPropertyError as exc:
            _LOGGER.warning("Downgrading field %s to unknown: %s", path, exc.reason)
            self._issues.append(
                ResolutionIssue(kind=IssueKind.MALFORMED_PROPERTY, path=path, message=exc.reason)
            )
            return [
                SchemaField(
                    name=path,
                    field_type=FieldType.of(FieldKind.UNKNOWN),
                    required=required,
                    is_nested=parent is not None,
                    parent_path=parent,
                )
            ]

        if classification.nested is not None:
            if not classification.nested.properties:
                _LOGGER.debug("Skipping closed object %s without properties", path)
                return []
            nested = _FieldCollector(self._issues)
            nested.flatten(classification.nested, parent=path)
            return nested.fields

        item_fields: tuple[SchemaField, ...] = ()
        if classification.element_object is not None:
            element = _FieldCollector(self._issues)
            element.flatten(classification.element_object, parent=path)
            item_fields = tuple(
                replace(item, order=index) for index, item in enumerate(element.fields)
            )

        return [
            SchemaField(
                name=path,
                field_type=classification.field_type,
                required=required and not classification.nullable,
                constraints=classification.constraints,
                description=classification.description,
                default=classification.default,
                is_nested=parent is not None,
                parent_path=parent,
                nullable=classification.nullable,
                item_fields=item_fields,
            )
        ]

    def _register(self, schema_field: SchemaField) -> None:
        if schema_field.name in self._seen_paths:
            _LOGGER.warning("Dropping duplicate flattened field %s", schema_field.name)
            self._issues.append(
                ResolutionIssue(
                    kind=IssueKind.MALFORMED_PROPERTY,
                    path=schema_field.name,
                    message="duplicate flattened field",
                )
            )
            return
        self._seen_paths.add(schema_field.name)
        self.fields.append(schema_field)
