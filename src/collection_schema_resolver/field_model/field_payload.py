"""Serialization of the field model for the rendering boundary."""

from __future__ import annotations

from dataclasses import fields as dataclass_fields
from typing import Any

from .field_models import CompleteSchema, FieldConstraints, FieldType, SchemaField


def to_payload(schema: CompleteSchema, *, camel_case: bool = False) -> dict[str, Any]:
    """Return a JSON-serialisable mapping of ``schema`` preserving field order."""
    payload = {
        "collection_name": schema.collection_name,
        "degraded": schema.degraded,
        "fields": [_field_payload(schema_field) for schema_field in schema.fields],
        "issues": [
            {"kind": issue.kind.value, "path": issue.path, "message": issue.message}
            for issue in schema.issues
        ],
    }
    return _camelize_keys(payload) if camel_case else payload


def field_type_payload(field_type: FieldType) -> dict[str, Any]:
    """Return the tagged-variant representation of one field type."""
    payload: dict[str, Any] = {"kind": field_type.kind.value}
    if field_type.item_type is not None:
        payload["item_type"] = field_type_payload(field_type.item_type)
    if field_type.tuple_items:
        payload["tuple_items"] = [field_type_payload(item) for item in field_type.tuple_items]
    if field_type.variants:
        payload["variants"] = [field_type_payload(variant) for variant in field_type.variants]
    if field_type.enum_values:
        payload["enum_values"] = list(field_type.enum_values)
    if field_type.literal_value is not None:
        payload["literal_value"] = field_type.literal_value
    return payload


def constraints_payload(constraints: FieldConstraints) -> dict[str, Any]:
    """Return only the constraints that are set."""
    payload: dict[str, Any] = {}
    for descriptor in dataclass_fields(constraints):
        value = getattr(constraints, descriptor.name)
        if value is None or value is False:
            continue
        payload[descriptor.name] = value
    return payload


def _field_payload(schema_field: SchemaField) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "name": schema_field.name,
        "field_type": field_type_payload(schema_field.field_type),
        "required": schema_field.required,
        "nullable": schema_field.nullable,
        "constraints": constraints_payload(schema_field.constraints),
        "description": schema_field.description,
        "default": schema_field.default,
        "is_nested": schema_field.is_nested,
        "parent_path": schema_field.parent_path,
        "reference_collection": schema_field.reference_collection,
        "order": schema_field.order,
    }
    if schema_field.item_fields:
        payload["item_fields"] = [_field_payload(item) for item in schema_field.item_fields]
    return payload


_OPAQUE_KEYS = frozenset({"default", "enum_values", "literal_value"})


def _camelize_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            _camelize(key): item if key in _OPAQUE_KEYS else _camelize_keys(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_camelize_keys(item) for item in value]
    return value


def _camelize(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.capitalize() for part in rest)
