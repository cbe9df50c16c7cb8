"""Classification of JSON Schema properties into semantic field types."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from collection_schema_resolver.field_model.field_models import (
    FieldConstraints,
    FieldKind,
    FieldType,
)

from .schema_errors import MalformedPropertyError
from .schema_properties import JsonSchemaProperty

DATE_STRING_FORMATS = frozenset({"date-time", "date"})
UNIX_TIME_FORMAT = "unix-time"


@dataclass(frozen=True)
class PropertyClassification:
    """Classifier verdict for one property.

    ``nested`` is set for closed objects whose properties must be flattened;
    ``element_object`` is set for arrays whose items are closed objects.
    """

    field_type: FieldType
    nullable: bool = False
    constraints: FieldConstraints = field(default_factory=FieldConstraints)
    description: str | None = None
    default: Any = None
    nested: JsonSchemaProperty | None = None
    element_object: JsonSchemaProperty | None = None


def classify_property(node: JsonSchemaProperty) -> PropertyClassification:
    """Classify ``node`` into a field type.

    Raises:
      MalformedPropertyError: If the node shape is not recognised.
    """
    if node.is_malformed:
        raise MalformedPropertyError(node.path, node.malformed_reason or "unreadable")

    if node.any_of is not None:
        classification = _classify_any_of(node)
    elif node.all_of is not None:
        classification = _classify_all_of(node)
    else:
        classification = _classify_typed(node)

    return replace(
        classification,
        nullable=classification.nullable or node.is_nullable,
        description=node.description or classification.description,
        default=node.default if node.has_default else classification.default,
    )


def value_type_of(node: JsonSchemaProperty) -> FieldType:
    """Return the field type of a node used as a value (array item, union member)."""
    classification = classify_property(node)
    if classification.nested is not None:
        return FieldType.of(FieldKind.UNKNOWN)
    return classification.field_type


def is_reference_shaped(node: JsonSchemaProperty) -> bool:
    """Return True for the reference object or a union containing it."""
    if node.is_reference_object():
        return True
    return node.any_of is not None and any(
        member.is_reference_object() for member in node.any_of
    )


def _classify_any_of(node: JsonSchemaProperty) -> PropertyClassification:
    alternatives = node.any_of or ()
    for alternative in alternatives:
        if alternative.is_malformed:
            raise MalformedPropertyError(
                node.path, alternative.malformed_reason or "unreadable alternative"
            )

    members = tuple(alternative for alternative in alternatives if not alternative.is_null_only)
    nullable = len(members) != len(alternatives)

    if not members:
        return PropertyClassification(field_type=FieldType.of(FieldKind.UNKNOWN), nullable=True)
    if any(member.is_reference_object() for member in members):
        return PropertyClassification(
            field_type=FieldType.of(FieldKind.REFERENCE), nullable=nullable
        )
    if len(members) == 1:
        inner = classify_property(members[0])
        return replace(inner, nullable=inner.nullable or nullable)
    if _is_date_union(members):
        return PropertyClassification(field_type=FieldType.of(FieldKind.DATE), nullable=nullable)
    return PropertyClassification(
        field_type=FieldType(
            kind=FieldKind.UNION,
            variants=tuple(value_type_of(member) for member in members),
        ),
        nullable=nullable,
    )


def _classify_all_of(node: JsonSchemaProperty) -> PropertyClassification:
    members = node.all_of or ()
    if len(members) == 1:
        return classify_property(members[0])
    for member in members:
        if member.is_malformed:
            raise MalformedPropertyError(node.path, member.malformed_reason or "unreadable member")
    return PropertyClassification(field_type=FieldType.of(FieldKind.UNKNOWN))


def _classify_typed(node: JsonSchemaProperty) -> PropertyClassification:
    constraints = constraints_of(node)
    types = node.non_null_types

    if node.enum is not None:
        values = tuple(value for value in node.enum if value is not None)
        return PropertyClassification(
            field_type=FieldType(kind=FieldKind.ENUM, enum_values=values),
            nullable=len(values) != len(node.enum),
            constraints=constraints,
        )
    if node.has_const:
        return PropertyClassification(
            field_type=FieldType(kind=FieldKind.LITERAL, literal_value=node.const),
            constraints=constraints,
        )

    if len(types) > 1:
        return PropertyClassification(
            field_type=FieldType(
                kind=FieldKind.UNION,
                variants=tuple(_primitive_type(name, node) for name in types),
            ),
            constraints=constraints,
        )

    if not types:
        if node.is_null_only:
            return PropertyClassification(field_type=FieldType.of(FieldKind.UNKNOWN))
        if node.properties is not None or node.additional_properties is not None:
            return _classify_object(node, constraints)
        if node.items is not None or node.tuple_items is not None:
            return _classify_array(node, constraints)
        return PropertyClassification(field_type=FieldType.of(FieldKind.UNKNOWN))

    type_name = types[0]
    if type_name == "object":
        return _classify_object(node, constraints)
    if type_name == "array":
        return _classify_array(node, constraints)
    return PropertyClassification(
        field_type=_primitive_type(type_name, node),
        constraints=constraints,
    )


def _classify_object(
    node: JsonSchemaProperty, constraints: FieldConstraints
) -> PropertyClassification:
    if node.is_reference_object():
        return PropertyClassification(
            field_type=FieldType.of(FieldKind.REFERENCE), constraints=constraints
        )
    if node.is_open_map():
        value_type = None
        if isinstance(node.additional_properties, JsonSchemaProperty):
            value_type = value_type_of(node.additional_properties)
        return PropertyClassification(
            field_type=FieldType(kind=FieldKind.RECORD, item_type=value_type),
            constraints=constraints,
        )
    return PropertyClassification(
        field_type=FieldType.of(FieldKind.UNKNOWN),
        constraints=constraints,
        nested=node,
    )


def _classify_array(
    node: JsonSchemaProperty, constraints: FieldConstraints
) -> PropertyClassification:
    if node.tuple_items is not None:
        return PropertyClassification(
            field_type=FieldType(
                kind=FieldKind.TUPLE,
                tuple_items=tuple(value_type_of(item) for item in node.tuple_items),
            ),
            constraints=constraints,
        )

    items = node.items
    if items is None:
        return PropertyClassification(
            field_type=FieldType.array_of(FieldType.of(FieldKind.UNKNOWN)),
            constraints=constraints,
        )
    if items.is_malformed:
        raise MalformedPropertyError(node.path, items.malformed_reason or "unreadable items")
    if is_reference_shaped(items):
        return PropertyClassification(
            field_type=FieldType.of(FieldKind.ARRAY_REFERENCE),
            constraints=constraints,
        )

    item_classification = classify_property(items)
    if item_classification.nested is not None:
        return PropertyClassification(
            field_type=FieldType(kind=FieldKind.ARRAY),
            constraints=constraints,
            element_object=item_classification.nested,
        )
    return PropertyClassification(
        field_type=FieldType.array_of(item_classification.field_type),
        constraints=constraints,
    )


def _primitive_type(type_name: str, node: JsonSchemaProperty) -> FieldType:
    if type_name == "string":
        if node.format in DATE_STRING_FORMATS:
            return FieldType.of(FieldKind.DATE)
        return FieldType.of(FieldKind.STRING)
    if type_name in ("number", "integer"):
        return FieldType.of(FieldKind.NUMBER)
    if type_name == "boolean":
        return FieldType.of(FieldKind.BOOLEAN)
    if type_name == "object":
        return FieldType.of(FieldKind.RECORD)
    if type_name == "array":
        return FieldType.array_of(FieldType.of(FieldKind.UNKNOWN))
    return FieldType.of(FieldKind.UNKNOWN)


def _is_date_union(members: tuple[JsonSchemaProperty, ...]) -> bool:
    for member in members:
        types = member.non_null_types
        if types == ("string",) and member.format in DATE_STRING_FORMATS:
            continue
        if types in (("integer",), ("number",)) and member.format == UNIX_TIME_FORMAT:
            continue
        return False
    return True


def constraints_of(node: JsonSchemaProperty) -> FieldConstraints:
    """Copy constraint keywords of ``node`` verbatim."""
    return FieldConstraints(
        min_length=node.min_length,
        max_length=node.max_length,
        minimum=node.minimum,
        maximum=node.maximum,
        exclusive_minimum=node.exclusive_minimum,
        exclusive_maximum=node.exclusive_maximum,
        pattern=node.pattern,
        format=node.format,
        min_items=node.min_items,
        max_items=node.max_items,
        integer="integer" in node.types,
    )
