"""Canonical field model entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FieldKind(str, Enum):
    """Semantic field type driving form rendering."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ENUM = "enum"
    LITERAL = "literal"
    ARRAY = "array"
    TUPLE = "tuple"
    RECORD = "record"
    REFERENCE = "reference"
    ARRAY_REFERENCE = "array_reference"
    IMAGE = "image"
    UNION = "union"
    UNKNOWN = "unknown"


REFERENCE_KINDS = frozenset({FieldKind.REFERENCE, FieldKind.ARRAY_REFERENCE})


@dataclass(frozen=True)
class FieldType:
    """Tagged field type.

    Only the attributes relevant to ``kind`` are populated: ``item_type`` for
    arrays (element type) and records (value type), ``tuple_items`` for tuples,
    ``variants`` for unions, ``enum_values`` for enums and ``literal_value``
    for literals.
    """

    kind: FieldKind
    item_type: FieldType | None = None
    tuple_items: tuple[FieldType, ...] = ()
    variants: tuple[FieldType, ...] = ()
    enum_values: tuple[Any, ...] = ()
    literal_value: Any = None

    @classmethod
    def of(cls, kind: FieldKind) -> FieldType:
        return cls(kind=kind)

    @classmethod
    def array_of(cls, item_type: FieldType) -> FieldType:
        return cls(kind=FieldKind.ARRAY, item_type=item_type)


@dataclass(frozen=True)
class FieldConstraints:  # pylint: disable=too-many-instance-attributes
    """Validation keywords copied verbatim from the JSON Schema."""

    min_length: int | None = None
    max_length: int | None = None
    minimum: float | None = None
    maximum: float | None = None
    exclusive_minimum: float | None = None
    exclusive_maximum: float | None = None
    pattern: str | None = None
    format: str | None = None
    min_items: int | None = None
    max_items: int | None = None
    integer: bool = False

    @property
    def is_empty(self) -> bool:
        """Return True when no constraint is set."""
        return self == FieldConstraints()


@dataclass(frozen=True)
class SchemaField:  # pylint: disable=too-many-instance-attributes
    """One renderable field of a collection entry."""

    name: str
    field_type: FieldType
    required: bool = False
    constraints: FieldConstraints = field(default_factory=FieldConstraints)
    description: str | None = None
    default: Any = None
    is_nested: bool = False
    parent_path: str | None = None
    reference_collection: str | None = None
    order: int = 0
    nullable: bool = False
    item_fields: tuple[SchemaField, ...] = ()

    @property
    def kind(self) -> FieldKind:
        return self.field_type.kind


class IssueKind(str, Enum):
    """Diagnostic categories recorded while resolving a schema."""

    MALFORMED_PROPERTY = "malformed_property"
    MALFORMED_DOCUMENT = "malformed_document"
    AMBIGUOUS_REFERENCE = "ambiguous_reference"


@dataclass(frozen=True)
class ResolutionIssue:
    """Non-fatal problem absorbed during resolution."""

    kind: IssueKind
    path: str | None
    message: str


@dataclass(frozen=True)
class CompleteSchema:
    """Ordered, type-resolved field model of one collection."""

    collection_name: str
    fields: tuple[SchemaField, ...]
    degraded: bool = False
    issues: tuple[ResolutionIssue, ...] = ()

    def field_named(self, name: str) -> SchemaField | None:
        """Return the field with the given dot-path name, if present."""
        for schema_field in self.fields:
            if schema_field.name == name:
                return schema_field
        return None

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(schema_field.name for schema_field in self.fields)
