"""Immutable JSON Schema property nodes and document loading."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from collection_schema_resolver.field_model.field_paths import join_path

from .schema_errors import MalformedDocumentError

KNOWN_TYPES = frozenset({"string", "number", "integer", "boolean", "object", "array", "null"})
META_PROPERTIES = frozenset({"$schema"})

_INTEGER_KEYWORDS = {
    "minLength": "min_length",
    "maxLength": "max_length",
    "minItems": "min_items",
    "maxItems": "max_items",
}
_NUMBER_KEYWORDS = {
    "minimum": "minimum",
    "maximum": "maximum",
    "exclusiveMinimum": "exclusive_minimum",
    "exclusiveMaximum": "exclusive_maximum",
}
_REF_SIBLING_KEYWORDS = ("description", "default")


@dataclass(frozen=True)
class JsonSchemaProperty:  # pylint: disable=too-many-instance-attributes
    """One node of a generated JSON Schema.

    ``properties`` keeps declaration order as a tuple of ``(name, node)`` pairs.
    A node that could not be read carries ``malformed_reason`` instead of
    failing the whole document; the classifier reports it for that path only.
    """

    path: str
    types: tuple[str, ...] = ()
    any_of: tuple[JsonSchemaProperty, ...] | None = None
    all_of: tuple[JsonSchemaProperty, ...] | None = None
    items: JsonSchemaProperty | None = None
    tuple_items: tuple[JsonSchemaProperty, ...] | None = None
    properties: tuple[tuple[str, JsonSchemaProperty], ...] | None = None
    required: tuple[str, ...] = ()
    additional_properties: bool | JsonSchemaProperty | None = None
    enum: tuple[Any, ...] | None = None
    has_const: bool = False
    const: Any = None
    format: str | None = None
    pattern: str | None = None
    description: str | None = None
    has_default: bool = False
    default: Any = None
    min_length: int | None = None
    max_length: int | None = None
    min_items: int | None = None
    max_items: int | None = None
    minimum: float | None = None
    maximum: float | None = None
    exclusive_minimum: float | None = None
    exclusive_maximum: float | None = None
    malformed_reason: str | None = None

    @property
    def is_malformed(self) -> bool:
        return self.malformed_reason is not None

    @property
    def is_nullable(self) -> bool:
        """Return True when ``null`` is one of the declared types."""
        return "null" in self.types

    @property
    def non_null_types(self) -> tuple[str, ...]:
        return tuple(value for value in self.types if value != "null")

    @property
    def is_null_only(self) -> bool:
        return bool(self.types) and not self.non_null_types

    @property
    def property_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.properties or ())

    def looks_like_object(self) -> bool:
        """Return True for explicit object types and untyped nodes with properties."""
        if "object" in self.types:
            return True
        return not self.types and self.properties is not None

    def is_open_map(self) -> bool:
        """Return True when keys are not statically known."""
        if self.additional_properties is True:
            return True
        if isinstance(self.additional_properties, JsonSchemaProperty):
            return True
        return self.additional_properties is None and self.properties is None

    def is_reference_object(self) -> bool:
        """Return True for the ``{collection, id|slug}`` object emitted for references."""
        if not self.looks_like_object() or not self.properties:
            return False
        names = set(self.property_names)
        return "collection" in names and bool(names & {"id", "slug"})


def load_collection_schema(text: str, collection_name: str | None = None) -> JsonSchemaProperty:
    """Parse generated schema text and return the collection's entry root node.

    Raises:
      MalformedDocumentError: If the text is not JSON or holds no usable root.
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedDocumentError(f"Invalid JSON Schema document: {exc}") from exc
    return parse_schema_document(document, collection_name)


def parse_schema_document(document: Any, collection_name: str | None = None) -> JsonSchemaProperty:
    """Locate and parse the entry root of an already-decoded schema document."""
    if not isinstance(document, Mapping):
        raise MalformedDocumentError("JSON Schema document root must be an object.")

    entry = _locate_entry(document, collection_name)
    root = _PropertyReader(document).read(entry, "")
    if root.is_malformed:
        raise MalformedDocumentError(f"JSON Schema entry root is malformed: {root.malformed_reason}")
    return root


def _locate_entry(document: Mapping[str, Any], collection_name: str | None) -> Mapping[str, Any]:
    if "properties" in document:
        return document
    reference = document.get("$ref")
    if isinstance(reference, str):
        target = resolve_pointer(document, reference)
        if isinstance(target, Mapping):
            return target
    if collection_name:
        named = _named_definition(document, collection_name)
        if named is not None:
            return named
    if reference is not None:
        raise MalformedDocumentError(f"Cannot resolve entry schema reference: {reference!r}")
    return document


def _named_definition(document: Mapping[str, Any], name: str) -> Mapping[str, Any] | None:
    for container_key in ("definitions", "$defs"):
        container = document.get(container_key)
        if isinstance(container, Mapping) and isinstance(container.get(name), Mapping):
            return container[name]
    return None


def resolve_pointer(document: Mapping[str, Any], reference: str) -> Any:
    """Resolve a local JSON pointer such as ``#/definitions/blog``.

    Returns None when the pointer is not local or does not resolve.
    """
    if not reference.startswith("#"):
        return None
    current: Any = document
    fragment = reference[1:]
    if not fragment:
        return current
    for raw_token in fragment.lstrip("/").split("/"):
        token = raw_token.replace("~1", "/").replace("~0", "~")
        if isinstance(current, Mapping) and token in current:
            current = current[token]
        elif isinstance(current, list) and token.isdigit() and int(token) < len(current):
            current = current[int(token)]
        else:
            return None
    return current


class _PropertyReader:
    """Reads raw schema mappings into property nodes, following local refs."""

    def __init__(self, document: Mapping[str, Any]) -> None:
        self._document = document

    def read(self, raw: Any, path: str, resolving: tuple[str, ...] = ()) -> JsonSchemaProperty:
        if not isinstance(raw, Mapping):
            return _malformed(path, f"expected an object, got {type(raw).__name__}")

        reference = raw.get("$ref")
        if reference is not None:
            return self._read_reference(raw, reference, path, resolving)

        values: dict[str, Any] = {"path": path}

        types = _read_types(raw.get("type"))
        if types is None:
            return _malformed(path, f"unsupported type declaration {raw.get('type')!r}")
        values["types"] = types

        for keyword, attribute in (("anyOf", "any_of"), ("oneOf", "any_of"), ("allOf", "all_of")):
            if keyword not in raw:
                continue
            members = raw[keyword]
            if not isinstance(members, Sequence) or isinstance(members, str) or not members:
                return _malformed(path, f"{keyword} must be a non-empty array")
            values[attribute] = tuple(
                self.read(member, path, resolving) for member in members
            )

        if "properties" in raw:
            properties = raw["properties"]
            if not isinstance(properties, Mapping):
                return _malformed(path, "properties must be an object")
            values["properties"] = tuple(
                (str(name), self.read(child, join_path(path, str(name)), resolving))
                for name, child in properties.items()
            )

        if "required" in raw:
            required = raw["required"]
            if not isinstance(required, Sequence) or isinstance(required, str):
                return _malformed(path, "required must be an array of names")
            if not all(isinstance(name, str) for name in required):
                return _malformed(path, "required must be an array of names")
            values["required"] = tuple(required)

        items_error = self._read_items(raw, path, resolving, values)
        if items_error:
            return _malformed(path, items_error)

        if "additionalProperties" in raw:
            additional = raw["additionalProperties"]
            if isinstance(additional, bool):
                values["additional_properties"] = additional
            elif isinstance(additional, Mapping):
                values["additional_properties"] = self.read(
                    additional, join_path(path, "*"), resolving
                )
            else:
                return _malformed(path, "additionalProperties must be a boolean or schema")

        if "enum" in raw:
            enum = raw["enum"]
            if not isinstance(enum, Sequence) or isinstance(enum, str):
                return _malformed(path, "enum must be an array")
            values["enum"] = tuple(enum)

        if "const" in raw:
            values["has_const"] = True
            values["const"] = raw["const"]
        if "default" in raw:
            values["has_default"] = True
            values["default"] = raw["default"]

        for keyword, attribute in (
            ("format", "format"),
            ("pattern", "pattern"),
            ("description", "description"),
        ):
            if isinstance(raw.get(keyword), str):
                values[attribute] = raw[keyword]

        _read_constraints(raw, values)
        return JsonSchemaProperty(**values)

    def _read_items(
        self,
        raw: Mapping[str, Any],
        path: str,
        resolving: tuple[str, ...],
        values: dict[str, Any],
    ) -> str | None:
        prefix_items = raw.get("prefixItems")
        if prefix_items is not None:
            if not isinstance(prefix_items, Sequence) or isinstance(prefix_items, str):
                return "prefixItems must be an array"
            values["tuple_items"] = tuple(
                self.read(item, join_path(path, str(index)), resolving)
                for index, item in enumerate(prefix_items)
            )
        if "items" not in raw:
            return None
        items = raw["items"]
        if isinstance(items, Mapping):
            if "tuple_items" not in values:
                values["items"] = self.read(items, path, resolving)
            return None
        if isinstance(items, Sequence) and not isinstance(items, str):
            values["tuple_items"] = tuple(
                self.read(item, join_path(path, str(index)), resolving)
                for index, item in enumerate(items)
            )
            return None
        if isinstance(items, bool):
            return None
        return "items must be a schema or an array of schemas"

    def _read_reference(
        self,
        raw: Mapping[str, Any],
        reference: Any,
        path: str,
        resolving: tuple[str, ...],
    ) -> JsonSchemaProperty:
        if not isinstance(reference, str):
            return _malformed(path, "$ref must be a string")
        if reference in resolving:
            return _malformed(path, f"cyclic $ref {reference}")
        target = resolve_pointer(self._document, reference)
        if not isinstance(target, Mapping):
            return _malformed(path, f"unresolvable $ref {reference}")
        merged = dict(target)
        for keyword in _REF_SIBLING_KEYWORDS:
            if keyword in raw:
                merged[keyword] = raw[keyword]
        return self.read(merged, path, resolving + (reference,))


def _read_types(value: Any) -> tuple[str, ...] | None:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value in KNOWN_TYPES else None
    if isinstance(value, Sequence):
        declared = tuple(value)
        if declared and all(isinstance(item, str) and item in KNOWN_TYPES for item in declared):
            return declared
    return None


def _read_constraints(raw: Mapping[str, Any], values: dict[str, Any]) -> None:
    for keyword, attribute in _INTEGER_KEYWORDS.items():
        candidate = raw.get(keyword)
        if isinstance(candidate, int) and not isinstance(candidate, bool):
            values[attribute] = candidate
    for keyword, attribute in _NUMBER_KEYWORDS.items():
        candidate = raw.get(keyword)
        if isinstance(candidate, (int, float)) and not isinstance(candidate, bool):
            values[attribute] = candidate
    # Draft-04 spells exclusive bounds as booleans next to minimum/maximum.
    for flag, bound in (("exclusiveMinimum", "minimum"), ("exclusiveMaximum", "maximum")):
        if raw.get(flag) is True and bound in values:
            values[f"exclusive_{bound}"] = values.pop(bound)


def _malformed(path: str, reason: str) -> JsonSchemaProperty:
    return JsonSchemaProperty(path=path, malformed_reason=reason)
