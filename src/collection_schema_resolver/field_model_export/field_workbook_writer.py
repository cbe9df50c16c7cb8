"""Excel export of resolved field models."""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from collection_schema_resolver.field_model.field_models import (
    CompleteSchema,
    FieldKind,
    FieldType,
    SchemaField,
)
from collection_schema_resolver.field_model.field_payload import constraints_payload
from collection_schema_resolver.resolution import (
    CollectionInputs,
    content_hash,
    resolution_cache_key,
)

from .constants import FIELD_COLUMNS, MAX_SHEET_TITLE_LENGTH, SOURCE_COLUMNS, SOURCES_SHEET_NAME

_INVALID_TITLE_CHARACTERS = re.compile(r"[\[\]:*?/\\]")


def write_field_model_workbook(
    resolved: Sequence[tuple[CollectionInputs, CompleteSchema]],
    output_path: Path | str,
) -> None:
    """Write one sheet per collection plus a Sources sheet with input hashes."""
    workbook = Workbook()
    default_sheet = workbook.active
    if default_sheet is not None:
        workbook.remove(default_sheet)

    used_titles: set[str] = {SOURCES_SHEET_NAME}
    for _, schema in resolved:
        title = _sheet_title(schema.collection_name, used_titles)
        _write_collection_sheet(workbook.create_sheet(title), schema)

    _write_sources_sheet(workbook.create_sheet(SOURCES_SHEET_NAME), resolved)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)


def describe_field_type(field_type: FieldType) -> str:
    """Render a field type as a compact label such as ``array<string>``."""
    kind = field_type.kind
    if kind is FieldKind.ARRAY:
        inner = describe_field_type(field_type.item_type) if field_type.item_type else "object"
        return f"array<{inner}>"
    if kind is FieldKind.RECORD and field_type.item_type is not None:
        return f"record<{describe_field_type(field_type.item_type)}>"
    if kind is FieldKind.TUPLE:
        return f"tuple<{', '.join(describe_field_type(item) for item in field_type.tuple_items)}>"
    if kind is FieldKind.UNION and field_type.variants:
        return " | ".join(describe_field_type(variant) for variant in field_type.variants)
    if kind is FieldKind.ENUM:
        return f"enum({', '.join(str(value) for value in field_type.enum_values)})"
    if kind is FieldKind.LITERAL:
        return f"literal({field_type.literal_value!r})"
    return kind.value


def _write_collection_sheet(sheet: Worksheet, schema: CompleteSchema) -> None:
    for column_index, name in enumerate(FIELD_COLUMNS, start=1):
        sheet.cell(row=1, column=column_index, value=name).style = "Headline 3"

    row_index = 2
    for schema_field in schema.fields:
        row_index = _write_field_rows(sheet, schema_field, row_index)

    for column_index, name in enumerate(FIELD_COLUMNS, start=1):
        sheet.column_dimensions[get_column_letter(column_index)].width = max(
            12, min(len(name) + 6, 40)
        )
    sheet.freeze_panes = "A2"


def _write_field_rows(sheet: Worksheet, schema_field: SchemaField, row_index: int) -> int:
    values: tuple[Any, ...] = (
        schema_field.order,
        schema_field.name,
        describe_field_type(schema_field.field_type),
        schema_field.required,
        schema_field.nullable,
        schema_field.is_nested,
        schema_field.parent_path,
        schema_field.reference_collection,
        _json_cell(constraints_payload(schema_field.constraints)),
        schema_field.description,
        _json_cell(schema_field.default),
    )
    for column_index, value in enumerate(values, start=1):
        sheet.cell(row=row_index, column=column_index, value=value)
    row_index += 1
    for item_field in schema_field.item_fields:
        row_index = _write_field_rows(sheet, item_field, row_index)
    return row_index


def _write_sources_sheet(
    sheet: Worksheet, resolved: Sequence[tuple[CollectionInputs, CompleteSchema]]
) -> None:
    for column_index, name in enumerate(SOURCE_COLUMNS, start=1):
        sheet.cell(row=1, column=column_index, value=name).style = "Headline 3"
    for row_index, (inputs, schema) in enumerate(resolved, start=2):
        values = (
            schema.collection_name,
            schema.degraded,
            str(inputs.schema_path) if inputs.schema_path else None,
            content_hash(inputs.schema_text) or None,
            str(inputs.source_path) if inputs.source_path else None,
            content_hash(inputs.source_text),
            resolution_cache_key(inputs.collection_name, inputs.schema_text, inputs.source_text),
            "\n".join(
                f"{issue.kind.value}: {issue.path or '-'}: {issue.message}"
                for issue in schema.issues
            )
            or None,
        )
        for column_index, value in enumerate(values, start=1):
            sheet.cell(row=row_index, column=column_index, value=value)


def _sheet_title(collection_name: str, used_titles: set[str]) -> str:
    base = _INVALID_TITLE_CHARACTERS.sub("_", collection_name)[:MAX_SHEET_TITLE_LENGTH] or "_"
    title = base
    suffix = 2
    while title in used_titles:
        marker = f"~{suffix}"
        title = f"{base[: MAX_SHEET_TITLE_LENGTH - len(marker)]}{marker}"
        suffix += 1
    used_titles.add(title)
    return title


def _json_cell(value: Any) -> str | None:
    if value is None or value == {}:
        return None
    return json.dumps(value, ensure_ascii=False, default=str)
