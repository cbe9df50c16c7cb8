"""Field model workbook export tests."""

from __future__ import annotations

import json
from pathlib import Path

from collection_schema_resolver.field_model import FieldKind, FieldType
from collection_schema_resolver.field_model_export import (
    FIELD_COLUMNS,
    SOURCE_COLUMNS,
    SOURCES_SHEET_NAME,
    describe_field_type,
    write_field_model_workbook,
)
from collection_schema_resolver.resolution import (
    CollectionInputs,
    resolution_cache_key,
    resolve_inputs,
)
from openpyxl import load_workbook


def _inputs(name: str, schema_text: str | None, source_text: str) -> CollectionInputs:
    return CollectionInputs(collection_name=name, schema_text=schema_text, source_text=source_text)


def test_workbook_has_collection_and_sources_sheets(tmp_path: Path) -> None:
    schema_text = json.dumps(
        {
            "type": "object",
            "properties": {
                "title": {"type": "string", "maxLength": 80},
                "cover": {"type": "string"},
                "links": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {"href": {"type": "string"}},
                        "additionalProperties": False,
                    },
                },
            },
            "required": ["title"],
        }
    )
    inputs = _inputs("blog", schema_text, "z.object({ cover: image() })")
    broken = _inputs("docs", "{oops", "z.object({ title: z.string() })")
    output_path = tmp_path / "out" / "fields.xlsx"

    write_field_model_workbook(
        [(inputs, resolve_inputs(inputs)), (broken, resolve_inputs(broken))], output_path
    )

    workbook = load_workbook(output_path)
    assert workbook.sheetnames == ["blog", "docs", SOURCES_SHEET_NAME]

    blog = workbook["blog"]
    header = [cell.value for cell in blog[1]]
    assert header == list(FIELD_COLUMNS)
    rows = [[cell.value for cell in row] for row in blog.iter_rows(min_row=2)]
    assert [row[1] for row in rows] == ["title", "cover", "links", "links.href"]
    assert rows[0][2] == "string"
    assert rows[0][3] is True
    assert json.loads(rows[0][8]) == {"max_length": 80}
    assert rows[1][2] == "image"
    assert rows[2][2] == "array<object>"

    sources = workbook[SOURCES_SHEET_NAME]
    assert [cell.value for cell in sources[1]] == list(SOURCE_COLUMNS)
    blog_source = [cell.value for cell in sources[2]]
    docs_source = [cell.value for cell in sources[3]]
    assert blog_source[0] == "blog"
    assert blog_source[1] is False
    assert blog_source[6] == resolution_cache_key("blog", schema_text, inputs.source_text)
    assert docs_source[1] is True
    assert "malformed_document" in docs_source[7]


def test_sheet_titles_are_sanitised_and_unique(tmp_path: Path) -> None:
    first = _inputs("a/b", None, "title: z.string()")
    second = _inputs("a:b", None, "title: z.string()")
    output_path = tmp_path / "fields.xlsx"

    write_field_model_workbook(
        [(first, resolve_inputs(first)), (second, resolve_inputs(second))], output_path
    )

    assert load_workbook(output_path).sheetnames == ["a_b", "a_b~2", SOURCES_SHEET_NAME]


def test_describe_field_type_labels() -> None:
    assert describe_field_type(FieldType.array_of(FieldType.of(FieldKind.NUMBER))) == "array<number>"
    assert (
        describe_field_type(
            FieldType(
                kind=FieldKind.UNION,
                variants=(FieldType.of(FieldKind.STRING), FieldType.of(FieldKind.NUMBER)),
            )
        )
        == "string | number"
    )
    assert describe_field_type(FieldType(kind=FieldKind.LITERAL, literal_value="post")) == "literal('post')"
