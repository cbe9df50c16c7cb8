"""CLI orchestration integration tests."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from click.testing import CliRunner
from collection_schema_resolver.cli import cli, main
from openpyxl import load_workbook


def _samples() -> Path:
    return Path(__file__).resolve().parents[3] / "samples"


def _sample_config() -> str:
    return str(_samples() / "collections.yaml")


def _write_degraded_config(tmp_path: Path) -> Path:
    source_path = tmp_path / "content.config.ts"
    source_path.write_text(
        """
const notes = defineCollection({
  schema: z.object({
    title: z.string(),
    owner: reference('authors'),
    summary: z.string().optional(),
  }),
});

export const collections = { notes };
""",
        encoding="utf-8",
    )
    config = {
        "project": {"content_config": "content.config.ts", "schema_dir": "generated"},
        "collections": ["notes"],
        "logging": {"level": "ERROR"},
    }
    config_path = tmp_path / "collections.yaml"
    config_path.write_text(yaml.safe_dump(config), encoding="utf-8")
    return config_path


def test_resolve_prints_all_collections_in_camel_case(capsys) -> None:
    exit_code = main(["resolve", "--config", _sample_config()])
    captured = capsys.readouterr()

    assert exit_code == 0
    document = json.loads(captured.out)
    assert [entry["collectionName"] for entry in document] == ["blog", "team-members"]
    blog_fields = {entry["name"]: entry for entry in document[0]["fields"]}
    assert blog_fields["author"]["fieldType"] == {"kind": "reference"}
    assert blog_fields["author"]["referenceCollection"] == "authors"
    assert blog_fields["seo.title"]["parentPath"] == "seo"
    team_fields = {entry["name"]: entry for entry in document[1]["fields"]}
    assert team_fields["avatar"]["fieldType"] == {"kind": "image"}
    assert "$schema" not in team_fields


def test_resolve_single_collection_in_snake_case(capsys) -> None:
    exit_code = main(
        [
            "resolve",
            "--config",
            _sample_config(),
            "--collection",
            "team-members",
            "--casing",
            "snake",
        ]
    )
    captured = capsys.readouterr()

    assert exit_code == 0
    document = json.loads(captured.out)
    assert document["collection_name"] == "team-members"
    assert document["degraded"] is False
    assert [entry["name"] for entry in document["fields"]] == ["name", "avatar", "website"]
    website = document["fields"][2]
    assert website["required"] is False
    assert website["constraints"] == {"format": "uri"}


def test_resolve_writes_output_file(tmp_path: Path, capsys) -> None:
    output_path = tmp_path / "out" / "blog.json"

    exit_code = main(
        [
            "resolve",
            "--config",
            _sample_config(),
            "--collection",
            "blog",
            "--output",
            str(output_path),
        ]
    )
    captured = capsys.readouterr()

    assert exit_code == 0
    assert captured.out.strip() == str(output_path.resolve())
    document = json.loads(output_path.read_text(encoding="utf-8"))
    assert document["collectionName"] == "blog"
    assert document["fields"][0]["name"] == "title"


def test_resolve_warns_about_degraded_collection(tmp_path: Path, capsys) -> None:
    config_path = _write_degraded_config(tmp_path)

    exit_code = main(["resolve", "--config", str(config_path), "--casing", "snake"])
    captured = capsys.readouterr()

    assert exit_code == 0
    assert "collection 'notes' resolved from schema source only" in captured.err
    (document,) = json.loads(captured.out)
    assert document["degraded"] is True
    assert [issue["kind"] for issue in document["issues"]] == ["malformed_document"]
    fields = {entry["name"]: entry for entry in document["fields"]}
    assert list(fields) == ["title", "owner", "summary"]
    assert fields["title"]["required"] is True
    assert fields["summary"]["required"] is False
    assert fields["owner"]["field_type"] == {"kind": "reference"}
    assert fields["owner"]["reference_collection"] == "authors"


def test_scan_prints_annotations_for_one_collection(capsys) -> None:
    exit_code = main(
        [
            "scan",
            "--source",
            str(_samples() / "content.config.ts"),
            "--collection",
            "blog",
        ]
    )
    captured = capsys.readouterr()

    assert exit_code == 0
    document = json.loads(captured.out)
    assert {
        "field_path": "author",
        "collection_name": "authors",
        "is_array": False,
    } in document["references"]
    assert {
        "field_path": "relatedArticles",
        "collection_name": "blog",
        "is_array": True,
    } in document["references"]
    assert document["images"] == ["cover"]
    assert "legacyAuthor" not in document["declared_fields"]
    assert document["declared_fields"][0] == "title"


def test_scan_rejects_unknown_collection(capsys) -> None:
    exit_code = main(
        ["scan", "--source", str(_samples() / "content.config.ts"), "--collection", "absent"]
    )
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Collection 'absent' is not defined" in captured.err


def test_export_workbook_command_writes_workbook(tmp_path: Path) -> None:
    runner = CliRunner()
    output_path = tmp_path / "fields.xlsx"

    result = runner.invoke(
        cli,
        ["export-workbook", "--config", _sample_config(), "--output", str(output_path)],
    )

    assert result.exit_code == 0, result.output
    workbook = load_workbook(output_path)
    assert workbook.sheetnames == ["blog", "team-members", "Sources"]
    names = [row[1] for row in workbook["team-members"].iter_rows(min_row=2, values_only=True)]
    assert names == ["name", "avatar", "website"]


def test_generate_config_command_writes_scaffold(tmp_path: Path) -> None:
    runner = CliRunner()
    output_path = tmp_path / "collections.yaml"

    result = runner.invoke(cli, ["generate-config", "--output", str(output_path)])

    assert result.exit_code == 0
    assert str(output_path.resolve()) in result.output
    assert "content_config" in output_path.read_text(encoding="utf-8")
