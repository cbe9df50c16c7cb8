"""CLI smoke tests."""

from click.testing import CliRunner
from collection_schema_resolver.cli import cli


def test_cli_displays_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "generate-config" in result.output
    assert "resolve" in result.output
    assert "scan" in result.output
    assert "export-workbook" in result.output
    assert "--log-level" in result.output


def test_resolve_help_lists_casing_choices() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["resolve", "--help"])

    assert result.exit_code == 0
    assert "--casing" in result.output
    assert "camel" in result.output
    assert "snake" in result.output
