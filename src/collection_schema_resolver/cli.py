"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click

from collection_schema_resolver.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from collection_schema_resolver.configuration.runtime_settings import (
    SUPPORTED_CASINGS,
    SUPPORTED_LOG_LEVELS,
)
from collection_schema_resolver.field_model import to_payload
from collection_schema_resolver.field_model_export import write_field_model_workbook
from collection_schema_resolver.resolution import ResolutionError, resolve_configured_collections
from collection_schema_resolver.source_scanning import (
    extract_annotations,
    extract_collection_source,
)

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


class CliError(Exception):
    """Custom CLI error."""


class _CliLogHandler(logging.StreamHandler):
    """Stderr handler installed by the CLI; replaced on every reconfiguration."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="collection-schema-resolver")
@click.option(
    "--log-level",
    "log_level",
    required=False,
    type=click.Choice(SUPPORTED_LOG_LEVELS, case_sensitive=False),
    help="Diagnostic log level (overrides logging.level from the configuration)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Content collection schema resolver."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level.upper() if log_level else None
    if log_level:
        _configure_logging(log_level.upper())


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML project configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML project configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="resolve")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON project configuration file",
)
@click.option(
    "--collection",
    "collection_name",
    required=False,
    help="Resolve only this collection and print a single object",
)
@click.option(
    "--output",
    "output_path",
    required=False,
    type=click.Path(path_type=str),
    help="Write the JSON field model to this file instead of stdout",
)
@click.option(
    "--casing",
    "casing",
    required=False,
    type=click.Choice(SUPPORTED_CASINGS),
    help="Key casing of the JSON output (overrides output.casing)",
)
@click.pass_context
def resolve(
    ctx: click.Context,
    config_path: str,
    collection_name: str | None,
    output_path: str | None,
    casing: str | None,
) -> None:
    """Resolve collection field models from generated schemas and schema source."""
    try:
        configuration = load_configuration(config_path)
        _apply_configured_logging(ctx, configuration.logging.level)
        resolved = resolve_configured_collections(
            configuration, [collection_name] if collection_name else None
        )
    except (ConfigurationError, ResolutionError) as exc:
        raise CliError(str(exc)) from exc

    camel_case = (casing or configuration.output.casing) == "camel"
    payloads = [to_payload(schema, camel_case=camel_case) for _, schema in resolved]
    document: Any = payloads[0] if collection_name else payloads
    for _, schema in resolved:
        if schema.degraded:
            click.echo(
                f"warning: collection '{schema.collection_name}' resolved from schema source only",
                err=True,
            )
    _emit_json(document, output_path)


@cli.command(name="scan")
@click.option(
    "--source",
    "source_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the schema source (content config) file",
)
@click.option(
    "--collection",
    "collection_name",
    required=False,
    help="Scan only this collection's definition inside the source file",
)
def scan(source_path: str, collection_name: str | None) -> None:
    """Print the reference and image annotations recovered from schema source."""
    try:
        source_text = Path(source_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CliError(f"Cannot read schema source {source_path}: {exc}") from exc

    if collection_name:
        isolated = extract_collection_source(source_text, collection_name)
        if isolated is None:
            raise CliError(f"Collection '{collection_name}' is not defined in {source_path}")
        source_text = isolated

    annotations = extract_annotations(source_text)
    _emit_json(
        {
            "references": [
                {
                    "field_path": mapping.field_path,
                    "collection_name": mapping.collection_name,
                    "is_array": mapping.is_array,
                }
                for mapping in annotations.references
            ],
            "images": sorted(annotations.images),
            "declared_fields": list(annotations.declared_fields),
        },
        None,
    )


@cli.command(name="export-workbook")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON project configuration file",
)
@click.option(
    "--output",
    "output_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the field model workbook to write",
)
@click.pass_context
def export_workbook(ctx: click.Context, config_path: str, output_path: str) -> None:
    """Export resolved field models of all configured collections to a workbook."""
    try:
        configuration = load_configuration(config_path)
        _apply_configured_logging(ctx, configuration.logging.level)
        resolved = resolve_configured_collections(configuration)
        write_field_model_workbook(resolved, output_path)
    except (ConfigurationError, ResolutionError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(Path(output_path).resolve()))


def _apply_configured_logging(ctx: click.Context, configured_level: str) -> None:
    if ctx.obj and ctx.obj.get("log_level"):
        return
    _configure_logging(configured_level)


def _configure_logging(level: str) -> None:
    logger = logging.getLogger("collection_schema_resolver")
    logger.setLevel(level)
    for existing in list(logger.handlers):
        if isinstance(existing, _CliLogHandler):
            logger.removeHandler(existing)
    # Bound to the current stderr so redirected streams receive the output.
    handler = _CliLogHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)


def _emit_json(document: Any, output_path: str | None) -> None:
    text = json.dumps(document, indent=2, ensure_ascii=False, default=str)
    if output_path is None:
        click.echo(text)
        return
    try:
        destination = Path(output_path)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(text + "\n", encoding="utf-8")
    except OSError as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(destination.resolve()))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
