"""CLI entry point for mcp-factory."""

import logging
from pathlib import Path

import click

from mcp_factory.errors import McpFactoryError
from mcp_factory.parser.base import ApiSchema, duplicate_endpoint_ids
from mcp_factory.parser.dispatch import load_schema
from mcp_factory.parser.drafter import DEFAULT_DRAFTER, DrafterParser


def _load(doc_path: Path, drafter: str, ai_parse: bool = False, model: str | None = None) -> ApiSchema:
    try:
        return load_schema(
            doc_path,
            ai_parse=ai_parse,
            model=model,
            blueprint_parser=DrafterParser(drafter),
        )
    except McpFactoryError as e:
        raise click.ClickException(e.message) from e


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """MCP Factory: normalize API documentation into one canonical schema."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the canonical schema JSON to this file instead of stdout.")
@click.option("--ai-parse", is_flag=True, help="Use an LLM for documents in no recognized format.")
@click.option("--model", default=None, envvar="MCP_FACTORY_MODEL", help="LLM model to use with --ai-parse.")
@click.option("--drafter", default=DEFAULT_DRAFTER, envvar="MCP_FACTORY_DRAFTER", show_default=True, help="drafter executable used for API Blueprint.")
def parse(doc_path: Path, output: Path | None, ai_parse: bool, model: str | None, drafter: str):
    """Normalize an API document and emit its canonical schema."""
    schema = _load(doc_path, drafter, ai_parse=ai_parse, model=model)
    result = schema.model_dump_json(by_alias=True, exclude_none=True, indent=2)

    if output is None:
        click.echo(result)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result + "\n", encoding="utf-8")
    click.echo(f"Parsed {schema.name}: {len(schema.endpoints)} endpoints saved to {output}", err=True)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--drafter", default=DEFAULT_DRAFTER, envvar="MCP_FACTORY_DRAFTER", show_default=True, help="drafter executable used for API Blueprint.")
def validate(doc_path: Path, drafter: str):
    """Check that an API document can be normalized without writing anything."""
    click.echo(f"Validating {doc_path}...")
    schema = _load(doc_path, drafter)

    click.echo(f"Valid API specification: {schema.name}")
    click.echo(f"Base URL: {schema.base_url}")
    click.echo(f"Endpoints: {len(schema.endpoints)}")
    click.echo(f"Auth type: {schema.auth.type}")

    duplicates = duplicate_endpoint_ids(schema)
    if duplicates:
        click.echo(f"Warning: duplicate endpoint ids: {', '.join(duplicates)}", err=True)
