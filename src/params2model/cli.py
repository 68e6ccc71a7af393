"""CLI entry point for Params2Model."""

import json
import sys

import click
from pydantic_core import to_jsonable_python

from . import __version__
from .config import settings
from .engine import parse_params
from .errors import Params2ModelError
from .input_props import derive_input_props
from .requests import search_params
from .utils.loading import import_schema
from .utils.logging_setup import get_logger, setup_logging


def _load(schema_path: str):
    try:
        return import_schema(schema_path)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="SCHEMA") from e


def _split_pair(pair: str) -> tuple[str, str]:
    key, sep, value = pair.partition("=")
    if not sep:
        raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="PAIRS")
    return key, value


class _QueryRequest:
    """Minimal request carrying only a URL."""

    def __init__(self, query: str):
        self.url = f"http://localhost/?{query.lstrip('?')}"


@click.group()
@click.version_option(version=__version__, prog_name="params2model")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose (DEBUG) logging")
def cli(verbose: bool):
    """Params2Model - Parse query strings and form data into pydantic models."""
    if verbose:
        settings.log_level = "DEBUG"
    setup_logging()


@cli.command()
@click.argument("schema_path", metavar="SCHEMA")
@click.argument("pairs", nargs=-1)
@click.option(
    "--query",
    "-q",
    help="Query string to parse (e.g. 'tags[]=a&tags[]=b'), read before PAIRS",
)
def parse(schema_path: str, pairs: tuple[str, ...], query: str | None):
    """
    Parse key=value PAIRS against SCHEMA (module:Model).

    Prints the validated data as JSON, or the error mapping and exits 1.
    """
    logger = get_logger(__name__)
    schema = _load(schema_path)

    params: list[tuple[str, str]] = []
    if query:
        params.extend(search_params(_QueryRequest(query)))
    params.extend(_split_pair(pair) for pair in pairs)
    logger.debug("Parsing params", schema=schema_path, count=len(params))

    try:
        result = parse_params(params, schema)
    except Params2ModelError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    if result.success:
        click.echo(json.dumps(to_jsonable_python(result.data), indent=2))
        return
    click.echo(json.dumps(result.errors, indent=2))
    sys.exit(1)


@cli.command()
@click.argument("schema_path", metavar="SCHEMA")
@click.argument("field")
def props(schema_path: str, field: str):
    """Print the HTML input attributes derived for FIELD of SCHEMA."""
    schema = _load(schema_path)
    try:
        input_props = derive_input_props(schema, field)
    except Params2ModelError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)
    click.echo(json.dumps(input_props.as_attrs(), indent=2))


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
