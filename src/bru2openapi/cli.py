"""CLI entry point for bru2openapi."""

import logging
from pathlib import Path

import click

from bru2openapi.parser.bru import parse_bru_file
from bru2openapi.parser.collection import load_collection
from bru2openapi.generator.openapi import build_openapi
from bru2openapi.generator.output import OUTPUT_FORMATS, write_document

DEFAULT_OUTPUT = "./openapi.yml"


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """bru2openapi — generate an OpenAPI 3.0 document from a Bruno collection."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("-i", "--input", "input_dir", required=True, type=click.Path(exists=True, file_okay=False, path_type=Path), help="Path to the Bruno collection folder.")
@click.option("-o", "--output", default=DEFAULT_OUTPUT, show_default=True, type=click.Path(dir_okay=False, path_type=Path), help="Output file path for the OpenAPI document.")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", *OUTPUT_FORMATS]), help="Output format; 'auto' picks by file extension.")
def convert(input_dir: Path, output: Path, fmt: str):
    """Convert a Bruno collection into an OpenAPI document."""
    click.echo(f"Reading Bruno collection {input_dir}...")
    try:
        requests = load_collection(input_dir)
    except (OSError, UnicodeDecodeError) as e:
        raise click.ClickException(f"Error reading Bruno directory: {e}") from e
    click.echo(f"Found {len(requests)} requests.")

    document = build_openapi(requests)
    click.echo(f"Built {len(document.paths)} paths.")

    try:
        write_document(document, output, fmt)
    except OSError as e:
        raise click.ClickException(f"Error writing output: {e}") from e
    click.echo(f"OpenAPI generated: {output}")


@main.command()
@click.argument("bru_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def parse(bru_path: Path):
    """Parse a single .bru file and print the request as JSON."""
    try:
        request = parse_bru_file(bru_path)
    except (OSError, UnicodeDecodeError) as e:
        raise click.ClickException(f"Error reading file: {e}") from e
    click.echo(request.model_dump_json(indent=2))
