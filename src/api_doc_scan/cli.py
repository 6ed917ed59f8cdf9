"""CLI entry point for api-doc-scan."""

from pathlib import Path

import click

from api_doc_scan.config import DEFAULT_API_VERSION, DEFAULT_OPENAPI_VERSION, DEFAULT_TITLE, configure_logging
from api_doc_scan.builder.routes import build_routes
from api_doc_scan.errors import ApiDocScanError
from api_doc_scan.parser.base import Document
from api_doc_scan.parser.feed import dump_document, load_document, load_routes


def _write(document: Document, output: Path, fmt: str) -> None:
    if fmt == "auto":
        fmt = "json" if output.suffix == ".json" else "yaml"
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(dump_document(document, fmt), encoding="utf-8")
    except OSError as e:
        raise click.ClickException(f"cannot write {output}: {e}") from e


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log dropped tokens and every built operation.")
def main(verbose: bool):
    """API Doc Scan: compile route annotation blocks into an OpenAPI document."""
    configure_logging(verbose)


@main.command()
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the skeleton document.")
@click.option("--title", default=DEFAULT_TITLE, help="API title.")
@click.option("--api-version", default=DEFAULT_API_VERSION, help="API version string.")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "yaml", "json"]), help="Output format.")
def init(output: Path, title: str, api_version: str, fmt: str):
    """Write an empty OpenAPI document to build routes into."""
    document = Document(openapi=DEFAULT_OPENAPI_VERSION, info={"title": title, "version": api_version})
    _write(document, output, fmt)
    click.echo(f"Document saved to {output}")


@main.command()
@click.argument("feed_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the built document.")
@click.option("--base", "base_path", default=None, type=click.Path(exists=True, path_type=Path), help="Existing document to enrich.")
@click.option("--skip-errors", is_flag=True, help="Skip routes whose annotations fail to parse instead of aborting.")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "yaml", "json"]), help="Output format.")
def build(feed_path: Path, output: Path, base_path: Path | None, skip_errors: bool, fmt: str):
    """Build every route in FEED_PATH into an OpenAPI document."""
    try:
        routes = load_routes(feed_path)
        if base_path is not None:
            document = load_document(base_path)
        else:
            document = Document(info={"title": DEFAULT_TITLE, "version": DEFAULT_API_VERSION})
        click.echo(f"Building {len(routes)} routes from {feed_path}...")
        errors = build_routes(routes, document, skip_errors=skip_errors)
    except ApiDocScanError as e:
        raise click.ClickException(str(e)) from e

    for error in errors:
        click.echo(f"  Skipped {error}", err=True)
    _write(document, output, fmt)
    click.echo(f"Built {len(routes) - len(errors)} routes into {output}")
