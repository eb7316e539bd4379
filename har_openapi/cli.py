"""CLI entry point: HAR capture -> OpenAPI document."""

from __future__ import annotations

import logging
import os
import sys
import time

import click

from . import __version__
from .config import FORMATS, load_env


@click.command()
@click.option("--har-file", "-i", envvar="HAR_FILE",
              help="HAR capture to convert (env: HAR_FILE)")
@click.option("--base-path", "-b", envvar="BASE_PATH",
              help="Only keep requests whose path starts with this prefix (env: BASE_PATH)")
@click.option("--output", "-o", envvar="OUTPUT_SWAGGER",
              help="Output file path (default: openapi.yaml, env: OUTPUT_SWAGGER)")
@click.option("--format", "fmt", type=click.Choice(FORMATS), default=None,
              help="Output format (default: from the output extension, else yaml)")
@click.option("--title", envvar="API_TITLE", help="info.title of the document")
@click.option("--api-version", envvar="API_VERSION", help="info.version of the document")
@click.option("--server-url", envvar="SERVER_URL", help="servers[0].url of the document")
@click.option("--show-endpoints", is_flag=True, help="Print a table of discovered endpoints")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__)
def main(har_file: str, base_path: str, output: str, fmt: str, title: str,
         api_version: str, server_url: str, show_endpoints: bool,
         verbose: bool) -> None:
    """Generate an OpenAPI 3.0 spec from a HAR traffic capture.

    Requests are deduplicated by method and normalized path, ignoring
    query strings; identifier-like path segments become {id} parameters.
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
    )
    logger = logging.getLogger("har_openapi")

    # Import here to keep CLI snappy for --help
    from .config import ConfigError, load_settings
    from .converter import convert_calls, select_candidates
    from .har_loader import CaptureError, load_har
    from .models import ConversionStats
    from .oas_emitter import emit_json, emit_openapi, emit_yaml
    from .reporter import make_progress, print_report

    from rich.console import Console
    console = Console()
    started = time.monotonic()

    # 1. Settings
    try:
        settings = load_settings(har_file, base_path, output=output, fmt=fmt,
                                 title=title, version=api_version,
                                 server_url=server_url)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    # 2. Read capture
    console.print(f"[cyan]Reading HAR: {settings.har_file}[/cyan]")
    try:
        har = load_har(settings.har_file)
        stats = ConversionStats()
        candidates = select_candidates(har, settings.base_path, stats)
    except CaptureError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print(f"[cyan]BASE_PATH: {settings.base_path}[/cyan]")
    console.print(f"[cyan]SERVER_URL: {settings.server_url}[/cyan]")
    console.print(f"[cyan]Candidate requests: {len(candidates)}[/cyan]")

    # 3. Aggregate
    with make_progress(console) as progress:
        task = progress.add_task("convert", total=len(candidates) or 1, status="starting")

        def advance(status: str) -> None:
            progress.update(task, advance=1, status=status)

        endpoints = convert_calls(candidates, settings.base_path, stats, progress=advance)

    # 4. Emit
    spec = emit_openapi(endpoints, title=settings.title, version=settings.version,
                        server_url=settings.server_url)
    content = emit_json(spec) if settings.fmt == "json" else emit_yaml(spec)

    try:
        os.makedirs(os.path.dirname(settings.output), exist_ok=True)
        with open(settings.output, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        console.print(f"[red]Error:[/red] Cannot write {settings.output}: {e}")
        sys.exit(1)

    logger.debug("Wrote %d bytes to %s", len(content), settings.output)
    console.print(f"[green]✓[/green] OpenAPI spec written to: {settings.output}")
    console.print()

    # 5. Report
    print_report(endpoints, stats, spec, show_endpoints=show_endpoints, console=console)
    console.print(f"Elapsed: {time.monotonic() - started:.2f}s")


def run() -> None:
    """Console script entry: load .env, then run the command."""
    load_env()
    main()


if __name__ == "__main__":
    run()
