"""Rich console output: progress bar, endpoint table and summary counters."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from .models import ConversionStats, Endpoint


def make_progress(console: Optional[Console] = None) -> Progress:
    """A single-line progress bar whose status column shows the last endpoint."""
    return Progress(
        TextColumn("Progress"),
        BarColumn(bar_width=24),
        TextColumn("{task.percentage:>3.0f}%"),
        MofNCompleteColumn(),
        TextColumn("{task.fields[status]}"),
        console=console,
        transient=True,
    )


def print_report(endpoints: List[Endpoint], stats: ConversionStats,
                 spec: Dict[str, Any], show_endpoints: bool = False,
                 console: Optional[Console] = None) -> None:
    """Print the endpoint table (optional) and summary statistics."""
    console = console or Console()

    if show_endpoints and endpoints:
        table = Table(title="Discovered Endpoints")
        table.add_column("Method", style="bold cyan", width=8)
        table.add_column("Path", style="white", max_width=50)
        table.add_column("Tag", max_width=20)
        table.add_column("Params", justify="right", width=6)
        table.add_column("Examples", width=9)

        for ep in sorted(endpoints, key=lambda e: (e.template, e.method)):
            method_style = _method_style(ep.method)
            table.add_row(
                f"[{method_style}]{ep.method}[/{method_style}]",
                ep.template,
                ep.tag,
                str(len(ep.parameters)),
                f"{len(ep.request_examples)}/{len(ep.response_examples)}",
            )

        console.print(table)
        console.print()

    _print_summary(console, stats, spec)


def _print_summary(console: Console, stats: ConversionStats,
                   spec: Dict[str, Any]) -> None:
    schemas = spec.get("components", {}).get("schemas", {})

    console.print("[bold]Summary:[/bold]")
    console.print(f"  Total HAR entries:          {stats.total_entries:>5}")
    console.print(f"  Skipped (BASE_PATH mismatch): {stats.skipped_prefix:>3}")
    if stats.skipped_static:
        console.print(f"  Skipped (static / non-XHR): {stats.skipped_static:>5}")
    if stats.skipped_malformed:
        console.print(
            f"  [yellow]Skipped (malformed):        {stats.skipped_malformed:>5}[/yellow]"
        )
    console.print(f"  Unique endpoints:           {stats.unique_endpoints:>5}")
    console.print(f"  Request examples captured:  {stats.request_examples:>5}")
    console.print(f"  Response examples captured: {stats.response_examples:>5}")
    console.print(f"  Tags generated:             {len(spec.get('tags', [])):>5}")
    console.print(f"  Schemas generated:          {len(schemas):>5}")
    console.print()


def _method_style(method: str) -> str:
    """Return a Rich style for an HTTP method."""
    styles = {
        "GET": "green",
        "POST": "yellow",
        "PUT": "blue",
        "PATCH": "blue",
        "DELETE": "red",
    }
    return styles.get(method, "white")
