"""Command Line Interface for hmc-k2.

This module provides a small Typer CLI for inspecting saved HMC K2 responses
(single entries or feeds) without writing any code.

Examples:
    hmc-k2 show managed_system.xml
    hmc-k2 show lpars_feed.xml --type LogicalPartition
    hmc-k2 show lpars_feed.xml --json
    hmc-k2 types
"""

import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from hmc_k2.adapters.k2_parser import K2Parser
from hmc_k2.domain.ports import K2ParserError
from hmc_k2.domain.registry import DEFAULT_REGISTRY
from hmc_k2.infrastructure.logging_config import setup_logging
from hmc_k2.infrastructure.settings import APP_NAME, APP_VERSION, settings

# Initialize Typer app and Rich console
app = typer.Typer(
    name=APP_NAME,
    help="Inspect HMC K2 REST API responses",
    add_completion=False
)
console = Console()


def _record_table(record) -> Table:
    title = type(record).__name__
    if record.uuid:
        title = f"{title} {record.uuid}"

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for name, value in record.fields().items():
        table.add_row(name, Text("null", style="dim") if value is None else Text(value))
    return table


@app.command()
def show(
    input_file: Path = typer.Argument(..., help="Saved K2 response (entry or feed)", exists=True, dir_okay=False),
    type_filter: Optional[str] = typer.Option(None, "--type", "-t", help="Only show entries of this type"),
    strict: bool = typer.Option(False, "--strict", help="Fail if the feed holds entries of unknown types"),
    as_json: bool = typer.Option(False, "--json", help="Print records as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Decode a K2 response file and print its records.

    Examples:
        hmc-k2 show managed_system.xml
        hmc-k2 show feed.xml --type VirtualIOServer --strict
    """
    setup_logging(use_json=settings.log_json, log_level="DEBUG" if verbose else settings.log_level)

    try:
        parser = K2Parser(input_file.read_bytes())

        if parser.feed() is not None:
            results = parser.results(type_filter)
            records = [result.value for result in results if result.is_success()]
            failures = [result for result in results if result.is_failure()]
        else:
            record = parser.object(type_filter)
            records = [record] if record is not None else []
            failures = []
    except ValidationError as e:
        console.print(f"[red]✗[/red] Invalid configuration: {escape(str(e))}")
        raise typer.Exit(code=1)
    except K2ParserError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    for failure in failures:
        console.print(
            f"[yellow]⚠[/yellow] Entry {failure.error_details['entry_index']} skipped: {escape(failure.error)}"
        )

    if as_json:
        console.print_json(json.dumps([record.model_dump(mode="json") for record in records]))
    else:
        for record in records:
            console.print(_record_table(record))

    if failures and strict:
        console.print(f"\n[red]✗[/red] {len(failures)} entries of unknown type")
        raise typer.Exit(code=1)

    if not as_json:
        console.print(f"\n[green]✓[/green] {len(records)} record(s) decoded")


@app.command()
def types() -> None:
    """List the registered K2 types and their schema sizes."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Type", style="cyan")
    table.add_column("Fields", justify="right")

    for name in sorted(DEFAULT_REGISTRY.names()):
        table.add_row(name, str(len(DEFAULT_REGISTRY.get(name).ATTRS)))

    console.print(table)


@app.callback(invoke_without_command=True)
def main_callback(
    version: bool = typer.Option(False, "--version", help="Show version information")
) -> None:
    """Inspect HMC K2 REST API responses."""
    if version:
        console.print(f"{APP_NAME} v{APP_VERSION}")
        raise typer.Exit()


if __name__ == "__main__":
    app()
