"""Output formatters for CLI commands."""

import csv
import dataclasses
import io
import json
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from ledger_engine.cli.config import OutputFormat

console = Console()
error_console = Console(stderr=True)


def _to_dict(item: Any) -> dict[str, Any]:
    if isinstance(item, BaseModel):
        return item.model_dump(exclude_none=True)
    if dataclasses.is_dataclass(item) and not isinstance(item, type):
        return dataclasses.asdict(item)
    return dict(item)


def format_output(
    data: Any,
    output_format: OutputFormat,
    *,
    title: str | None = None,
    columns: list[str] | None = None,
) -> None:
    """Format and print output in the specified format.

    Args:
        data: Data to format (record, Pydantic model, dict, or a list of them)
        output_format: Output format (table, json, csv)
        title: Optional title for table output
        columns: Optional column names to include (for table/csv)
    """
    converted: list[dict[str, Any]]
    if isinstance(data, Sequence) and not isinstance(data, str):
        converted = [_to_dict(item) for item in data]
    elif data is None:
        converted = []
    else:
        converted = [_to_dict(data)]

    if output_format == OutputFormat.JSON:
        _format_json(converted)
    elif output_format == OutputFormat.CSV:
        _format_csv(converted, columns)
    else:
        _format_table(converted, title, columns)


def _format_json(data: list[dict[str, Any]]) -> None:
    """Format as JSON."""
    if len(data) == 1:
        console.print_json(json.dumps(data[0], default=str))
    else:
        console.print_json(json.dumps(data, default=str))


def _format_csv(data: list[dict[str, Any]], columns: list[str] | None) -> None:
    """Format as CSV."""
    if not data:
        return

    if columns is None:
        columns = list(data[0].keys())

    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=columns, extrasaction="ignore")
    writer.writeheader()
    writer.writerows(data)
    console.print(output.getvalue(), end="")


def _snake_to_title(s: str) -> str:
    """Convert snake_case to Title Case for table headers."""
    return " ".join(word.capitalize() for word in s.split("_"))


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def _format_table(
    data: list[dict[str, Any]],
    title: str | None,
    columns: list[str] | None,
) -> None:
    """Format as rich table."""
    if not data:
        console.print("[dim]No data[/dim]")
        return

    if columns is None:
        columns = list(data[0].keys())

    table = Table(title=title, show_header=True, header_style="bold")

    for col in columns:
        justify = "right" if col in _NUMERIC_COLUMNS else "left"
        table.add_column(_snake_to_title(col), justify=justify)

    for row in data:
        table.add_row(*[_cell(row.get(col)) for col in columns])

    console.print(table)


_NUMERIC_COLUMNS = frozenset(
    {
        "balance",
        "debit",
        "credit",
        "subtotal",
        "tax_amount",
        "total",
        "exchange_rate",
        "quantity",
        "unit_price",
        "amount",
    }
)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]Error:[/red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning:[/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]i[/blue] {message}")
