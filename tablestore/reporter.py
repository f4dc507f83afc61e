"""
Rich rendering for the CLI: table listings and record dumps.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from tablestore.domain.models import SystemRecord


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    return str(value)


def print_tables(entries: List[SystemRecord], console: Optional[Console] = None) -> None:
    """
    Render System Records as a rich table.
    """
    console = console or Console()

    if not entries:
        console.print("[yellow]No tables registered.[/yellow]")
        return

    table = Table(title="Tables", box=box.ROUNDED, show_lines=False)
    table.add_column("Table", style="cyan", no_wrap=True)
    table.add_column("Last id", justify="right")
    table.add_column("Created", style="dim")
    table.add_column("Updated", style="dim")

    for entry in entries:
        table.add_row(
            entry.table,
            _cell(entry.table_last_id),
            _cell(entry.table_created_date),
            _cell(entry.table_updated_date),
        )

    console.print(table)


def print_records(
    name: str,
    records: List[Dict[str, Any]],
    console: Optional[Console] = None,
    limit: Optional[int] = None,
) -> None:
    """
    Render records as a rich table. Columns are the union of keys across the
    shown records, in first-seen order.
    """
    console = console or Console()

    if not records:
        console.print(f"[yellow]Table '{name}' is empty.[/yellow]")
        return

    shown = records if limit is None else records[:limit]
    columns: List[str] = []
    for record in shown:
        for key in record:
            if key not in columns:
                columns.append(key)

    table = Table(title=f"{name} ({len(records)} records)", box=box.ROUNDED)
    for column in columns:
        table.add_column(column, style="cyan" if column == "id" else None)
    for record in shown:
        table.add_row(*(_cell(record.get(column)) for column in columns))

    console.print(table)
    if len(shown) < len(records):
        console.print(f"[dim]... {len(records) - len(shown)} more not shown[/dim]")


__all__ = ["print_records", "print_tables"]
