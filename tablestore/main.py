from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import typer

from tablestore.config import Settings, get_settings
from tablestore.database import Database
from tablestore.errors import TableStoreError
from tablestore.query import filter_records
from tablestore.reporter import print_records, print_tables
from tablestore.storage.abstract import SYSTEM_TABLE
from tablestore.storage.factory import available_backends
from tablestore.utils.logging import configure_logging

app = typer.Typer(help="tablestore CLI: inspect and manage stored tables.")

BackendOption = typer.Option(
    None,
    "--backend",
    "-b",
    help="Storage backend (memory, file, session). Defaults to TABLESTORE_STORAGE.",
)
DataDirOption = typer.Option(
    None,
    "--data-dir",
    "-d",
    help="Directory for the file backend. Defaults to TABLESTORE_DATA_DIR.",
)


def _settings(backend: Optional[str], data_dir: Optional[Path]) -> Settings:
    settings = get_settings()
    overrides = {}
    if backend is not None:
        if backend not in available_backends():
            raise typer.BadParameter(
                f"Unknown backend '{backend}'. Available: {', '.join(available_backends())}"
            )
        overrides["storage_backend"] = backend
    if data_dir is not None:
        overrides["data_dir"] = data_dir
    settings = settings.model_copy(update=overrides) if overrides else settings
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    return settings


@app.command()
def info(
    backend: Optional[str] = BackendOption,
    data_dir: Optional[Path] = DataDirOption,
) -> None:
    """
    Show effective configuration values.
    """
    settings = _settings(backend, data_dir)
    typer.echo(
        f"backend={settings.storage_backend} data_dir={settings.data_dir} "
        f"id_length={settings.id_length} log_level={settings.log_level}"
    )


@app.command()
def tables(
    backend: Optional[str] = BackendOption,
    data_dir: Optional[Path] = DataDirOption,
) -> None:
    """
    List registered tables with their bookkeeping data.
    """
    with Database(_settings(backend, data_dir)) as db:
        print_tables(db.tables())


@app.command()
def show(
    table: str = typer.Argument(..., help="Table to display."),
    where: Optional[str] = typer.Option(
        None,
        "--where",
        "-w",
        help='JSON where-clause, e.g. \'{"age": {"greaterThan": 27}}\'.',
    ),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, help="Rows to display."),
    as_json: bool = typer.Option(False, "--json", help="Print records as JSON instead of a table."),
    backend: Optional[str] = BackendOption,
    data_dir: Optional[Path] = DataDirOption,
) -> None:
    """
    Print the records stored for a table.
    """
    try:
        condition = json.loads(where) if where else None
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"--where is not valid JSON: {exc}") from exc
    if condition is not None and not isinstance(condition, dict):
        raise typer.BadParameter("--where must be a JSON object")

    with Database(_settings(backend, data_dir)) as db:
        if table != SYSTEM_TABLE and not db.storage.has_item(table):
            typer.echo(f"Table '{table}' does not exist.", err=True)
            raise typer.Exit(code=1)
        records = filter_records(db.storage.get_item(table), condition)
        if as_json:
            shown = records if limit is None else records[:limit]
            typer.echo(json.dumps(shown, indent=2, default=str))
        else:
            print_records(table, records, limit=limit)


@app.command()
def drop(
    table: str = typer.Argument(..., help="Table to remove."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
    backend: Optional[str] = BackendOption,
    data_dir: Optional[Path] = DataDirOption,
) -> None:
    """
    Delete a table's records and bookkeeping entry.
    """
    if not yes:
        typer.confirm(f"Drop table '{table}'?", abort=True)
    with Database(_settings(backend, data_dir)) as db:
        if db.drop_table(table):
            typer.echo(f"Dropped '{table}'.")
        else:
            typer.echo(f"Table '{table}' does not exist.", err=True)
            raise typer.Exit(code=1)


def main() -> None:
    try:
        app()
    except TableStoreError as exc:
        typer.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
