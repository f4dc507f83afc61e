"""
Demo data seeding script for tablestore.

Implements deterministic pseudo-random user generation and bulk loading into a
JSON file store through the repository engine (create_many, one write per
batch).
"""

from __future__ import annotations

import json
import random
import sys
import time
from pathlib import Path
from typing import Any, Dict, List

import typer

from tablestore import schema as s
from tablestore.config import Settings
from tablestore.database import Database

app = typer.Typer(help="Generate demo users and load them into a tablestore file store.")

USERS = s.table(
    "users",
    {
        "id": s.number().primary_key(),
        "name": s.string(),
        "email": s.string().unique(),
        "age": s.number().optional(),
        "role": s.enum_type(["admin", "editor", "viewer"]).default("viewer"),
        "active": s.boolean(True),
    },
)

_FIRST_NAMES = ["Ada", "Alan", "Grace", "Linus", "Margaret", "Ken", "Barbara", "Dennis"]


def _generate_users(rows: int, seed: int, offset: int = 0) -> List[Dict[str, Any]]:
    rng = random.Random(seed)
    users: List[Dict[str, Any]] = []
    for i in range(offset, offset + rows):
        name = rng.choice(_FIRST_NAMES)
        users.append(
            {
                "name": name,
                "email": f"{name.lower()}.{i}@example.com",
                "age": rng.randint(18, 90),
                "role": rng.choice(["admin", "editor", "viewer", "viewer"]),
                "active": rng.random() > 0.2,
            }
        )
    return users


def _load_into_store(data_dir: Path, rows: int, batch_size: int, seed: int) -> int:
    settings = Settings(storage_backend="file", data_dir=data_dir)
    with Database(settings) as db:
        repo = db.create_repository(USERS)
        users = _generate_users(rows, seed=seed, offset=repo.count())
        for start in range(0, len(users), batch_size):
            repo.create_many(users[start : start + batch_size])
        return repo.count()


@app.command()
def main(
    rows: int = typer.Option(
        1_000,
        "--rows",
        "-r",
        help="Number of users to generate.",
    ),
    batch_size: int = typer.Option(
        250,
        "--batch-size",
        "-b",
        min=1,
        help="Rows per create_many call.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    data_dir: Path = typer.Option(
        Path(".tablestore"),
        "--data-dir",
        "-d",
        help="Directory of the JSON file store.",
    ),
    no_load: bool = typer.Option(
        False,
        "--no-load",
        help="Only print generated rows as JSON; skip loading.",
    ),
) -> None:
    """
    Generate demo users and optionally load them into the file store.
    """
    if no_load:
        typer.echo(json.dumps(_generate_users(rows, seed=seed), indent=2))
        return

    start = time.perf_counter()
    typer.echo(f"Seeding {rows:,} users -> {data_dir} (batch={batch_size}, seed={seed})")
    total = _load_into_store(data_dir, rows=rows, batch_size=batch_size, seed=seed)
    duration = time.perf_counter() - start
    typer.echo(f"Load completed in {duration:.2f}s; table 'users' now holds {total:,} records.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
