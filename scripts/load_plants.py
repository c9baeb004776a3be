"""
Load a local plants JSON document into Postgres.

The document uses the same format as the remote plant service (a JSON array of
objects with camelCase keys), which makes it easy to seed a development
database without network access.
"""

from __future__ import annotations

import asyncio
import json
import sys
import time
from pathlib import Path
from typing import List, Optional

import typer

from plant_catalog.config import get_settings
from plant_catalog.domain.models import Plant
from plant_catalog.infrastructure.db_factory import open_async_pool
from plant_catalog.infrastructure.network import parse_plants
from plant_catalog.infrastructure.plant_dao import PostgresPlantDao
from plant_catalog.utils.logging import configure_logging

app = typer.Typer(help="Seed the plants table from a local JSON document.")


def _read_plants(path: Path) -> List[Plant]:
    with path.open("r", encoding="utf-8") as f:
        return parse_plants(json.load(f))


async def _load(plants: List[Plant], dsn: Optional[str]) -> None:
    pool = await open_async_pool(get_settings(), dsn_override=dsn)
    try:
        dao = PostgresPlantDao(pool)
        await dao.ensure_schema()
        await dao.insert_all(plants)
    finally:
        await pool.close()


@app.command()
def main(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="plants.json to load."),
    dsn: Optional[str] = typer.Option(
        None,
        "--dsn",
        help="Optional DSN override for Postgres.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Only parse and validate the document; skip loading into Postgres.",
    ),
) -> None:
    """
    Validate a plants document and upsert it into the plants table.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    start = time.perf_counter()
    plants = _read_plants(path)
    typer.echo(f"Parsed {len(plants)} plants from {path}")

    if dry_run:
        typer.echo("Skipping load (dry-run flag set).")
        return

    asyncio.run(_load(plants, dsn))
    typer.echo(f"Loaded {len(plants)} plants in {time.perf_counter() - start:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
