from __future__ import annotations

import asyncio
import json
import sys
from typing import List, Optional, Tuple

import psycopg
import typer
from psycopg_pool import PoolTimeout

from plant_catalog.config import get_settings
from plant_catalog.container import create_app_context
from plant_catalog.domain.models import GrowZone, Plant
from plant_catalog.exceptions import RefreshError
from plant_catalog.infrastructure.network import HttpNetworkService
from plant_catalog.reporter import print_plants
from plant_catalog.repository import make_sort_order_cache
from plant_catalog.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Plant catalog CLI.")
log = get_logger(__name__)

GROW_ZONE_OPTION = typer.Option(
    None,
    "--grow-zone",
    "-z",
    help="Restrict to a single grow zone number.",
)


def _setup() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


def _run(coro):
    """Run `coro`, turning store connectivity failures into exit code 2."""
    try:
        return asyncio.run(coro)
    except (psycopg.OperationalError, PoolTimeout) as exc:
        log.debug("Database unavailable", exc_info=True)
        typer.echo(f"Database unavailable: {exc}", err=True)
        raise typer.Exit(code=2) from exc


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"service={settings.plants_base_url} | "
        f"sort_order_timeout={settings.sort_order_wait_timeout_seconds} "
        f"cache_failures={settings.sort_order_cache_failures}"
    )


async def _refresh(grow_zone: Optional[int]) -> None:
    async with create_app_context() as ctx:
        if grow_zone is None:
            await ctx.repository.try_update_recent_plants_cache()
        else:
            await ctx.repository.try_update_recent_plants_for_grow_zone_cache(
                GrowZone(number=grow_zone)
            )


@app.command()
def refresh(grow_zone: Optional[int] = GROW_ZONE_OPTION) -> None:
    """
    Fetch plants from the network and store them locally.
    """
    _setup()
    try:
        _run(_refresh(grow_zone))
    except RefreshError as exc:
        log.error("Refresh failed", extra={"grow_zone": grow_zone}, exc_info=True)
        typer.echo(f"Refresh failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo("Plants refreshed.")


async def _list_plants(grow_zone: Optional[int]) -> Tuple[List[Plant], List[str]]:
    async with create_app_context() as ctx:
        if grow_zone is None:
            plants = await ctx.repository.plants()
        else:
            plants = await ctx.repository.get_plants_with_grow_zone(GrowZone(number=grow_zone))
        await ctx.plant_dao.refresh()
        custom_sort_order = await ctx.repository.custom_sort_order()
        return list(plants.value or []), custom_sort_order


@app.command("list")
def list_plants(
    grow_zone: Optional[int] = GROW_ZONE_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
) -> None:
    """
    Show stored plants in custom sort order.
    """
    _setup()
    plants, custom_sort_order = _run(_list_plants(grow_zone))
    if as_json:
        typer.echo(json.dumps([plant.model_dump(by_alias=True) for plant in plants], indent=2))
        return
    title = "Plants" if grow_zone is None else f"Plants in grow zone {grow_zone}"
    print_plants(plants, custom_sort_order, title=title)


async def _sort_order() -> List[str]:
    settings = get_settings()
    async with HttpNetworkService(settings) as plant_service:
        return await make_sort_order_cache(plant_service, settings).get_or_await()


@app.command("sort-order")
def sort_order() -> None:
    """
    Print the custom sort order (empty when the service is unreachable).
    """
    _setup()
    typer.echo(json.dumps(_run(_sort_order()), indent=2))


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
