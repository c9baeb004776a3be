"""
Postgres-backed plant store.

Read methods return live queries: a `MutableObservable` per distinct query that
is loaded when first requested and re-loaded after every `insert_all`, so
subscribers see store updates without polling. When reloads of one query
overlap, only the most recently started one emits.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Mapping, Sequence, Set, Tuple

from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from plant_catalog.domain.models import Plant
from plant_catalog.utils.logging import get_logger
from plant_catalog.utils.observable import MutableObservable, Observable

log = get_logger(__name__)

COLUMNS: Tuple[str, ...] = (
    "plant_id",
    "name",
    "description",
    "grow_zone_number",
    "watering_interval",
    "image_url",
)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS public.plants (
    plant_id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    grow_zone_number INTEGER NOT NULL,
    watering_interval INTEGER NOT NULL DEFAULT 7,
    image_url TEXT NOT NULL DEFAULT ''
);
CREATE INDEX IF NOT EXISTS plants_grow_zone_number_idx
    ON public.plants (grow_zone_number);
"""

_SELECT = f"SELECT {', '.join(COLUMNS)} FROM public.plants"
SELECT_ALL_SQL = f"{_SELECT} ORDER BY name;"
SELECT_BY_GROW_ZONE_SQL = f"{_SELECT} WHERE grow_zone_number = %s ORDER BY name;"
UPSERT_SQL = (
    f"INSERT INTO public.plants ({', '.join(COLUMNS)}) "
    f"VALUES ({', '.join(['%s'] * len(COLUMNS))}) "
    "ON CONFLICT (plant_id) DO UPDATE SET "
    + ", ".join(f"{column} = EXCLUDED.{column}" for column in COLUMNS[1:])
    + ";"
)

QueryKey = Tuple[str, Tuple[Any, ...]]


def row_to_plant(row: Mapping[str, Any]) -> Plant:
    return Plant.model_validate(dict(row))


def plant_to_params(plant: Plant) -> Tuple[Any, ...]:
    return tuple(getattr(plant, column) for column in COLUMNS)


class PostgresPlantDao:
    """
    Plant store on a psycopg async connection pool.

    The pool is borrowed, not owned: closing it is the caller's job.
    """

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool
        self._live_queries: Dict[QueryKey, MutableObservable[List[Plant]]] = {}
        self._pending_loads: Set[asyncio.Task[None]] = set()
        self._generations: Dict[QueryKey, int] = {}

    async def ensure_schema(self) -> None:
        async with self._pool.connection() as conn:
            await conn.execute(SCHEMA_SQL)
        log.debug("Plants schema ensured")

    async def query(self, sql: str, params: Tuple[Any, ...] = ()) -> List[Plant]:
        """Run a one-shot plant query."""
        async with self._pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(sql, params)
                rows = await cur.fetchall()
        return [row_to_plant(row) for row in rows]

    def get_plants(self) -> Observable[List[Plant]]:
        return self._live_query(SELECT_ALL_SQL, ())

    def get_plants_with_grow_zone_number(self, grow_zone_number: int) -> Observable[List[Plant]]:
        return self._live_query(SELECT_BY_GROW_ZONE_SQL, (grow_zone_number,))

    async def insert_all(self, plants: Sequence[Plant]) -> None:
        """Upsert `plants` in one transaction, then re-run every live query."""
        if plants:
            async with self._pool.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.executemany(UPSERT_SQL, [plant_to_params(p) for p in plants])
            log.debug("Upserted plants", extra={"plants": len(plants)})
        try:
            await self.refresh()
        except Exception:
            # The upsert is committed; subscribers catch up on the next reload.
            log.exception("Live query reload after upsert failed", extra={"plants": len(plants)})

    async def refresh(self) -> None:
        """Re-load every live query handed out so far."""
        for key, observable in list(self._live_queries.items()):
            await self._reload(key, observable)

    async def aclose(self) -> None:
        """Wait for in-flight live-query loads to finish."""
        if self._pending_loads:
            await asyncio.gather(*self._pending_loads, return_exceptions=True)

    def _live_query(self, sql: str, params: Tuple[Any, ...]) -> MutableObservable[List[Plant]]:
        key: QueryKey = (sql, params)
        observable = self._live_queries.get(key)
        if observable is None:
            observable = MutableObservable()
            self._live_queries[key] = observable
            self._schedule_load(key, observable)
        return observable

    def _schedule_load(self, key: QueryKey, observable: MutableObservable[List[Plant]]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop yet; the first refresh() populates the query.
            return
        task = loop.create_task(self._load(key, observable))
        self._pending_loads.add(task)
        task.add_done_callback(self._pending_loads.discard)

    async def _load(self, key: QueryKey, observable: MutableObservable[List[Plant]]) -> None:
        try:
            await self._reload(key, observable)
        except Exception:
            log.exception("Live query load failed", extra={"params": list(key[1])})

    async def _reload(self, key: QueryKey, observable: MutableObservable[List[Plant]]) -> None:
        # Only the most recently started reload of a query may emit.
        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation
        sql, params = key
        plants = await self.query(sql, params)
        if self._generations[key] != generation:
            log.debug("Dropped superseded live query result", extra={"params": list(params)})
            return
        observable.emit(plants)



__all__ = [
    "COLUMNS",
    "PostgresPlantDao",
    "SCHEMA_SQL",
    "UPSERT_SQL",
    "plant_to_params",
    "row_to_plant",
]
