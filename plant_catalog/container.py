"""
Composition root for the plant catalog.

The application builds exactly one repository per process run and passes it to
whoever needs it; nothing here is a module-level singleton.

Usage:
    async with create_app_context() as ctx:
        await ctx.repository.try_update_recent_plants_cache()
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from plant_catalog.config import Settings, get_settings
from plant_catalog.infrastructure.db_factory import open_async_pool
from plant_catalog.infrastructure.network import HttpNetworkService
from plant_catalog.infrastructure.plant_dao import PostgresPlantDao
from plant_catalog.interfaces import NetworkService, PlantDao
from plant_catalog.repository import PlantRepository, ShouldRefresh, always_refresh


@dataclass(frozen=True)
class AppContext:
    settings: Settings
    plant_dao: PostgresPlantDao
    plant_service: HttpNetworkService
    repository: PlantRepository


def build_repository(
    plant_dao: PlantDao,
    plant_service: NetworkService,
    settings: Optional[Settings] = None,
    should_refresh: ShouldRefresh = always_refresh,
) -> PlantRepository:
    return PlantRepository(
        plant_dao,
        plant_service,
        should_refresh=should_refresh,
        settings=settings or get_settings(),
    )


@asynccontextmanager
async def create_app_context(
    settings: Optional[Settings] = None,
    dsn_override: Optional[str] = None,
) -> AsyncIterator[AppContext]:
    """
    Open the pool and the HTTP client, ensure the schema, and wire the repository.

    Everything opened here is closed on exit, in reverse order.
    """
    settings = settings or get_settings()
    pool = await open_async_pool(settings, dsn_override=dsn_override)
    try:
        plant_dao = PostgresPlantDao(pool)
        await plant_dao.ensure_schema()
        async with HttpNetworkService(settings) as plant_service:
            try:
                yield AppContext(
                    settings=settings,
                    plant_dao=plant_dao,
                    plant_service=plant_service,
                    repository=build_repository(plant_dao, plant_service, settings),
                )
            finally:
                await plant_dao.aclose()
    finally:
        await pool.close()


__all__ = ["AppContext", "build_repository", "create_app_context"]
