"""
Repository for plant data.

`PlantRepository` exposes two UI-observable store queries, `plants` and
`get_plants_with_grow_zone`, both ordered by the remote custom sort order.
The sort order is fetched once per repository through a single-flight cache;
if the fetch fails the lists fall back to name order.

To pull fresh plants from the network into the store, call
`try_update_recent_plants_cache` or `try_update_recent_plants_for_grow_zone_cache`.
Store observers are notified by the store itself once the insert lands.

Usage:
    repository = PlantRepository(plant_dao, plant_service)
    await repository.try_update_recent_plants_cache()
    plants = await repository.plants()
    subscription = plants.subscribe(render)
"""

from __future__ import annotations

import inspect
from typing import Awaitable, Callable, List, Optional, Union

from plant_catalog.config import Settings, get_settings
from plant_catalog.domain.models import GrowZone, Plant
from plant_catalog.exceptions import RefreshError
from plant_catalog.interfaces import NetworkService, PlantDao
from plant_catalog.sorting import apply_sort
from plant_catalog.utils.cache import CacheOnSuccess
from plant_catalog.utils.logging import get_logger
from plant_catalog.utils.observable import Observable

log = get_logger(__name__)

ShouldRefresh = Callable[[], Union[bool, Awaitable[bool]]]


def always_refresh() -> bool:
    """Default refresh policy: every refresh request goes to the network."""
    return True


def make_sort_order_cache(
    plant_service: NetworkService, settings: Optional[Settings] = None
) -> CacheOnSuccess[List[str]]:
    """Single-flight cache for the custom sort order, falling back to an empty order."""
    settings = settings or get_settings()
    return CacheOnSuccess(
        plant_service.custom_plant_sort_order,
        on_error_fallback=list,
        wait_timeout=settings.sort_order_wait_timeout_seconds,
        cache_failures=settings.sort_order_cache_failures,
        name="plants_list_order",
    )


class PlantRepository:
    """
    Combines the local plant store, the remote plant service, and the cached
    custom sort order.

    Parameters
    ----------
    plant_dao : PlantDao
        Local store; owns persistence and change notification.
    plant_service : NetworkService
        Remote source of plants and of the custom sort order.
    should_refresh : callable
        Policy hook consulted before every network refresh. May be sync or async.
    sort_order_cache : CacheOnSuccess | None
        Override for the sort-order cache; built from settings when omitted.
    settings : Settings | None
        Defaults to `get_settings()`.
    """

    def __init__(
        self,
        plant_dao: PlantDao,
        plant_service: NetworkService,
        *,
        should_refresh: ShouldRefresh = always_refresh,
        sort_order_cache: Optional[CacheOnSuccess[List[str]]] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._plant_dao = plant_dao
        self._plant_service = plant_service
        self._should_refresh = should_refresh

        if sort_order_cache is None:
            sort_order_cache = make_sort_order_cache(plant_service, settings)
        self._plants_list_order_cache = sort_order_cache

    @property
    def sort_order_cache(self) -> CacheOnSuccess[List[str]]:
        return self._plants_list_order_cache

    async def custom_sort_order(self) -> List[str]:
        """The cached custom sort order; never raises when a fallback is configured."""
        custom_sort_order = await self._plants_list_order_cache.get_or_await()
        log.debug("Custom sort order resolved", extra={"size": len(custom_sort_order)})
        return custom_sort_order

    async def plants(self) -> Observable[List[Plant]]:
        """
        All plants from the store, custom-sorted on every store emission.
        """
        plants_live = self._plant_dao.get_plants()
        custom_sort_order = await self.custom_sort_order()
        return plants_live.map(lambda plants: apply_sort(plants, custom_sort_order))

    async def get_plants_with_grow_zone(self, grow_zone: GrowZone) -> Observable[List[Plant]]:
        """
        Plants from the store in `grow_zone`, custom-sorted on every store emission.
        """
        plants_live = self._plant_dao.get_plants_with_grow_zone_number(grow_zone.number)
        custom_sort_order = await self.custom_sort_order()
        return plants_live.map(lambda plants: apply_sort(plants, custom_sort_order))

    async def _should_update_plants_cache(self) -> bool:
        """
        Returns True if a network request should be made.
        """
        decision = self._should_refresh()
        if inspect.isawaitable(decision):
            decision = await decision
        return bool(decision)

    async def try_update_recent_plants_cache(self) -> None:
        """
        Update the stored plants from the network.

        Skipped entirely when the refresh policy says no.

        Raises
        ------
        RefreshError
            If the network fetch or the store write fails.
        """
        should_update = await self._should_update_plants_cache()
        log.debug("Refresh policy evaluated", extra={"should_update": should_update})
        if should_update:
            await self._fetch_recent_plants()

    async def try_update_recent_plants_for_grow_zone_cache(self, grow_zone: GrowZone) -> None:
        """
        Update the stored plants for a single grow zone from the network.

        Raises
        ------
        RefreshError
            If the network fetch or the store write fails.
        """
        should_update = await self._should_update_plants_cache()
        log.debug(
            "Refresh policy evaluated",
            extra={"should_update": should_update, "grow_zone": grow_zone.number},
        )
        if should_update:
            await self._fetch_plants_for_grow_zone(grow_zone)

    async def _fetch_recent_plants(self) -> None:
        try:
            plants = await self._plant_service.all_plants()
        except Exception as exc:
            raise RefreshError(f"Fetching plants failed: {exc}") from exc
        await self._store(plants)

    async def _fetch_plants_for_grow_zone(self, grow_zone: GrowZone) -> None:
        try:
            plants = await self._plant_service.plants_by_grow_zone(grow_zone)
        except Exception as exc:
            raise RefreshError(
                f"Fetching plants for grow zone {grow_zone.number} failed: {exc}"
            ) from exc
        log.debug("Fetched plants", extra={"grow_zone": grow_zone.number, "plants": len(plants)})
        await self._store(plants)

    async def _store(self, plants: List[Plant]) -> None:
        try:
            await self._plant_dao.insert_all(plants)
        except Exception as exc:
            raise RefreshError(f"Storing {len(plants)} plants failed: {exc}") from exc
        log.info("Inserted plants", extra={"plants": len(plants)})


__all__ = ["PlantRepository", "ShouldRefresh", "always_refresh", "make_sort_order_cache"]
