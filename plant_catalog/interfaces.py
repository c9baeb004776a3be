"""
Collaborator interfaces consumed by the plant repository.

The repository only talks to a local store (`PlantDao`) and a remote service
(`NetworkService`) through these protocols. Concrete adapters live in
`plant_catalog.infrastructure`; tests provide in-memory fakes.
"""

from __future__ import annotations

from typing import List, Protocol, Sequence, runtime_checkable

from plant_catalog.domain.models import GrowZone, Plant
from plant_catalog.utils.observable import Observable


@runtime_checkable
class PlantDao(Protocol):
    """
    Local store of plants.

    Read methods return live queries: the observable emits the current rows and
    re-emits whenever the store changes.
    """

    def get_plants(self) -> Observable[List[Plant]]:
        """All plants, ordered by name."""
        ...

    def get_plants_with_grow_zone_number(self, grow_zone_number: int) -> Observable[List[Plant]]:
        """Plants in the given grow zone, ordered by name."""
        ...

    async def insert_all(self, plants: Sequence[Plant]) -> None:
        """
        Insert or replace `plants` by id.

        Raises
        ------
        Exception
            Any storage failure; callers decide how to report it.
        """
        ...


@runtime_checkable
class NetworkService(Protocol):
    """Remote source of plants and of the custom sort order."""

    async def all_plants(self) -> List[Plant]:
        ...

    async def plants_by_grow_zone(self, grow_zone: GrowZone) -> List[Plant]:
        ...

    async def custom_plant_sort_order(self) -> List[str]:
        """Plant ids in the order the catalog should display them."""
        ...


__all__ = ["NetworkService", "PlantDao"]
