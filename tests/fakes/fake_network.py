"""Scriptable remote plant service fake for testing."""

from __future__ import annotations

import asyncio
from collections import Counter
from typing import Iterable, List, Optional, Sequence

from plant_catalog.domain.models import GrowZone, Plant


class FakeNetworkService:
    """In-memory `NetworkService` that counts calls and can be told to fail or stall."""

    def __init__(
        self,
        plants: Iterable[Plant] = (),
        sort_order: Sequence[str] = (),
        *,
        plants_error: Optional[Exception] = None,
        sort_order_error: Optional[Exception] = None,
    ) -> None:
        self.plants = list(plants)
        self.sort_order = list(sort_order)
        self.plants_error = plants_error
        self.sort_order_error = sort_order_error
        self.sort_order_gate: Optional[asyncio.Event] = None
        self.calls: Counter[str] = Counter()

    async def all_plants(self) -> List[Plant]:
        self.calls["all_plants"] += 1
        if self.plants_error is not None:
            raise self.plants_error
        return list(self.plants)

    async def plants_by_grow_zone(self, grow_zone: GrowZone) -> List[Plant]:
        self.calls["plants_by_grow_zone"] += 1
        if self.plants_error is not None:
            raise self.plants_error
        return [plant for plant in self.plants if plant.grow_zone_number == grow_zone.number]

    async def custom_plant_sort_order(self) -> List[str]:
        self.calls["custom_plant_sort_order"] += 1
        if self.sort_order_gate is not None:
            await self.sort_order_gate.wait()
        if self.sort_order_error is not None:
            raise self.sort_order_error
        return list(self.sort_order)
