"""Test doubles for the plant store and the remote plant service."""

from __future__ import annotations

from plant_catalog.domain.models import Plant


def make_plant(plant_id: str, name: str, grow_zone_number: int = 1, **fields) -> Plant:
    return Plant(plant_id=plant_id, name=name, grow_zone_number=grow_zone_number, **fields)
