"""
Custom sort applied to plant lists before they reach the UI layer.

Plants are ranked by the position of their id in the remote sort-order list;
plants missing from that list sink to the end. Ties (in practice, every
unranked plant) are broken by name. `sorted` is stable, so plants with equal
rank and name keep their input order.
"""

from __future__ import annotations

import sys
from typing import Dict, Iterable, List, Mapping, NamedTuple, Sequence

from plant_catalog.domain.models import Plant
from plant_catalog.utils.logging import get_logger

log = get_logger(__name__)

UNRANKED = sys.maxsize


class RankKey(NamedTuple):
    position: int
    name: str


def sort_positions(custom_sort_order: Sequence[str]) -> Dict[str, int]:
    """Map each plant id to the index of its first occurrence in the order list."""
    positions: Dict[str, int] = {}
    for index, plant_id in enumerate(custom_sort_order):
        positions.setdefault(plant_id, index)
    return positions


def rank_key(plant: Plant, positions: Mapping[str, int]) -> RankKey:
    return RankKey(positions.get(plant.plant_id, UNRANKED), plant.name)


def apply_sort(plants: Iterable[Plant], custom_sort_order: Sequence[str]) -> List[Plant]:
    """
    Return a new list of `plants` ordered by `custom_sort_order`, then by name.

    Neither argument is modified. Empty inputs yield an empty or purely
    name-sorted result.
    """
    positions = sort_positions(custom_sort_order)
    result = sorted(plants, key=lambda plant: rank_key(plant, positions))
    log.debug(
        "Applied custom sort",
        extra={"plants": len(result), "ranked_ids": len(positions)},
    )
    return result


__all__ = ["RankKey", "UNRANKED", "apply_sort", "rank_key", "sort_positions"]
