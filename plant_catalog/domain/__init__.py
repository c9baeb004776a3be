"""
Domain package for the plant catalog.

Exports the entities shared by the repository, the sorting helpers, and the
infrastructure adapters.
"""

from plant_catalog.domain.models import NO_GROW_ZONE, GrowZone, Plant

__all__ = [
    "GrowZone",
    "NO_GROW_ZONE",
    "Plant",
]
