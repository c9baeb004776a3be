"""
Plant catalog - custom-sorted, store-backed plant lists.

This package keeps a local store of plants in sync with a remote plant service
and exposes observable plant lists ordered by a remotely published sort order:

- A single-flight cache that fetches the sort order once and falls back to an
  empty order when the service is unreachable
- A deterministic sort: rank in the custom order first, then name
- Refresh operations that pull plants from the network into the store
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from plant_catalog.config import Settings, get_settings
from plant_catalog.domain.models import NO_GROW_ZONE, GrowZone, Plant
from plant_catalog.exceptions import PlantCatalogError, RefreshError
from plant_catalog.repository import PlantRepository, always_refresh
from plant_catalog.sorting import apply_sort
from plant_catalog.utils.cache import CacheOnSuccess, CacheState
from plant_catalog.utils.logging import configure_logging, get_logger
from plant_catalog.utils.observable import MutableObservable, Observable

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "GrowZone",
    "NO_GROW_ZONE",
    "Plant",
    # Repository
    "PlantRepository",
    "always_refresh",
    "apply_sort",
    # Errors
    "PlantCatalogError",
    "RefreshError",
    # Caching and observation
    "CacheOnSuccess",
    "CacheState",
    "MutableObservable",
    "Observable",
    # Logging
    "configure_logging",
    "get_logger",
]
