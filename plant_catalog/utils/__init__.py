"""
Utilities package for the plant catalog.

Exports shared helpers for logging, single-flight caching, and observable
values. Keep this package free of plant-specific logic.
"""

from plant_catalog.utils.cache import CacheOnSuccess, CacheState
from plant_catalog.utils.logging import configure_logging, get_logger
from plant_catalog.utils.observable import MutableObservable, Observable, Subscription

__all__ = [
    "CacheOnSuccess",
    "CacheState",
    "configure_logging",
    "get_logger",
    "MutableObservable",
    "Observable",
    "Subscription",
]
