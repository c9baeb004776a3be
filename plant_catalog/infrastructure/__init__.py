"""
Infrastructure package for the plant catalog.

Concrete adapters for the repository's collaborators: the Postgres plant store
and the HTTP plant service. Keep this layer focused on I/O and resource
management, decoupled from sorting and caching logic.
"""

from plant_catalog.infrastructure.db_factory import build_dsn, open_async_pool
from plant_catalog.infrastructure.network import HttpNetworkService
from plant_catalog.infrastructure.plant_dao import PostgresPlantDao

__all__ = [
    "HttpNetworkService",
    "PostgresPlantDao",
    "build_dsn",
    "open_async_pool",
]
