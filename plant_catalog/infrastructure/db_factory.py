"""
Database connection helpers for the plant catalog.

Builds the Postgres DSN from settings and opens the async connection pool used
by `PostgresPlantDao`. The pool is owned by whoever opens it (normally
`plant_catalog.container.create_app_context`), which is also responsible for
closing it.

Opening the pool retries transient connection failures using tenacity.
"""

from __future__ import annotations

from typing import Optional

import psycopg
from psycopg_pool import AsyncConnectionPool, PoolTimeout
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from plant_catalog.config import Settings, get_settings
from plant_catalog.utils.logging import get_logger

log = get_logger(__name__)

POOL_OPEN_TIMEOUT_SECONDS = 10.0


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, PoolTimeout)),
    reraise=True,
)
async def open_async_pool(
    settings: Optional[Settings] = None, dsn_override: Optional[str] = None
) -> AsyncConnectionPool:
    """
    Open an asynchronous connection pool and wait until it holds `min_size` connections.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Raises
    ------
    psycopg_pool.PoolTimeout
        If the pool cannot be filled after all retry attempts.
    """
    settings = settings or get_settings()
    pool = AsyncConnectionPool(
        conninfo=dsn_override or build_dsn(settings),
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        open=False,
    )
    try:
        await pool.open(wait=True, timeout=POOL_OPEN_TIMEOUT_SECONDS)
    except BaseException:
        await pool.close()
        raise
    log.info(
        "Connection pool opened",
        extra={"db_host": settings.db_host, "db_name": settings.db_name},
    )
    return pool


__all__ = ["POOL_OPEN_TIMEOUT_SECONDS", "build_dsn", "open_async_pool"]
