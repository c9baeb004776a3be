"""
Single-flight, memoizing cache for one asynchronously produced value.

`CacheOnSuccess` runs its fetch coroutine at most once at a time, no matter how
many callers ask for the value concurrently: the first caller starts a shared
task and every other caller awaits that same task. Once the fetch settles the
value is stored and later calls return it without awaiting anything.

Failure handling:
- With `on_error_fallback` configured, a failed fetch is logged and every
  waiter receives the fallback. By default the fallback becomes the cached
  value for the lifetime of the instance; with `cache_failures=False` the cache
  drops back to EMPTY so the next caller triggers a fresh fetch.
- Without a fallback the fetch exception reaches every waiter and the cache
  drops back to EMPTY.

Cancellation and timeouts never reach the shared task: each waiter awaits it
through `asyncio.shield`, so a cancelled or timed-out waiter leaves the fetch
running for everyone else. A timed-out waiter receives the fallback for that
call only.

Usage:
    cache = CacheOnSuccess(service.custom_plant_sort_order, on_error_fallback=list)
    order = await cache.get_or_await()
"""

from __future__ import annotations

import asyncio
import enum
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from plant_catalog.exceptions import CacheNotResolvedError
from plant_catalog.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")

_MISSING = object()


class CacheState(str, enum.Enum):
    EMPTY = "empty"
    PENDING = "pending"
    RESOLVED = "resolved"


class CacheOnSuccess(Generic[T]):
    """
    Memoize the result of `fetch`, collapsing concurrent requests into one call.

    Parameters
    ----------
    fetch : Callable[[], Awaitable[T]]
        Coroutine function producing the value. May fail.
    on_error_fallback : Callable[[], T] | None
        Synchronous factory for the value handed out when `fetch` fails or a
        waiter times out.
    wait_timeout : float | None
        Seconds a single caller waits for a pending fetch before falling back.
    cache_failures : bool
        Whether a fallback produced by a failed fetch is memoized.
    name : str
        Label used in log records.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[T]],
        on_error_fallback: Optional[Callable[[], T]] = None,
        *,
        wait_timeout: Optional[float] = None,
        cache_failures: bool = True,
        name: str = "cache",
    ) -> None:
        if wait_timeout is not None and wait_timeout <= 0:
            raise ValueError("wait_timeout must be positive")
        if wait_timeout is not None and on_error_fallback is None:
            raise ValueError("wait_timeout requires on_error_fallback")
        self._fetch = fetch
        self._on_error_fallback = on_error_fallback
        self.wait_timeout = wait_timeout
        self.cache_failures = cache_failures
        self.name = name

        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task[T]] = None
        self._value: object = _MISSING
        self.fetch_count = 0

    @property
    def state(self) -> CacheState:
        if self._value is not _MISSING:
            return CacheState.RESOLVED
        if self._task is not None:
            return CacheState.PENDING
        return CacheState.EMPTY

    @property
    def value(self) -> T:
        """The resolved value; raises `CacheNotResolvedError` before resolution."""
        if self._value is _MISSING:
            raise CacheNotResolvedError(f"{self.name} has not resolved yet")
        return self._value  # type: ignore[return-value]

    async def get_or_await(self) -> T:
        """
        Return the cached value, starting or joining the shared fetch if needed.
        """
        # Fast path: resolved values are never replaced.
        if self._value is not _MISSING:
            return self._value  # type: ignore[return-value]

        async with self._lock:
            if self._value is not _MISSING:
                return self._value  # type: ignore[return-value]
            if self._task is None:
                self._task = asyncio.create_task(self._run(), name=f"{self.name}-fetch")
                log.debug("Started shared fetch", extra={"cache": self.name})
            task = self._task

        if self.wait_timeout is None:
            return await asyncio.shield(task)
        try:
            return await asyncio.wait_for(asyncio.shield(task), self.wait_timeout)
        except asyncio.TimeoutError:
            log.warning(
                "Timed out waiting for shared fetch; using fallback",
                extra={"cache": self.name, "timeout": self.wait_timeout},
            )
            return self._on_error_fallback()  # type: ignore[misc]

    async def _run(self) -> T:
        self.fetch_count += 1
        try:
            value = await self._fetch()
        except asyncio.CancelledError:
            self._task = None
            raise
        except Exception:
            if self._on_error_fallback is None:
                self._task = None
                log.warning("Shared fetch failed", extra={"cache": self.name}, exc_info=True)
                raise
            try:
                fallback = self._on_error_fallback()
            finally:
                self._task = None
            log.warning(
                "Shared fetch failed; using fallback",
                extra={"cache": self.name, "cached": self.cache_failures},
                exc_info=True,
            )
            if self.cache_failures:
                self._value = fallback
            return fallback

        self._value = value
        self._task = None
        log.debug("Shared fetch resolved", extra={"cache": self.name})
        return value


__all__ = ["CacheOnSuccess", "CacheState"]
