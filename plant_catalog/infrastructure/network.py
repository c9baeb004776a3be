"""
HTTP client for the remote plant service.

The service publishes two static JSON documents: the full plant list and the
custom sort order (a list of objects carrying a `plantId`). Grow-zone
filtering happens client-side since the service has no query endpoint.

Transient transport errors are retried with tenacity; HTTP error statuses and
malformed payloads raise `NetworkServiceError` immediately.
"""

from __future__ import annotations

from typing import Any, List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from plant_catalog.config import Settings, get_settings
from plant_catalog.domain.models import GrowZone, Plant
from plant_catalog.exceptions import NetworkServiceError
from plant_catalog.utils.logging import get_logger

log = get_logger(__name__)

_PLANT_LIST = TypeAdapter(List[Plant])


def parse_plants(payload: Any) -> List[Plant]:
    try:
        return _PLANT_LIST.validate_python(payload)
    except ValidationError as exc:
        raise NetworkServiceError(f"Malformed plant list: {exc.error_count()} error(s)") from exc


def parse_sort_order(payload: Any) -> List[str]:
    """Extract plant ids from the sort-order document; bare id strings are accepted too."""
    if not isinstance(payload, list):
        raise NetworkServiceError("Malformed sort order: expected a JSON array")
    order: List[str] = []
    for item in payload:
        if isinstance(item, str):
            order.append(item)
        elif isinstance(item, dict) and isinstance(item.get("plantId"), str):
            order.append(item["plantId"])
        else:
            raise NetworkServiceError(f"Malformed sort order entry: {item!r}")
    return order


class HttpNetworkService:
    """
    `NetworkService` backed by `httpx.AsyncClient`.

    Pass `client` to inject a preconfigured client (tests use
    `httpx.MockTransport`); an injected client is not closed by `aclose`.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self._settings.plants_base_url,
            timeout=self._settings.network_timeout_seconds,
        )

    async def __aenter__(self) -> "HttpNetworkService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def all_plants(self) -> List[Plant]:
        plants = parse_plants(await self._get_json(self._settings.plants_path))
        log.debug("Fetched plants", extra={"plants": len(plants)})
        return plants

    async def plants_by_grow_zone(self, grow_zone: GrowZone) -> List[Plant]:
        plants = await self.all_plants()
        return [plant for plant in plants if plant.grow_zone_number == grow_zone.number]

    async def custom_plant_sort_order(self) -> List[str]:
        order = parse_sort_order(await self._get_json(self._settings.sort_order_path))
        log.debug("Fetched custom sort order", extra={"size": len(order)})
        return order

    async def _get_json(self, path: str) -> Any:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._settings.network_retry_attempts),
            wait=wait_exponential(multiplier=self._settings.network_retry_backoff_seconds, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    log.info(
                        "Retrying request",
                        extra={"path": path, "attempt": attempt.retry_state.attempt_number},
                    )
                response = await self._client.get(path)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NetworkServiceError(
                f"GET {path} failed with status {exc.response.status_code}"
            ) from exc
        try:
            return response.json()
        except ValueError as exc:
            raise NetworkServiceError(f"GET {path} returned invalid JSON") from exc


__all__ = ["HttpNetworkService", "parse_plants", "parse_sort_order"]
