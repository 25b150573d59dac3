from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

import httpx

from src.adapters.records import (
    buses_from_rows,
    route_stops_from_rows,
    routes_from_rows,
    stops_from_rows,
)
from src.app.ports.output import ITransitDataStore
from src.domain.models import Bus, Route, RouteStop, Stop


@dataclass(slots=True)
class HttpTransitDataStore(ITransitDataStore):
    """Reads the network collections from the legacy REST API.

    Endpoints (relative to the base URL): /stops, /routes, /route_stops, /bus.
    Rows may use the legacy field names (stop_id, stop_name, stop_order, ...).

    Env vars:
      - TRANSIT_API_URL: base URL (default: http://localhost:3000/api)
      - TRANSIT_API_HEADERS: optional headers, as 'Key:Value;Key2:Value2'
      - TRANSIT_API_TIMEOUT_S: request timeout (default 10)

    Read-only: writes go through a writable store.
    """

    base_url: str | None = None
    headers_raw: str | None = None
    timeout_s: float = 10.0
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        if self.base_url is None:
            self.base_url = os.getenv("TRANSIT_API_URL", "http://localhost:3000/api")
        if self.headers_raw is None:
            self.headers_raw = os.getenv("TRANSIT_API_HEADERS")
        if os.getenv("TRANSIT_API_TIMEOUT_S"):
            self.timeout_s = float(os.environ["TRANSIT_API_TIMEOUT_S"])

    def _headers(self) -> dict[str, str]:
        raw = (self.headers_raw or "").strip()
        if not raw:
            return {}
        headers: dict[str, str] = {}
        for part in raw.split(";"):
            part = part.strip()
            if ":" not in part:
                continue
            k, v = part.split(":", 1)
            k = k.strip()
            if k:
                headers[k] = v.strip()
        return headers

    async def _get_rows(self, path: str) -> list[Any]:
        url = f"{(self.base_url or '').rstrip('/')}/{path}"
        async with httpx.AsyncClient(
            timeout=self.timeout_s, transport=self.transport
        ) as client:
            resp = await client.get(url, headers=self._headers())
            resp.raise_for_status()
            data = resp.json()
        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON array from {url}")
        return data

    async def list_stops(self) -> tuple[Stop, ...]:
        return stops_from_rows(await self._get_rows("stops"))

    async def list_routes(self) -> tuple[Route, ...]:
        return routes_from_rows(await self._get_rows("routes"))

    async def list_route_stops(self) -> tuple[RouteStop, ...]:
        return route_stops_from_rows(await self._get_rows("route_stops"))

    async def list_buses(self) -> tuple[Bus, ...]:
        return buses_from_rows(await self._get_rows("bus"))
