from __future__ import annotations

import asyncio
import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Sequence

from src.adapters.records import (
    buses_from_rows,
    route_stops_from_rows,
    routes_from_rows,
    stops_from_rows,
    to_row,
)
from src.app.ports.output import IWritableTransitDataStore
from src.domain.models import Bus, Route, RouteStop, Stop

STOPS_FILE = "stops.json"
ROUTES_FILE = "routes.json"
ROUTE_STOPS_FILE = "route_stops.json"
BUSES_FILE = "buses.json"


@dataclass(slots=True)
class LocalJsonTransitDataStore(IWritableTransitDataStore):
    """Keeps the network collections as JSON arrays in a directory.

    Env vars:
      - TRANSIT_DATA_PATH: directory with stops.json, routes.json,
        route_stops.json and buses.json (default: data/transit)

    Reads fail if a file is missing; writes treat a missing file as empty and
    replace the whole file atomically.
    """

    base_path: str | Path | None = None

    _write_lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, init=False, repr=False
    )

    def _base(self) -> Path:
        value = self.base_path or os.getenv("TRANSIT_DATA_PATH") or "data/transit"
        return Path(value)

    def _read_rows(self, filename: str, *, missing_ok: bool = False) -> list[Any]:
        path = self._base() / filename
        if missing_ok and not path.exists():
            return []
        with path.open("r", encoding="utf-8") as fp:
            data = json.load(fp)
        if not isinstance(data, list):
            raise ValueError(f"{path} must contain a JSON array")
        return data

    def _write_rows(self, filename: str, rows: list[dict[str, Any]]) -> None:
        base = self._base()
        base.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=base, suffix=".tmp", delete=False
        ) as fp:
            json.dump(rows, fp, indent=2)
            tmp_name = fp.name
        os.replace(tmp_name, base / filename)

    async def _read(self, filename: str, *, missing_ok: bool = False) -> list[Any]:
        return await asyncio.to_thread(self._read_rows, filename, missing_ok=missing_ok)

    async def list_stops(self) -> tuple[Stop, ...]:
        return stops_from_rows(await self._read(STOPS_FILE))

    async def list_routes(self) -> tuple[Route, ...]:
        return routes_from_rows(await self._read(ROUTES_FILE))

    async def list_route_stops(self) -> tuple[RouteStop, ...]:
        return route_stops_from_rows(await self._read(ROUTE_STOPS_FILE))

    async def list_buses(self) -> tuple[Bus, ...]:
        return buses_from_rows(await self._read(BUSES_FILE))

    async def _append(self, filename: str, items: Sequence[Any]) -> None:
        async with self._write_lock:
            rows = await self._read(filename, missing_ok=True)
            rows.extend(to_row(item) for item in items)
            await asyncio.to_thread(self._write_rows, filename, rows)

    async def _remove(
        self, filename: str, parse: Callable[[list[Any]], tuple[Any, ...]], match
    ) -> bool:
        async with self._write_lock:
            items = parse(await self._read(filename, missing_ok=True))
            kept = [to_row(item) for item in items if not match(item)]
            if len(kept) == len(items):
                return False
            await asyncio.to_thread(self._write_rows, filename, kept)
            return True

    async def put_stop(self, stop: Stop) -> None:
        await self._append(STOPS_FILE, [stop])

    async def put_route(self, route: Route) -> None:
        await self._append(ROUTES_FILE, [route])

    async def put_route_stops(self, route_stops: Sequence[RouteStop]) -> None:
        await self._append(ROUTE_STOPS_FILE, route_stops)

    async def put_bus(self, bus: Bus) -> None:
        await self._append(BUSES_FILE, [bus])

    async def delete_stop(self, stop_id: int) -> bool:
        return await self._remove(STOPS_FILE, stops_from_rows, lambda s: s.id == stop_id)

    async def delete_route(self, route_id: int) -> bool:
        return await self._remove(
            ROUTES_FILE, routes_from_rows, lambda r: r.id == route_id
        )

    async def delete_route_stop(self, route_id: int, stop_id: int) -> bool:
        return await self._remove(
            ROUTE_STOPS_FILE,
            route_stops_from_rows,
            lambda rs: rs.route_id == route_id and rs.stop_id == stop_id,
        )

    async def delete_bus(self, bus_id: int) -> bool:
        return await self._remove(BUSES_FILE, buses_from_rows, lambda b: b.id == bus_id)
