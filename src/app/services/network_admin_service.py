from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from src.app.ports.output import IWritableTransitDataStore
from src.app.services.snapshot_loader import TransitSession
from src.domain.algorithms.clock import format_time_from_minutes, parse_time_to_minutes
from src.domain.exceptions import EntityConflict, EntityNotFound, InvalidNetworkData
from src.domain.models import Bus, Direction, Route, RouteStop, Stop

logger = logging.getLogger(__name__)


def _next_id(ids: Iterable[int]) -> int:
    return max(ids, default=0) + 1


def _required_name(value: str, what: str) -> str:
    name = (value or "").strip()
    if not name:
        raise InvalidNetworkData(f"A {what} name is required")
    return name


@dataclass(slots=True)
class NetworkAdminService:
    """Create/delete operations on the network collections.

    Stop and bus ids are allocated as the current maximum plus one; route ids
    are chosen by the caller. Writes run one at a time so id allocation and
    the referential checks see a consistent store. Every successful write
    invalidates the session snapshot so the next search sees the change.
    """

    data_store: IWritableTransitDataStore
    session: TransitSession | None = None

    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    async def add_stop(self, *, name: str) -> Stop:
        stop_name = _required_name(name, "stop")
        async with self._lock:
            stops = await self.data_store.list_stops()
            stop = Stop(id=_next_id(s.id for s in stops), name=stop_name)
            await self.data_store.put_stop(stop)
            await self._changed("Added stop %s (%s)", stop.id, stop.name)
        return stop

    async def add_route(self, *, route_id: int, name: str) -> Route:
        if route_id < 1:
            raise InvalidNetworkData("Route id must be a positive integer")
        route = Route(id=route_id, name=_required_name(name, "route"))

        async with self._lock:
            routes = await self.data_store.list_routes()
            if any(r.id == route_id for r in routes):
                raise EntityConflict(f"Route {route_id} already exists")

            await self.data_store.put_route(route)
            await self._changed("Added route %s (%s)", route.id, route.name)
        return route

    async def add_route_stops(self, rows: Sequence[RouteStop]) -> int:
        """Add route stops, skipping `(route_id, stop_id)` pairs already present.

        A stop order already taken on its route is a conflict, and each
        route's orders must still run 1..n once the batch is added.
        Returns the number of rows actually inserted.
        """

        if not rows:
            raise InvalidNetworkData("At least one route stop is required")
        for rs in rows:
            if rs.order < 1:
                raise InvalidNetworkData("Stop order must start at 1")
            if rs.time_to_next is not None and rs.time_to_next < 0:
                raise InvalidNetworkData("Time to next stop cannot be negative")

        async with self._lock:
            fresh = await self._fresh_route_stops(rows)
            if fresh:
                await self.data_store.put_route_stops(fresh)
                await self._changed("Added %d route stops", len(fresh))
        return len(fresh)

    async def _fresh_route_stops(self, rows: Sequence[RouteStop]) -> list[RouteStop]:
        route_ids = {r.id for r in await self.data_store.list_routes()}
        stop_ids = {s.id for s in await self.data_store.list_stops()}
        current = await self.data_store.list_route_stops()
        existing = {(rs.route_id, rs.stop_id) for rs in current}
        orders: dict[int, set[int]] = {}
        for rs in current:
            orders.setdefault(rs.route_id, set()).add(rs.order)

        fresh: list[RouteStop] = []
        for rs in rows:
            if rs.route_id not in route_ids:
                raise EntityNotFound(f"Route {rs.route_id} not found")
            if rs.stop_id not in stop_ids:
                raise EntityNotFound(f"Stop {rs.stop_id} not found")

            key = (rs.route_id, rs.stop_id)
            if key in existing:
                continue
            route_orders = orders.setdefault(rs.route_id, set())
            if rs.order in route_orders:
                raise EntityConflict(
                    f"Route {rs.route_id} already has a stop at order {rs.order}"
                )
            route_orders.add(rs.order)
            existing.add(key)
            fresh.append(rs)

        # Orders are distinct and >= 1, so max == count means exactly 1..n.
        for route_id in sorted({rs.route_id for rs in fresh}):
            if max(orders[route_id]) != len(orders[route_id]):
                raise InvalidNetworkData(
                    f"Stop orders on route {route_id} must run from 1 without gaps"
                )
        return fresh

    async def add_bus(
        self, *, name: str, route_id: int, departure_time: str, direction: Direction
    ) -> Bus:
        bus_name = _required_name(name, "bus")
        try:
            minutes = parse_time_to_minutes(departure_time)
        except (AttributeError, ValueError) as exc:
            raise InvalidNetworkData(
                f"Departure time must be HH:MM, got {departure_time!r}"
            ) from exc
        if minutes >= 24 * 60:
            raise InvalidNetworkData(f"Departure time out of range: {departure_time!r}")

        async with self._lock:
            routes = await self.data_store.list_routes()
            if not any(r.id == route_id for r in routes):
                raise EntityNotFound(f"Route {route_id} not found")

            buses = await self.data_store.list_buses()
            bus = Bus(
                id=_next_id(b.id for b in buses),
                route_id=route_id,
                name=bus_name,
                departure_time=format_time_from_minutes(minutes),
                direction=Direction(direction),
            )
            await self.data_store.put_bus(bus)
            await self._changed("Added bus %s on route %s", bus.id, bus.route_id)
        return bus

    async def delete_stop(self, stop_id: int) -> None:
        async with self._lock:
            route_stops = await self.data_store.list_route_stops()
            if any(rs.stop_id == stop_id for rs in route_stops):
                raise EntityConflict(f"Stop {stop_id} is still served by a route")
            if not await self.data_store.delete_stop(stop_id):
                raise EntityNotFound(f"Stop {stop_id} not found")
            await self._changed("Deleted stop %s", stop_id)

    async def delete_route(self, route_id: int) -> None:
        async with self._lock:
            route_stops = await self.data_store.list_route_stops()
            if any(rs.route_id == route_id for rs in route_stops):
                raise EntityConflict(f"Route {route_id} has associated stops")
            buses = await self.data_store.list_buses()
            if any(b.route_id == route_id for b in buses):
                raise EntityConflict(f"Route {route_id} has scheduled buses")
            if not await self.data_store.delete_route(route_id):
                raise EntityNotFound(f"Route {route_id} not found")
            await self._changed("Deleted route %s", route_id)

    async def delete_route_stop(self, route_id: int, stop_id: int) -> None:
        async with self._lock:
            if not await self.data_store.delete_route_stop(route_id, stop_id):
                raise EntityNotFound(f"Stop {stop_id} is not on route {route_id}")
            await self._changed("Deleted stop %s from route %s", stop_id, route_id)

    async def delete_bus(self, bus_id: int) -> None:
        async with self._lock:
            if not await self.data_store.delete_bus(bus_id):
                raise EntityNotFound(f"Bus {bus_id} not found")
            await self._changed("Deleted bus %s", bus_id)

    async def _changed(self, msg: str, *args: object) -> None:
        logger.info(msg, *args)
        if self.session is not None:
            await self.session.invalidate()
