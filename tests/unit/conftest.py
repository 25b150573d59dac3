from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

import pytest

from src.app.ports.output import IWritableTransitDataStore
from src.domain.models import (
    Bus,
    Direction,
    Route,
    RouteStop,
    Stop,
    TransitCollections,
)
from src.domain.snapshot import TransitSnapshot

SnapshotFactory = Callable[..., TransitSnapshot]


def _build(
    *,
    stops: dict[int, str],
    routes: dict[int, str],
    route_stops: list[tuple[int, int, int, float | None]],
    buses: list[tuple[int, int, str, Direction]] | None = None,
) -> TransitSnapshot:
    """Build a snapshot from compact tuples.

    route_stops: (route_id, stop_id, order, time_to_next)
    buses: (bus_id, route_id, departure_time, direction)
    """

    return TransitSnapshot.build(
        TransitCollections(
            stops=tuple(Stop(id=i, name=n) for i, n in stops.items()),
            routes=tuple(Route(id=i, name=n) for i, n in routes.items()),
            route_stops=tuple(
                RouteStop(route_id=r, stop_id=s, order=o, time_to_next=t)
                for r, s, o, t in route_stops
            ),
            buses=tuple(
                Bus(
                    id=b,
                    route_id=r,
                    name=f"Bus {b}",
                    departure_time=t,
                    direction=d,
                )
                for b, r, t, d in buses or ()
            ),
        )
    )


@pytest.fixture
def snapshot_factory() -> SnapshotFactory:
    return _build


@pytest.fixture
def line_snapshot() -> TransitSnapshot:
    # A=1, B=2, C=3 on route 10; one Direct bus at 07:00.
    return _build(
        stops={1: "A", 2: "B", 3: "C"},
        routes={10: "Line 10"},
        route_stops=[(10, 1, 1, 15), (10, 2, 2, 10), (10, 3, 3, None)],
        buses=[(100, 10, "07:00", Direction.DIRECT)],
    )


@pytest.fixture
def transfer_snapshot() -> TransitSnapshot:
    # No route shares A=1 and D=4; A-B on route 1 (12 min), B-D on route 2 (8 min).
    return _build(
        stops={1: "A", 2: "B", 4: "D", 9: "Isolated"},
        routes={1: "Red", 2: "Blue"},
        route_stops=[
            (1, 1, 1, 12),
            (1, 2, 2, None),
            (2, 2, 1, 8),
            (2, 4, 2, None),
        ],
        buses=[
            (1, 1, "08:00", Direction.DIRECT),
            (2, 2, "08:30", Direction.DIRECT),
            (3, 2, "09:00", Direction.REVERSE),
        ],
    )


@dataclass
class InMemoryTransitDataStore(IWritableTransitDataStore):
    stops: list[Stop] = field(default_factory=list)
    routes: list[Route] = field(default_factory=list)
    route_stops: list[RouteStop] = field(default_factory=list)
    buses: list[Bus] = field(default_factory=list)

    async def list_stops(self):
        return tuple(self.stops)

    async def list_routes(self):
        return tuple(self.routes)

    async def list_route_stops(self):
        return tuple(self.route_stops)

    async def list_buses(self):
        return tuple(self.buses)

    async def put_stop(self, stop: Stop) -> None:
        self.stops.append(stop)

    async def put_route(self, route: Route) -> None:
        self.routes.append(route)

    async def put_route_stops(self, route_stops: Sequence[RouteStop]) -> None:
        self.route_stops.extend(route_stops)

    async def put_bus(self, bus: Bus) -> None:
        self.buses.append(bus)

    @staticmethod
    def _drop(items: list, match) -> bool:
        kept = [item for item in items if not match(item)]
        removed = len(kept) != len(items)
        items[:] = kept
        return removed

    async def delete_stop(self, stop_id: int) -> bool:
        return self._drop(self.stops, lambda s: s.id == stop_id)

    async def delete_route(self, route_id: int) -> bool:
        return self._drop(self.routes, lambda r: r.id == route_id)

    async def delete_route_stop(self, route_id: int, stop_id: int) -> bool:
        return self._drop(
            self.route_stops,
            lambda rs: rs.route_id == route_id and rs.stop_id == stop_id,
        )

    async def delete_bus(self, bus_id: int) -> bool:
        return self._drop(self.buses, lambda b: b.id == bus_id)


@pytest.fixture
def memory_store() -> InMemoryTransitDataStore:
    """Red route 1 over stops A=1 and B=2, plus unused stop C=3 and route 2."""

    return InMemoryTransitDataStore(
        stops=[Stop(id=1, name="A"), Stop(id=2, name="B"), Stop(id=3, name="C")],
        routes=[Route(id=1, name="Red"), Route(id=2, name="Empty")],
        route_stops=[
            RouteStop(route_id=1, stop_id=1, order=1, time_to_next=6),
            RouteStop(route_id=1, stop_id=2, order=2),
        ],
        buses=[
            Bus(
                id=4,
                route_id=1,
                name="Red 4",
                departure_time="07:30",
                direction=Direction.DIRECT,
            )
        ],
    )
