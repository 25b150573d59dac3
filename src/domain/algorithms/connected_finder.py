from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Mapping

from src.domain.algorithms.route_graph import RouteGraph
from src.domain.models import Bus, ConnectedPath, PathLeg


@dataclass(frozen=True, slots=True)
class _QueueEntry:
    stop_id: int
    path: tuple[PathLeg, ...]
    total_time: float

    def extend(self, route_id: int, stop_id: int, minutes: float) -> _QueueEntry:
        leg = PathLeg(
            route_id=route_id,
            from_stop_id=self.stop_id,
            to_stop_id=stop_id,
            minutes=minutes,
        )
        return _QueueEntry(
            stop_id=stop_id,
            path=self.path + (leg,),
            total_time=self.total_time + minutes,
        )


def find_connected(
    graph: RouteGraph,
    buses_by_route: Mapping[int, tuple[Bus, ...]],
    from_stop_id: int,
    to_stop_id: int,
) -> ConnectedPath:
    """Breadth-first search for a path of routes between two stops.

    A neighbour of a stop is every other stop on any route through it, so one
    hop may skip intermediate stops of the same route. Routes are explored in
    ascending id and their stops in ascending order; a stop is marked visited
    as soon as it is enqueued and is never reached by another path. The search
    ends on the first dequeue of the destination: fewest hops, with no promise
    of least time (`total_time` is the cumulative minutes of the path found).

    Buses are every bus on the traversed routes, not filtered by direction;
    arrival calculation reports "N/A" for pairings a bus does not run.
    """

    if from_stop_id == to_stop_id:
        return ConnectedPath(total_time=0.0)

    if not graph.is_reachable(from_stop_id, to_stop_id):
        return ConnectedPath()

    queue: deque[_QueueEntry] = deque(
        [_QueueEntry(stop_id=from_stop_id, path=(), total_time=0.0)]
    )
    visited: set[int] = {from_stop_id}

    while queue:
        entry = queue.popleft()
        if entry.stop_id == to_stop_id:
            return _to_connected_path(entry, buses_by_route)

        for route_id in graph.routes_through(entry.stop_id):
            for rs in graph.stops_on_route(route_id):
                if rs.stop_id in visited:
                    continue
                minutes = graph.span_minutes(route_id, entry.stop_id, rs.stop_id)
                if minutes is None:
                    continue
                visited.add(rs.stop_id)
                queue.append(entry.extend(route_id, rs.stop_id, minutes))

    return ConnectedPath()


def _to_connected_path(
    entry: _QueueEntry, buses_by_route: Mapping[int, tuple[Bus, ...]]
) -> ConnectedPath:
    route_ids = tuple(leg.route_id for leg in entry.path)
    buses = tuple(
        bus for route_id in route_ids for bus in buses_by_route.get(route_id, ())
    )
    return ConnectedPath(
        route_ids=route_ids,
        buses=buses,
        total_time=entry.total_time,
        legs=entry.path,
    )
