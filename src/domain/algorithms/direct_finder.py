from __future__ import annotations

from typing import Mapping

from src.domain.algorithms.route_graph import RouteGraph
from src.domain.models import Bus, Direction


def runs_between(bus: Bus, from_order: int, to_order: int) -> bool:
    """True if the bus passes `from_order` before `to_order`."""

    if bus.direction is Direction.DIRECT:
        return from_order < to_order
    return from_order > to_order


def find_direct(
    graph: RouteGraph,
    buses_by_route: Mapping[int, tuple[Bus, ...]],
    from_stop_id: int,
    to_stop_id: int,
) -> list[Bus]:
    """Every bus whose route visits both stops in its direction of travel.

    An empty list means "try the next strategy", it is not an error. Unknown
    stop ids simply produce no matches.
    """

    out: list[Bus] = []
    seen: set[int] = set()

    for from_rs in graph.route_stops_at(from_stop_id):
        for to_rs in graph.route_stops_at(to_stop_id):
            if from_rs.route_id != to_rs.route_id:
                continue
            for bus in buses_by_route.get(from_rs.route_id, ()):
                if bus.id in seen:
                    continue
                if runs_between(bus, from_rs.order, to_rs.order):
                    out.append(bus)
                    seen.add(bus.id)

    return out
