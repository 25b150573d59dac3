from __future__ import annotations

from src.domain.algorithms.clock import format_time_from_minutes, parse_time_to_minutes
from src.domain.algorithms.route_graph import RouteGraph
from src.domain.models import ARRIVAL_UNAVAILABLE, Bus, Direction


def calculate_arrival(
    graph: RouteGraph, bus: Bus, from_stop_id: int, to_stop_id: int
) -> str:
    """Clock time ("HH:MM") at which `bus` reaches `to_stop_id`, or "N/A".

    Walks the segments between the two stops in the bus's direction and adds
    their `time_to_next` to the scheduled departure. Any unresolvable piece
    (stop not on the route, malformed departure, missing segment time, a
    pairing the bus never runs) yields "N/A" rather than a partial estimate.
    """

    from_order = graph.order_of(bus.route_id, from_stop_id)
    to_order = graph.order_of(bus.route_id, to_stop_id)
    if from_order is None or to_order is None:
        return ARRIVAL_UNAVAILABLE

    try:
        start = parse_time_to_minutes(bus.departure_time)
    except ValueError:
        return ARRIVAL_UNAVAILABLE

    if bus.direction is Direction.DIRECT:
        if from_order > to_order:
            return ARRIVAL_UNAVAILABLE
        orders = range(from_order, to_order)
    else:
        if from_order < to_order:
            return ARRIVAL_UNAVAILABLE
        orders = range(from_order, to_order, -1)

    travel = 0.0
    for order in orders:
        rs = graph.stop_at(bus.route_id, order)
        if rs is None or rs.time_to_next is None:
            return ARRIVAL_UNAVAILABLE
        travel += rs.time_to_next

    return format_time_from_minutes(start + travel)
