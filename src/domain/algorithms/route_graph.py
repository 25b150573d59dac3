from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import combinations
from typing import Iterable

import networkx as nx

from src.domain.models import RouteStop

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RouteGraph:
    """Index over RouteStop rows, built once per snapshot.

    - `stop_index`: routes passing through each stop.
    - `route_order`: each route's stops sorted by ascending order.
    - `stop_graph`: MultiGraph over stop ids with one edge per route for every
      pair of stops sharing it (keyed by route id, `minutes` = cumulative
      segment time between the two stops).
    """

    stop_index: dict[int, frozenset[int]]
    route_order: dict[int, tuple[RouteStop, ...]]
    stop_graph: nx.MultiGraph
    by_route_stop: dict[tuple[int, int], RouteStop]
    by_route_order: dict[tuple[int, int], RouteStop]
    offset_minutes: dict[tuple[int, int], float]

    @classmethod
    def build(cls, route_stops: Iterable[RouteStop]) -> RouteGraph:
        rows_by_route: dict[int, list[RouteStop]] = {}
        seen: set[tuple[int, int]] = set()
        for rs in route_stops:
            key = (rs.route_id, rs.stop_id)
            if key in seen:
                logger.warning(
                    "Duplicate stop %s on route %s; keeping first occurrence",
                    rs.stop_id,
                    rs.route_id,
                )
                continue
            seen.add(key)
            rows_by_route.setdefault(rs.route_id, []).append(rs)

        route_order: dict[int, tuple[RouteStop, ...]] = {}
        stop_routes: dict[int, set[int]] = {}
        by_route_stop: dict[tuple[int, int], RouteStop] = {}
        by_route_order: dict[tuple[int, int], RouteStop] = {}
        offset_minutes: dict[tuple[int, int], float] = {}
        graph = nx.MultiGraph()

        for route_id in sorted(rows_by_route):
            rows = tuple(sorted(rows_by_route[route_id], key=lambda rs: rs.order))
            orders = [rs.order for rs in rows]
            if orders != list(range(1, len(rows) + 1)):
                logger.warning(
                    "Route %s has non-contiguous stop orders: %s", route_id, orders
                )
            route_order[route_id] = rows

            elapsed = 0.0
            for rs in rows:
                stop_routes.setdefault(rs.stop_id, set()).add(route_id)
                by_route_stop[(route_id, rs.stop_id)] = rs
                by_route_order.setdefault((route_id, rs.order), rs)
                offset_minutes[(route_id, rs.stop_id)] = elapsed
                # Search weights treat a missing segment time as zero.
                elapsed += float(rs.time_to_next or 0)
                graph.add_node(rs.stop_id)

            for a, b in combinations(rows, 2):
                minutes = (
                    offset_minutes[(route_id, b.stop_id)]
                    - offset_minutes[(route_id, a.stop_id)]
                )
                graph.add_edge(a.stop_id, b.stop_id, key=route_id, minutes=minutes)

        logger.debug(
            "Built route graph: %d routes, %d stops, %d edges",
            len(route_order),
            graph.number_of_nodes(),
            graph.number_of_edges(),
        )

        return cls(
            stop_index={s: frozenset(r) for s, r in stop_routes.items()},
            route_order=route_order,
            stop_graph=graph,
            by_route_stop=by_route_stop,
            by_route_order=by_route_order,
            offset_minutes=offset_minutes,
        )

    def has_stop(self, stop_id: int) -> bool:
        return stop_id in self.stop_index

    def routes_through(self, stop_id: int) -> tuple[int, ...]:
        return tuple(sorted(self.stop_index.get(stop_id, frozenset())))

    def stops_on_route(self, route_id: int) -> tuple[RouteStop, ...]:
        return self.route_order.get(route_id, ())

    def route_stops_at(self, stop_id: int) -> list[RouteStop]:
        """RouteStop rows at a stop, by ascending route id."""

        return [
            self.by_route_stop[(route_id, stop_id)]
            for route_id in self.routes_through(stop_id)
        ]

    def route_stop(self, route_id: int, stop_id: int) -> RouteStop | None:
        return self.by_route_stop.get((route_id, stop_id))

    def order_of(self, route_id: int, stop_id: int) -> int | None:
        rs = self.by_route_stop.get((route_id, stop_id))
        return rs.order if rs else None

    def stop_at(self, route_id: int, order: int) -> RouteStop | None:
        return self.by_route_order.get((route_id, order))

    def span_minutes(self, route_id: int, a: int, b: int) -> float | None:
        """Cumulative segment time between two stops of a route, in either direction."""

        start = self.offset_minutes.get((route_id, a))
        end = self.offset_minutes.get((route_id, b))
        if start is None or end is None:
            return None
        return abs(end - start)

    def is_reachable(self, from_stop_id: int, to_stop_id: int) -> bool:
        if from_stop_id not in self.stop_graph or to_stop_id not in self.stop_graph:
            return False
        return nx.has_path(self.stop_graph, from_stop_id, to_stop_id)
