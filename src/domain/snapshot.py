from __future__ import annotations

from dataclasses import dataclass

from src.domain.algorithms.route_graph import RouteGraph
from src.domain.models import Bus, Route, Stop, TransitCollections


@dataclass(frozen=True, slots=True)
class TransitSnapshot:
    """Read-only, indexed view of one complete fetch of the network."""

    collections: TransitCollections
    stops_by_id: dict[int, Stop]
    routes_by_id: dict[int, Route]
    buses_by_route: dict[int, tuple[Bus, ...]]
    graph: RouteGraph

    @classmethod
    def build(cls, collections: TransitCollections) -> TransitSnapshot:
        buses_by_route: dict[int, list[Bus]] = {}
        for bus in collections.buses:
            buses_by_route.setdefault(bus.route_id, []).append(bus)

        return cls(
            collections=collections,
            stops_by_id={s.id: s for s in collections.stops},
            routes_by_id={r.id: r for r in collections.routes},
            buses_by_route={k: tuple(v) for k, v in buses_by_route.items()},
            graph=RouteGraph.build(collections.route_stops),
        )

    def route_name(self, route_id: int) -> str | None:
        route = self.routes_by_id.get(route_id)
        return route.name if route else None
