from __future__ import annotations

import logging
from dataclasses import dataclass

from src.domain.algorithms.arrival import calculate_arrival
from src.domain.algorithms.connected_finder import find_connected
from src.domain.algorithms.direct_finder import find_direct
from src.domain.models import Bus, PathLeg, SearchResult, TripResult
from src.domain.snapshot import TransitSnapshot

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TripSearchService:
    """Application service (use case) for finding buses between two stops.

    Direct buses are tried first; the connected search only runs when there
    are none. Both read the same snapshot and never modify it.
    """

    snapshot: TransitSnapshot

    def search(self, *, from_stop_id: int, to_stop_id: int) -> SearchResult:
        graph = self.snapshot.graph
        buses_by_route = self.snapshot.buses_by_route

        direct_buses = find_direct(graph, buses_by_route, from_stop_id, to_stop_id)
        if direct_buses:
            logger.debug(
                "%d direct buses from stop %s to stop %s",
                len(direct_buses),
                from_stop_id,
                to_stop_id,
            )
            return SearchResult(
                direct=tuple(
                    self._trip(bus, from_stop_id, to_stop_id) for bus in direct_buses
                )
            )

        path = find_connected(graph, buses_by_route, from_stop_id, to_stop_id)
        if not path.found:
            logger.debug("No connection from stop %s to stop %s", from_stop_id, to_stop_id)
            return SearchResult()

        # Each bus is timed over its own leg of the path.
        leg_by_route: dict[int, PathLeg] = {}
        for leg in path.legs:
            leg_by_route.setdefault(leg.route_id, leg)

        connected = tuple(
            self._trip(
                bus,
                leg_by_route[bus.route_id].from_stop_id,
                leg_by_route[bus.route_id].to_stop_id,
            )
            for bus in path.buses
        )

        return SearchResult(
            connected=connected,
            connected_route_ids=path.route_ids,
            connected_total_time=path.total_time,
        )

    def _trip(self, bus: Bus, board_stop_id: int, alight_stop_id: int) -> TripResult:
        return TripResult(
            bus=bus,
            route_name=self.snapshot.route_name(bus.route_id),
            departure_time=bus.departure_time,
            arrival_time=calculate_arrival(
                self.snapshot.graph, bus, board_stop_id, alight_stop_id
            ),
            board_stop_id=board_stop_id,
            alight_stop_id=alight_stop_id,
        )
