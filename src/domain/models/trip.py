from __future__ import annotations

from dataclasses import dataclass, field

from .bus import Bus

ARRIVAL_UNAVAILABLE = "N/A"


@dataclass(frozen=True, slots=True)
class PathLeg:
    """One BFS hop: ride `route_id` from one stop to another."""

    route_id: int
    from_stop_id: int
    to_stop_id: int
    minutes: float


@dataclass(frozen=True, slots=True)
class ConnectedPath:
    route_ids: tuple[int, ...] = ()
    buses: tuple[Bus, ...] = ()
    total_time: float | None = None
    legs: tuple[PathLeg, ...] = ()

    @property
    def found(self) -> bool:
        return self.total_time is not None


@dataclass(frozen=True, slots=True)
class TripResult:
    bus: Bus
    route_name: str | None
    departure_time: str
    arrival_time: str
    board_stop_id: int
    alight_stop_id: int


@dataclass(frozen=True, slots=True)
class SearchResult:
    direct: tuple[TripResult, ...] = field(default_factory=tuple)
    connected: tuple[TripResult, ...] = field(default_factory=tuple)
    connected_route_ids: tuple[int, ...] = ()
    connected_total_time: float | None = None

    @property
    def is_empty(self) -> bool:
        return not self.direct and not self.connected
