from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Route:
    """A named corridor. Stop order lives on the RouteStop rows."""

    id: int
    name: str


@dataclass(frozen=True, slots=True)
class RouteStop:
    """Position of a stop along a route.

    `time_to_next` is the transit time in minutes to the stop with the next
    ascending order; it is unused on the last stop of a route.
    """

    route_id: int
    stop_id: int
    order: int
    time_to_next: float | None = None
