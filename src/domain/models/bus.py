from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(str, Enum):
    DIRECT = "Direct"
    REVERSE = "Reverse"


@dataclass(frozen=True, slots=True)
class Bus:
    """A scheduled trip on a route.

    `departure_time` ("HH:MM") is the time the bus leaves the first stop of its
    traversal: order 1 for Direct, the highest order for Reverse.
    """

    id: int
    route_id: int
    name: str
    departure_time: str
    direction: Direction
