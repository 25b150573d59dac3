from .bus import Bus, Direction
from .collections import TransitCollections
from .route import Route, RouteStop
from .stop import Stop
from .trip import (
    ARRIVAL_UNAVAILABLE,
    ConnectedPath,
    PathLeg,
    SearchResult,
    TripResult,
)

__all__ = [
    "ARRIVAL_UNAVAILABLE",
    "Bus",
    "ConnectedPath",
    "Direction",
    "PathLeg",
    "Route",
    "RouteStop",
    "SearchResult",
    "Stop",
    "TransitCollections",
    "TripResult",
]
