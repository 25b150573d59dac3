from __future__ import annotations

from dataclasses import dataclass

from .bus import Bus
from .route import Route, RouteStop
from .stop import Stop


@dataclass(frozen=True, slots=True)
class TransitCollections:
    """The four network collections exactly as fetched from a data store."""

    stops: tuple[Stop, ...] = ()
    routes: tuple[Route, ...] = ()
    route_stops: tuple[RouteStop, ...] = ()
    buses: tuple[Bus, ...] = ()
