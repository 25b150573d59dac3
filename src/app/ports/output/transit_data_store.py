from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from src.domain.models import Bus, Route, RouteStop, Stop


class ITransitDataStore(ABC):
    """Port for reading the four network collections."""

    @abstractmethod
    async def list_stops(self) -> tuple[Stop, ...]:
        raise NotImplementedError

    @abstractmethod
    async def list_routes(self) -> tuple[Route, ...]:
        raise NotImplementedError

    @abstractmethod
    async def list_route_stops(self) -> tuple[RouteStop, ...]:
        raise NotImplementedError

    @abstractmethod
    async def list_buses(self) -> tuple[Bus, ...]:
        raise NotImplementedError


class IWritableTransitDataStore(ITransitDataStore):
    """Data store that also accepts plain create/delete per collection.

    Consistency rules (id allocation, duplicates, referential checks) belong
    to the admin service; adapters store what they are given.
    """

    @abstractmethod
    async def put_stop(self, stop: Stop) -> None:
        raise NotImplementedError

    @abstractmethod
    async def put_route(self, route: Route) -> None:
        raise NotImplementedError

    @abstractmethod
    async def put_route_stops(self, route_stops: Sequence[RouteStop]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def put_bus(self, bus: Bus) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete_stop(self, stop_id: int) -> bool:
        """Delete a stop; return False if it did not exist."""

    @abstractmethod
    async def delete_route(self, route_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def delete_route_stop(self, route_id: int, stop_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def delete_bus(self, bus_id: int) -> bool:
        raise NotImplementedError
