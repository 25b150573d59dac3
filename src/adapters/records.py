from __future__ import annotations

from typing import Any, Iterable, Mapping, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from src.domain.exceptions import DataUnavailable
from src.domain.models import Bus, Direction, Route, RouteStop, Stop, TransitCollections

# Raw rows are normalised here, at the loading boundary: identifiers become
# ints (numeric strings are coerced, anything else is rejected). The legacy
# Mongo field names (stop_id, stop_name, stop_order, bus_name, time, ...) are
# accepted as aliases.


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class StopRecord(_Record):
    id: int = Field(validation_alias=AliasChoices("id", "stop_id"))
    name: str = Field(validation_alias=AliasChoices("name", "stop_name"))

    @classmethod
    def from_domain(cls, stop: Stop) -> StopRecord:
        return cls(id=stop.id, name=stop.name)

    def to_domain(self) -> Stop:
        return Stop(id=self.id, name=self.name)


class RouteRecord(_Record):
    id: int = Field(validation_alias=AliasChoices("id", "route_id"))
    name: str = Field(validation_alias=AliasChoices("name", "route_name"))

    @classmethod
    def from_domain(cls, route: Route) -> RouteRecord:
        return cls(id=route.id, name=route.name)

    def to_domain(self) -> Route:
        return Route(id=self.id, name=self.name)


class RouteStopRecord(_Record):
    route_id: int
    stop_id: int
    order: int = Field(ge=1, validation_alias=AliasChoices("order", "stop_order"))
    time_to_next: float | None = Field(
        default=None, validation_alias=AliasChoices("time_to_next", "time")
    )

    @classmethod
    def from_domain(cls, rs: RouteStop) -> RouteStopRecord:
        return cls(
            route_id=rs.route_id,
            stop_id=rs.stop_id,
            order=rs.order,
            time_to_next=rs.time_to_next,
        )

    def to_domain(self) -> RouteStop:
        return RouteStop(
            route_id=self.route_id,
            stop_id=self.stop_id,
            order=self.order,
            time_to_next=self.time_to_next,
        )


class BusRecord(_Record):
    id: int = Field(validation_alias=AliasChoices("id", "bus_id"))
    route_id: int
    name: str = Field(validation_alias=AliasChoices("name", "bus_name"))
    departure_time: str = Field(validation_alias=AliasChoices("departure_time", "time"))
    direction: Direction

    @classmethod
    def from_domain(cls, bus: Bus) -> BusRecord:
        return cls(
            id=bus.id,
            route_id=bus.route_id,
            name=bus.name,
            departure_time=bus.departure_time,
            direction=bus.direction,
        )

    def to_domain(self) -> Bus:
        return Bus(
            id=self.id,
            route_id=self.route_id,
            name=self.name,
            departure_time=self.departure_time.strip(),
            direction=self.direction,
        )


R = TypeVar("R", bound=_Record)


def _parse(
    model: type[R], rows: Iterable[Mapping[str, Any]], collection: str
) -> tuple[R, ...]:
    try:
        return tuple(model.model_validate(dict(row)) for row in rows)
    except (TypeError, ValidationError) as exc:
        raise DataUnavailable(f"Malformed {collection} collection: {exc}") from exc


def stops_from_rows(rows: Iterable[Mapping[str, Any]]) -> tuple[Stop, ...]:
    return tuple(r.to_domain() for r in _parse(StopRecord, rows, "stops"))


def routes_from_rows(rows: Iterable[Mapping[str, Any]]) -> tuple[Route, ...]:
    return tuple(r.to_domain() for r in _parse(RouteRecord, rows, "routes"))


def route_stops_from_rows(rows: Iterable[Mapping[str, Any]]) -> tuple[RouteStop, ...]:
    return tuple(r.to_domain() for r in _parse(RouteStopRecord, rows, "route_stops"))


def buses_from_rows(rows: Iterable[Mapping[str, Any]]) -> tuple[Bus, ...]:
    return tuple(r.to_domain() for r in _parse(BusRecord, rows, "buses"))


def to_row(item: Stop | Route | RouteStop | Bus) -> dict[str, Any]:
    if isinstance(item, Stop):
        record: _Record = StopRecord.from_domain(item)
    elif isinstance(item, Route):
        record = RouteRecord.from_domain(item)
    elif isinstance(item, RouteStop):
        record = RouteStopRecord.from_domain(item)
    else:
        record = BusRecord.from_domain(item)
    return record.model_dump(mode="json")


def collections_to_payload(collections: TransitCollections) -> dict[str, Any]:
    return {
        "stops": [to_row(s) for s in collections.stops],
        "routes": [to_row(r) for r in collections.routes],
        "route_stops": [to_row(rs) for rs in collections.route_stops],
        "buses": [to_row(b) for b in collections.buses],
    }


def collections_from_payload(payload: Mapping[str, Any]) -> TransitCollections:
    return TransitCollections(
        stops=stops_from_rows(payload.get("stops") or ()),
        routes=routes_from_rows(payload.get("routes") or ()),
        route_stops=route_stops_from_rows(payload.get("route_stops") or ()),
        buses=buses_from_rows(payload.get("buses") or ()),
    )
