from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from src.adapters.api.dependencies import get_network_admin_service, get_snapshot
from src.adapters.api.schemas.network import (
    BusCreateSchema,
    RouteCreateSchema,
    RouteSchema,
    RouteStopCreateSchema,
    RouteStopSchema,
    RouteStopsCreatedSchema,
    RouteStopsGroupSchema,
    StopCreateSchema,
    StopSchema,
)
from src.adapters.api.schemas.search import BusSchema
from src.app.services.network_admin_service import NetworkAdminService
from src.domain.models import Bus, Direction, RouteStop
from src.domain.snapshot import TransitSnapshot

router = APIRouter(tags=["network"])


def _bus_to_schema(bus: Bus) -> BusSchema:
    return BusSchema(
        id=bus.id,
        route_id=bus.route_id,
        name=bus.name,
        departure_time=bus.departure_time,
        direction=bus.direction.value,
    )


def _route_stop_to_schema(rs: RouteStop) -> RouteStopSchema:
    return RouteStopSchema(
        route_id=rs.route_id,
        stop_id=rs.stop_id,
        order=rs.order,
        time_to_next=rs.time_to_next,
    )


@router.get("/stops", response_model=list[StopSchema])
def list_stops(snapshot: TransitSnapshot = Depends(get_snapshot)) -> list[StopSchema]:
    stops = sorted(snapshot.collections.stops, key=lambda s: s.name.casefold())
    return [StopSchema(id=s.id, name=s.name) for s in stops]


@router.get("/routes", response_model=list[RouteSchema])
def list_routes(
    snapshot: TransitSnapshot = Depends(get_snapshot),
) -> list[RouteSchema]:
    routes = sorted(snapshot.collections.routes, key=lambda r: r.name.casefold())
    return [RouteSchema(id=r.id, name=r.name) for r in routes]


@router.get("/route-stops", response_model=list[RouteStopsGroupSchema])
def list_route_stops(
    route_id: int | None = Query(default=None),
    snapshot: TransitSnapshot = Depends(get_snapshot),
) -> list[RouteStopsGroupSchema]:
    route_order = snapshot.graph.route_order
    route_ids = [route_id] if route_id is not None else list(route_order)
    return [
        RouteStopsGroupSchema(
            route_id=rid,
            route_name=snapshot.route_name(rid),
            stops=[_route_stop_to_schema(rs) for rs in route_order.get(rid, ())],
        )
        for rid in route_ids
    ]


@router.get("/buses", response_model=list[BusSchema])
def list_buses(snapshot: TransitSnapshot = Depends(get_snapshot)) -> list[BusSchema]:
    return [_bus_to_schema(b) for b in snapshot.collections.buses]


@router.post("/stops", response_model=StopSchema, status_code=status.HTTP_201_CREATED)
async def add_stop(
    req: StopCreateSchema,
    service: NetworkAdminService = Depends(get_network_admin_service),
) -> StopSchema:
    stop = await service.add_stop(name=req.name)
    return StopSchema(id=stop.id, name=stop.name)


@router.post(
    "/routes", response_model=RouteSchema, status_code=status.HTTP_201_CREATED
)
async def add_route(
    req: RouteCreateSchema,
    service: NetworkAdminService = Depends(get_network_admin_service),
) -> RouteSchema:
    route = await service.add_route(route_id=req.id, name=req.name)
    return RouteSchema(id=route.id, name=route.name)


@router.post(
    "/route-stops",
    response_model=RouteStopsCreatedSchema,
    status_code=status.HTTP_201_CREATED,
)
async def add_route_stops(
    req: list[RouteStopCreateSchema],
    service: NetworkAdminService = Depends(get_network_admin_service),
) -> RouteStopsCreatedSchema:
    inserted = await service.add_route_stops(
        [
            RouteStop(
                route_id=row.route_id,
                stop_id=row.stop_id,
                order=row.order,
                time_to_next=row.time_to_next,
            )
            for row in req
        ]
    )
    return RouteStopsCreatedSchema(inserted_count=inserted)


@router.post("/buses", response_model=BusSchema, status_code=status.HTTP_201_CREATED)
async def add_bus(
    req: BusCreateSchema,
    service: NetworkAdminService = Depends(get_network_admin_service),
) -> BusSchema:
    bus = await service.add_bus(
        name=req.name,
        route_id=req.route_id,
        departure_time=req.departure_time,
        direction=Direction(req.direction),
    )
    return _bus_to_schema(bus)


@router.delete("/stops/{stop_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_stop(
    stop_id: int,
    service: NetworkAdminService = Depends(get_network_admin_service),
) -> Response:
    await service.delete_stop(stop_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/routes/{route_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_route(
    route_id: int,
    service: NetworkAdminService = Depends(get_network_admin_service),
) -> Response:
    await service.delete_route(route_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/route-stops/{route_id}/{stop_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_route_stop(
    route_id: int,
    stop_id: int,
    service: NetworkAdminService = Depends(get_network_admin_service),
) -> Response:
    await service.delete_route_stop(route_id, stop_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/buses/{bus_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bus(
    bus_id: int,
    service: NetworkAdminService = Depends(get_network_admin_service),
) -> Response:
    await service.delete_bus(bus_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
