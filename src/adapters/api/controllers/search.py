from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from src.adapters.api.dependencies import get_trip_search_service
from src.adapters.api.schemas.search import BusSchema, SearchResponseSchema, TripSchema
from src.app.services.trip_search_service import TripSearchService
from src.domain.models import TripResult

router = APIRouter(tags=["search"])


def _trip_to_schema(trip: TripResult) -> TripSchema:
    bus = trip.bus
    return TripSchema(
        bus=BusSchema(
            id=bus.id,
            route_id=bus.route_id,
            name=bus.name,
            departure_time=bus.departure_time,
            direction=bus.direction.value,
        ),
        route_name=trip.route_name,
        departure_time=trip.departure_time,
        arrival_time=trip.arrival_time,
        board_stop_id=trip.board_stop_id,
        alight_stop_id=trip.alight_stop_id,
    )


@router.get("/search", response_model=SearchResponseSchema)
def search_trips(
    from_stop_id: int = Query(...),
    to_stop_id: int = Query(...),
    service: TripSearchService = Depends(get_trip_search_service),
) -> SearchResponseSchema:
    result = service.search(from_stop_id=from_stop_id, to_stop_id=to_stop_id)
    return SearchResponseSchema(
        from_stop_id=from_stop_id,
        to_stop_id=to_stop_id,
        direct=[_trip_to_schema(t) for t in result.direct],
        connected=[_trip_to_schema(t) for t in result.connected],
        connected_route_ids=list(result.connected_route_ids),
        connected_total_time=result.connected_total_time,
        has_results=not result.is_empty,
    )
