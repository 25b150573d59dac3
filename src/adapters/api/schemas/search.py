from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class BusSchema(BaseModel):
    id: int
    route_id: int
    name: str
    departure_time: str
    direction: Literal["Direct", "Reverse"]


class TripSchema(BaseModel):
    bus: BusSchema
    route_name: str | None = None
    departure_time: str
    arrival_time: str
    board_stop_id: int
    alight_stop_id: int


class SearchResponseSchema(BaseModel):
    from_stop_id: int
    to_stop_id: int
    direct: list[TripSchema] = []
    connected: list[TripSchema] = []
    connected_route_ids: list[int] = []
    connected_total_time: float | None = None
    has_results: bool = False
