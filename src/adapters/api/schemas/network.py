from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class StopSchema(BaseModel):
    id: int
    name: str


class RouteSchema(BaseModel):
    id: int
    name: str


class RouteStopSchema(BaseModel):
    route_id: int
    stop_id: int
    order: int
    time_to_next: float | None = None


class RouteStopsGroupSchema(BaseModel):
    route_id: int
    route_name: str | None = None
    stops: list[RouteStopSchema] = []


class StopCreateSchema(BaseModel):
    name: str = Field(..., min_length=1)


class RouteCreateSchema(BaseModel):
    id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1)


class RouteStopCreateSchema(BaseModel):
    route_id: int
    stop_id: int
    order: int = Field(..., ge=1)
    time_to_next: float | None = Field(default=None, ge=0)


class RouteStopsCreatedSchema(BaseModel):
    inserted_count: int


class BusCreateSchema(BaseModel):
    name: str = Field(..., min_length=1)
    route_id: int
    departure_time: str = Field(..., pattern=r"^\d{1,2}:\d{2}$")
    direction: Literal["Direct", "Reverse"]
