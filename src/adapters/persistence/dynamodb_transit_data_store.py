from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from src.adapters.aws import AwsRuntimeConfig, dynamodb_client
from src.adapters.records import (
    buses_from_rows,
    route_stops_from_rows,
    routes_from_rows,
    stops_from_rows,
    to_row,
)
from src.app.ports.output import IWritableTransitDataStore
from src.domain.models import Bus, Route, RouteStop, Stop

_BATCH_SIZE = 25  # DynamoDB BatchWriteItem limit


def _to_attr(value: Any) -> dict[str, Any]:
    if value is None:
        return {"NULL": True}
    if isinstance(value, bool):
        return {"BOOL": value}
    if isinstance(value, (int, float)):
        return {"N": str(value)}
    return {"S": str(value)}


def _from_attr(attr: Mapping[str, Any]) -> Any:
    if "NULL" in attr:
        return None
    if "BOOL" in attr:
        return bool(attr["BOOL"])
    if "N" in attr:
        raw = attr["N"]
        return int(raw) if raw.lstrip("-").isdigit() else float(raw)
    return attr.get("S")


def to_item(row: Mapping[str, Any]) -> dict[str, Any]:
    return {k: _to_attr(v) for k, v in row.items()}


def from_item(item: Mapping[str, Any]) -> dict[str, Any]:
    return {k: _from_attr(v) for k, v in item.items()}


@dataclass(slots=True)
class DynamoDbTransitDataStore(IWritableTransitDataStore):
    """Stores the network collections in four DynamoDB tables.

    Tables (hash key / range key, all numeric):
      - {prefix}-stops: id
      - {prefix}-routes: id
      - {prefix}-route-stops: route_id / stop_id
      - {prefix}-buses: id

    Env vars:
      - DDB_TABLE_PREFIX (default: transit)
      - ENDPOINT_URL (preferred for LocalStack)
      - AWS_REGION
    """

    table_prefix: str | None = None

    def _prefix(self) -> str:
        return self.table_prefix or AwsRuntimeConfig.from_env().table_prefix

    def table(self, collection: str) -> str:
        return f"{self._prefix()}-{collection}"

    def _scan(self, collection: str) -> list[dict[str, Any]]:
        ddb = dynamodb_client()
        rows: list[dict[str, Any]] = []
        kwargs: dict[str, Any] = {"TableName": self.table(collection)}
        while True:
            resp = ddb.scan(**kwargs)
            rows.extend(from_item(item) for item in resp.get("Items", []))
            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                return rows
            kwargs["ExclusiveStartKey"] = last_key

    def _put(self, collection: str, rows: Sequence[Mapping[str, Any]]) -> None:
        ddb = dynamodb_client()
        table = self.table(collection)
        for i in range(0, len(rows), _BATCH_SIZE):
            chunk = rows[i : i + _BATCH_SIZE]
            request: dict[str, Any] = {
                table: [{"PutRequest": {"Item": to_item(row)}} for row in chunk]
            }
            while request:
                resp = ddb.batch_write_item(RequestItems=request)
                request = resp.get("UnprocessedItems") or {}

    def _delete(self, collection: str, key: Mapping[str, Any]) -> bool:
        ddb = dynamodb_client()
        resp = ddb.delete_item(
            TableName=self.table(collection),
            Key=to_item(key),
            ReturnValues="ALL_OLD",
        )
        return bool(resp.get("Attributes"))

    async def list_stops(self) -> tuple[Stop, ...]:
        return stops_from_rows(await asyncio.to_thread(self._scan, "stops"))

    async def list_routes(self) -> tuple[Route, ...]:
        return routes_from_rows(await asyncio.to_thread(self._scan, "routes"))

    async def list_route_stops(self) -> tuple[RouteStop, ...]:
        rows = await asyncio.to_thread(self._scan, "route-stops")
        # Scans come back in key-hash order; restore route/stop order.
        rows.sort(key=lambda r: (r.get("route_id") or 0, r.get("order") or 0))
        return route_stops_from_rows(rows)

    async def list_buses(self) -> tuple[Bus, ...]:
        rows = await asyncio.to_thread(self._scan, "buses")
        rows.sort(key=lambda r: r.get("id") or 0)
        return buses_from_rows(rows)

    async def put_stop(self, stop: Stop) -> None:
        await asyncio.to_thread(self._put, "stops", [to_row(stop)])

    async def put_route(self, route: Route) -> None:
        await asyncio.to_thread(self._put, "routes", [to_row(route)])

    async def put_route_stops(self, route_stops: Sequence[RouteStop]) -> None:
        rows = [to_row(rs) for rs in route_stops]
        await asyncio.to_thread(self._put, "route-stops", rows)

    async def put_bus(self, bus: Bus) -> None:
        await asyncio.to_thread(self._put, "buses", [to_row(bus)])

    async def delete_stop(self, stop_id: int) -> bool:
        return await asyncio.to_thread(self._delete, "stops", {"id": stop_id})

    async def delete_route(self, route_id: int) -> bool:
        return await asyncio.to_thread(self._delete, "routes", {"id": route_id})

    async def delete_route_stop(self, route_id: int, stop_id: int) -> bool:
        return await asyncio.to_thread(
            self._delete, "route-stops", {"route_id": route_id, "stop_id": stop_id}
        )

    async def delete_bus(self, bus_id: int) -> bool:
        return await asyncio.to_thread(self._delete, "buses", {"id": bus_id})
