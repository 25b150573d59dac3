from __future__ import annotations

import httpx
import pytest

from src.adapters.api.dependencies import get_network_admin_service, get_snapshot
from src.app.services.network_admin_service import NetworkAdminService
from src.domain.exceptions import DataUnavailable
from src.main import app


@pytest.fixture
def client_factory():
    def _client(**transport_kwargs) -> httpx.AsyncClient:
        transport = httpx.ASGITransport(app=app, **transport_kwargs)
        return httpx.AsyncClient(transport=transport, base_url="http://test")

    yield _client
    app.dependency_overrides.clear()


@pytest.mark.unit
@pytest.mark.anyio
async def test_health(client_factory) -> None:
    async with client_factory() as client:
        resp = await client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.unit
@pytest.mark.anyio
async def test_search_returns_direct_trip(client_factory, line_snapshot) -> None:
    app.dependency_overrides[get_snapshot] = lambda: line_snapshot

    async with client_factory() as client:
        resp = await client.get("/search", params={"from_stop_id": 1, "to_stop_id": 3})

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["has_results"] is True
    assert payload["connected"] == []
    (trip,) = payload["direct"]
    assert trip["bus"]["direction"] == "Direct"
    assert trip["route_name"] == "Line 10"
    assert (trip["departure_time"], trip["arrival_time"]) == ("07:00", "07:25")


@pytest.mark.unit
@pytest.mark.anyio
async def test_search_returns_connected_trips(client_factory, transfer_snapshot) -> None:
    app.dependency_overrides[get_snapshot] = lambda: transfer_snapshot

    async with client_factory() as client:
        resp = await client.get("/search", params={"from_stop_id": 1, "to_stop_id": 4})

    payload = resp.json()
    assert payload["direct"] == []
    assert payload["connected_route_ids"] == [1, 2]
    assert payload["connected_total_time"] == 20
    assert {t["arrival_time"] for t in payload["connected"]} == {"08:12", "08:38", "N/A"}


@pytest.mark.unit
@pytest.mark.anyio
async def test_search_rejects_non_numeric_stop_ids(client_factory, line_snapshot) -> None:
    app.dependency_overrides[get_snapshot] = lambda: line_snapshot

    async with client_factory() as client:
        resp = await client.get("/search", params={"from_stop_id": "A", "to_stop_id": 3})

    assert resp.status_code == 422


@pytest.mark.unit
@pytest.mark.anyio
async def test_unavailable_network_data_is_503(client_factory) -> None:
    def _override():
        raise DataUnavailable("Failed to fetch network collections: timeout")

    app.dependency_overrides[get_snapshot] = _override

    async with client_factory() as client:
        resp = await client.get("/search", params={"from_stop_id": 1, "to_stop_id": 2})

    assert resp.status_code == 503
    assert "timeout" in resp.json()["detail"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_list_endpoints_sort_by_name(client_factory, snapshot_factory) -> None:
    snapshot = snapshot_factory(
        stops={1: "zoo", 2: "Airport", 3: "market"},
        routes={5: "Yellow", 6: "blue"},
        route_stops=[(5, 2, 2, None), (5, 1, 1, 4), (6, 3, 1, None)],
    )
    app.dependency_overrides[get_snapshot] = lambda: snapshot

    async with client_factory() as client:
        stops = (await client.get("/stops")).json()
        routes = (await client.get("/routes")).json()
        groups = (await client.get("/route-stops", params={"route_id": 5})).json()

    assert [s["name"] for s in stops] == ["Airport", "market", "zoo"]
    assert [r["id"] for r in routes] == [6, 5]
    assert groups[0]["route_name"] == "Yellow"
    assert [rs["stop_id"] for rs in groups[0]["stops"]] == [1, 2]


@pytest.mark.unit
@pytest.mark.anyio
async def test_admin_writes(client_factory, memory_store) -> None:
    app.dependency_overrides[get_network_admin_service] = lambda: NetworkAdminService(
        data_store=memory_store
    )

    async with client_factory() as client:
        created = await client.post("/stops", json={"name": "Harbour"})
        conflict = await client.post("/routes", json={"id": 1, "name": "Red again"})
        bus = await client.post(
            "/buses",
            json={
                "name": "Red 5",
                "route_id": 1,
                "departure_time": "9:40",
                "direction": "Reverse",
            },
        )
        inserted = await client.post(
            "/route-stops",
            json=[
                {"route_id": 2, "stop_id": 1, "order": 1, "time_to_next": 3},
                {"route_id": 1, "stop_id": 1, "order": 1},
            ],
        )
        deleted = await client.delete("/buses/4")
        missing = await client.delete("/buses/4")

    assert created.status_code == 201
    assert created.json() == {"id": 4, "name": "Harbour"}
    assert conflict.status_code == 409
    assert bus.status_code == 201
    assert bus.json()["departure_time"] == "09:40"
    assert inserted.json() == {"inserted_count": 1}
    assert deleted.status_code == 204
    assert missing.status_code == 404


@pytest.mark.unit
@pytest.mark.anyio
async def test_read_only_store_cannot_be_written(client_factory) -> None:
    def _override():
        raise RuntimeError("Configured data store is read-only")

    app.dependency_overrides[get_network_admin_service] = _override

    async with client_factory(raise_app_exceptions=False) as client:
        resp = await client.post("/stops", json={"name": "Harbour"})

    assert resp.status_code == 500
    assert resp.json()["detail"] == "Configured data store is read-only"


@pytest.mark.unit
def test_admin_service_is_shared_across_requests(monkeypatch, tmp_path) -> None:
    from src.adapters.api.dependencies import get_transit_session

    monkeypatch.setenv("TRANSIT_DATA_BACKEND", "json")
    monkeypatch.setenv("TRANSIT_DATA_PATH", str(tmp_path))
    monkeypatch.delenv("SNAPSHOT_CACHE_BUCKET", raising=False)
    get_transit_session.cache_clear()
    get_network_admin_service.cache_clear()
    try:
        first = get_network_admin_service()
        assert get_network_admin_service() is first
        assert first.session is get_transit_session()
    finally:
        get_network_admin_service.cache_clear()
        get_transit_session.cache_clear()
