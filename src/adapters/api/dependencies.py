from __future__ import annotations

import os
from functools import lru_cache

from fastapi import Depends

from src.adapters.aws import AwsRuntimeConfig
from src.adapters.cache import S3SnapshotCache
from src.adapters.persistence import (
    DynamoDbTransitDataStore,
    LocalJsonTransitDataStore,
)
from src.adapters.remote.http_transit_data_store import HttpTransitDataStore
from src.app.ports.output import (
    ISnapshotCache,
    ITransitDataStore,
    IWritableTransitDataStore,
)
from src.app.services.network_admin_service import NetworkAdminService
from src.app.services.snapshot_loader import SnapshotLoader, TransitSession
from src.app.services.trip_search_service import TripSearchService
from src.domain.snapshot import TransitSnapshot


def get_data_store() -> ITransitDataStore:
    backend = (os.getenv("TRANSIT_DATA_BACKEND") or "json").strip().lower()
    if backend == "json":
        return LocalJsonTransitDataStore()
    if backend == "dynamodb":
        return DynamoDbTransitDataStore()
    if backend == "http":
        return HttpTransitDataStore()
    raise RuntimeError(f"Unsupported TRANSIT_DATA_BACKEND: {backend}")


def get_snapshot_cache() -> ISnapshotCache | None:
    if AwsRuntimeConfig.from_env().cache_bucket:
        return S3SnapshotCache()
    return None


@lru_cache(maxsize=1)
def get_transit_session() -> TransitSession:
    """Process-wide session: one snapshot shared by every request."""

    loader = SnapshotLoader(data_store=get_data_store(), cache=get_snapshot_cache())
    return TransitSession(loader=loader)


async def get_snapshot(
    session: TransitSession = Depends(get_transit_session),
) -> TransitSnapshot:
    return await session.snapshot()


def get_trip_search_service(
    snapshot: TransitSnapshot = Depends(get_snapshot),
) -> TripSearchService:
    return TripSearchService(snapshot=snapshot)


@lru_cache(maxsize=1)
def get_network_admin_service() -> NetworkAdminService:
    """Process-wide admin service; its lock serialises writes across requests."""

    session = get_transit_session()
    store = session.loader.data_store
    if not isinstance(store, IWritableTransitDataStore):
        raise RuntimeError("Configured data store is read-only")
    return NetworkAdminService(data_store=store, session=session)
