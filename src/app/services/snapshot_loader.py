from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from src.app.ports.output import ISnapshotCache, ITransitDataStore
from src.domain.exceptions import DataUnavailable
from src.domain.models import TransitCollections
from src.domain.snapshot import TransitSnapshot

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SnapshotLoader:
    """Fetches all four collections in one shot and builds a snapshot.

    The route graph is only built once every collection has arrived; any
    failure surfaces as DataUnavailable and nothing is indexed. Retrying means
    calling `load()` again (the whole fetch, never a single collection).
    """

    data_store: ITransitDataStore
    cache: ISnapshotCache | None = None

    async def fetch_collections(self) -> TransitCollections:
        if self.cache is not None:
            cached = await asyncio.to_thread(self.cache.get)
            if cached is not None:
                logger.info("Network collections served from snapshot cache")
                return cached

        try:
            stops, routes, route_stops, buses = await asyncio.gather(
                self.data_store.list_stops(),
                self.data_store.list_routes(),
                self.data_store.list_route_stops(),
                self.data_store.list_buses(),
            )
        except DataUnavailable:
            raise
        except Exception as exc:
            raise DataUnavailable(
                f"Failed to fetch network collections: {type(exc).__name__}: {exc}"
            ) from exc

        collections = TransitCollections(
            stops=tuple(stops),
            routes=tuple(routes),
            route_stops=tuple(route_stops),
            buses=tuple(buses),
        )

        if self.cache is not None:
            await asyncio.to_thread(self.cache.put, collections)

        return collections

    async def load(self) -> TransitSnapshot:
        collections = await self.fetch_collections()
        snapshot = TransitSnapshot.build(collections)
        logger.info(
            "Network snapshot ready: %d stops, %d routes, %d route stops, %d buses",
            len(collections.stops),
            len(collections.routes),
            len(collections.route_stops),
            len(collections.buses),
        )
        return snapshot


@dataclass(slots=True)
class TransitSession:
    """Holds the snapshot searches run against, loading it on first use."""

    loader: SnapshotLoader

    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)
    _snapshot: TransitSnapshot | None = None

    async def snapshot(self) -> TransitSnapshot:
        async with self._lock:
            if self._snapshot is None:
                self._snapshot = await self.loader.load()
            return self._snapshot

    async def invalidate(self) -> None:
        """Drop the snapshot (and cached collections) after the network changed."""

        # The cache must be cleared before a reload can see it.
        async with self._lock:
            if self.loader.cache is not None:
                await asyncio.to_thread(self.loader.cache.invalidate)
            self._snapshot = None
