from .snapshot_cache import ISnapshotCache
from .transit_data_store import ITransitDataStore, IWritableTransitDataStore

__all__ = [
    "ISnapshotCache",
    "ITransitDataStore",
    "IWritableTransitDataStore",
]
