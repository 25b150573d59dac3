from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import TransitCollections


class ISnapshotCache(ABC):
    """Port for caching a complete fetch of the network collections."""

    @abstractmethod
    def get(self) -> TransitCollections | None:
        """Return the cached collections, or None on a miss."""

    @abstractmethod
    def put(self, collections: TransitCollections) -> None:
        raise NotImplementedError

    @abstractmethod
    def invalidate(self) -> None:
        raise NotImplementedError
