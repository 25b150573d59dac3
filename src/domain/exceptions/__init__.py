from .transit import (
    DataUnavailable,
    EntityConflict,
    EntityNotFound,
    InvalidNetworkData,
    TransitError,
)

__all__ = [
    "DataUnavailable",
    "EntityConflict",
    "EntityNotFound",
    "InvalidNetworkData",
    "TransitError",
]
