class TransitError(Exception):
    """Base exception for transit network failures."""


class DataUnavailable(TransitError):
    """Raised when the network collections cannot be fetched in full."""


class EntityNotFound(TransitError):
    """Raised when a stop, route, route stop or bus does not exist."""


class EntityConflict(TransitError):
    """Raised when a write would break the consistency of the network."""


class InvalidNetworkData(TransitError):
    """Raised when a write carries values the network cannot hold."""
