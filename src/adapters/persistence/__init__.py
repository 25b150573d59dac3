from .dynamodb_transit_data_store import DynamoDbTransitDataStore
from .local_json_data_store import LocalJsonTransitDataStore

__all__ = [
    "DynamoDbTransitDataStore",
    "LocalJsonTransitDataStore",
]
