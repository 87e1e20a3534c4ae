"""Key-value storage layer: interface, backends, and errors."""

from dynamo_sessions.db.dynamodb import DynamoDBKeyValueStore
from dynamo_sessions.db.errors import (
    ConnectionError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from dynamo_sessions.db.inmemory import InMemoryKeyValueStore
from dynamo_sessions.db.store import TABLE_ACTIVE, KeyValueStore

__all__ = [
    "TABLE_ACTIVE",
    "KeyValueStore",
    "DynamoDBKeyValueStore",
    "InMemoryKeyValueStore",
    "StoreError",
    "ConnectionError",
    "NotFoundError",
    "ValidationError",
]
