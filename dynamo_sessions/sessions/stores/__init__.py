"""Session store implementations."""

from dynamo_sessions.sessions.store import SessionStore
from dynamo_sessions.sessions.stores.dynamodb import DynamoDBSessionStore

__all__ = [
    "SessionStore",
    "DynamoDBSessionStore",
]
