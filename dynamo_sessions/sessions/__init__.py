"""Session persistence: models, expiration policy, table bootstrap, stores."""

from dynamo_sessions.sessions.bootstrap import TableBootstrapper
from dynamo_sessions.sessions.factory import create_kv_store, create_session_store
from dynamo_sessions.sessions.models import SessionCookie, SessionData
from dynamo_sessions.sessions.store import SessionStore
from dynamo_sessions.sessions.stores.dynamodb import DynamoDBSessionStore

__all__ = [
    "SessionCookie",
    "SessionData",
    "SessionStore",
    "DynamoDBSessionStore",
    "TableBootstrapper",
    "create_kv_store",
    "create_session_store",
]
