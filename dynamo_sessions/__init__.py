"""dynamo-sessions: session persistence on DynamoDB with native TTL.

Usage:
    from dynamo_sessions import DynamoDBSessionStore, SessionData
    from dynamo_sessions.db import DynamoDBKeyValueStore

    kv = await DynamoDBKeyValueStore.connect(settings.storage.aws)
    store = await DynamoDBSessionStore.create(kv, settings.storage.session)

    await store.set("abc", SessionData(values={"user": "alice"}))
    session = await store.get("abc")
"""

from dynamo_sessions.sessions import (
    DynamoDBSessionStore,
    SessionCookie,
    SessionData,
    SessionStore,
    TableBootstrapper,
    create_session_store,
)

__version__ = "0.1.0"

__all__ = [
    "DynamoDBSessionStore",
    "SessionCookie",
    "SessionData",
    "SessionStore",
    "TableBootstrapper",
    "create_session_store",
]
