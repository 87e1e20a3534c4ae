"""SessionStore factory for creating backend instances.

Builds the key-value backend named in `storage.backend` and a session
store on top of it. AWS credentials come from the botocore default chain.
"""

from dynamo_sessions.config.models.storage import StorageConfig
from dynamo_sessions.db.dynamodb import DynamoDBKeyValueStore
from dynamo_sessions.db.inmemory import InMemoryKeyValueStore
from dynamo_sessions.db.store import KeyValueStore
from dynamo_sessions.observability.logging import get_logger
from dynamo_sessions.sessions.stores.dynamodb import DynamoDBSessionStore

logger = get_logger(__name__)


async def create_kv_store(config: StorageConfig) -> KeyValueStore:
    """Create the key-value backend selected by configuration.

    The DynamoDB backend opens a client; close it with `await kv.close()`.

    Raises:
        ValueError: If backend type is not supported
    """
    backend = config.backend

    if backend == "inmemory":
        logger.info("creating_kv_store", backend="inmemory")
        kv = InMemoryKeyValueStore()
        # Stand in for an out-of-band provisioned table unless creation is requested
        if config.session.create_table is None:
            kv.add_table(config.session.table_name, config.session.hash_key)
        return kv

    elif backend == "dynamodb":
        logger.info(
            "creating_kv_store",
            backend="dynamodb",
            region=config.aws.region_name,
            endpoint_url=config.aws.endpoint_url,
        )
        return await DynamoDBKeyValueStore.connect(config.aws)

    else:
        raise ValueError(f"Unsupported session storage backend: {backend}")


async def create_session_store(
    config: StorageConfig,
    kv_store: KeyValueStore | None = None,
) -> DynamoDBSessionStore:
    """Create a session store, bootstrapping its table if configured.

    Args:
        config: Storage section of the settings
        kv_store: Existing backend to reuse instead of creating one

    Returns:
        Ready-to-use session store
    """
    kv = kv_store if kv_store is not None else await create_kv_store(config)
    store = await DynamoDBSessionStore.create(kv, config.session)

    logger.info(
        "session_store_ready",
        backend=config.backend,
        table=config.session.table_name,
        consistent_read=config.session.consistent_read,
        touch_after=config.session.touch_after,
        create_table=config.session.create_table is not None,
    )
    return store
