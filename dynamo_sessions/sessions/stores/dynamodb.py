"""DynamoDB implementation of SessionStore.

Record layout (one item per session):

    {
        "<hash_key>": "<prefix><session_id>",
        "expires": <epoch seconds, watched by the table's TTL>,
        "sess": {<session payload>}
    }

Expired items are removed by DynamoDB's own TTL sweep, which can lag by
hours; reads therefore also treat an item whose `expires` has passed as
absent. Nothing here scans for or deletes expired items.
"""

import time
from collections.abc import Callable
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from dynamo_sessions.config.models.storage import DynamoDBSessionConfig
from dynamo_sessions.db.errors import StoreError, ValidationError
from dynamo_sessions.db.store import KeyValueStore
from dynamo_sessions.observability.logging import get_logger
from dynamo_sessions.sessions.bootstrap import TableBootstrapper
from dynamo_sessions.sessions.expiration import (
    EXPIRES_ATTRIBUTE,
    compute_expires_at,
    effective_touch_after,
    is_expired,
    nominal_lifetime_seconds,
    should_touch,
)
from dynamo_sessions.sessions.models import SessionData
from dynamo_sessions.sessions.serialization import decode_payload, normalize_payload
from dynamo_sessions.sessions.store import SessionStore

PAYLOAD_ATTRIBUTE = "sess"


class DynamoDBSessionStore(SessionStore):
    """Session store on a DynamoDB table with native TTL.

    Construction performs no I/O. To create a missing table (local and test
    setups only), configure `create_table` and either build the store with
    `await DynamoDBSessionStore.create(...)` or call `await store.ensure_table()`.

    `touch` is throttled: the expiry is rewritten only once more than
    `touch_after` seconds (at most 10% of the session lifetime) have passed
    since it was last set, which keeps read-heavy traffic from paying for a
    write on every request.
    """

    def __init__(
        self,
        kv_store: KeyValueStore,
        config: DynamoDBSessionConfig | None = None,
        *,
        logger: structlog.stdlib.BoundLogger | None = None,
        clock: Callable[[], float] = time.time,
        bootstrapper: TableBootstrapper | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            kv_store: Key-value backend holding the session table
            config: Session store configuration (uses defaults if not provided)
            logger: Logger to use (defaults to one named after this module)
            clock: Returns the current time in epoch seconds
            bootstrapper: Table bootstrapper (built from kv_store if not provided)
        """
        self._kv = kv_store
        self._config = config or DynamoDBSessionConfig()
        self._logger = logger if logger is not None else get_logger(__name__)
        self._clock = clock
        self._bootstrapper = bootstrapper or TableBootstrapper(
            kv_store, logger=self._logger
        )

    @classmethod
    async def create(
        cls,
        kv_store: KeyValueStore,
        config: DynamoDBSessionConfig | None = None,
        *,
        logger: structlog.stdlib.BoundLogger | None = None,
        clock: Callable[[], float] = time.time,
        bootstrapper: TableBootstrapper | None = None,
    ) -> "DynamoDBSessionStore":
        """Build a store, first creating its table if `create_table` is configured."""
        store = cls(
            kv_store,
            config,
            logger=logger,
            clock=clock,
            bootstrapper=bootstrapper,
        )
        if store.config.create_table is not None:
            await store.ensure_table()
        return store

    @property
    def config(self) -> DynamoDBSessionConfig:
        return self._config

    @property
    def table_name(self) -> str:
        return self._config.table_name

    def _record_key(self, session_id: str) -> dict[str, Any]:
        return {self._config.hash_key: f"{self._config.prefix}{session_id}"}

    async def ensure_table(self) -> bool:
        """Create the table if missing and table creation is configured.

        Returns:
            True when the table is usable, False if it did not become ACTIVE
            within the polling budget
        """
        creation = self._config.create_table
        if creation is None:
            return True
        return await self._bootstrapper.ensure_table(
            self._config.table_name,
            self._config.hash_key,
            creation,
        )

    async def get(self, session_id: str) -> SessionData | None:
        """Get a session by ID.

        Returns None when the item is missing, past its `expires`, or has
        no payload. Legacy JSON-string payloads are parsed transparently.

        Raises:
            ValidationError: If the stored payload is malformed
            StoreError: If the backend call fails
        """
        try:
            item = await self._kv.get_item(
                self._config.table_name,
                self._record_key(session_id),
                consistent_read=self._config.consistent_read,
            )
        except StoreError as e:
            self._logger.error("session_get_failed", session_id=session_id, error=str(e))
            raise

        if item is None:
            self._logger.debug("session_not_found", session_id=session_id)
            return None

        expires_at = item.get(EXPIRES_ATTRIBUTE)
        if is_expired(expires_at, self._clock()):
            self._logger.debug(
                "session_expired",
                session_id=session_id,
                expires_at=expires_at,
            )
            return None

        raw = item.get(PAYLOAD_ATTRIBUTE)
        if not raw:
            self._logger.debug("session_empty", session_id=session_id)
            return None

        payload = decode_payload(raw)
        if not payload:
            self._logger.debug("session_empty", session_id=session_id)
            return None

        try:
            session = SessionData.from_payload(payload)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Stored session {session_id!r} does not match the session schema",
                cause=e,
            ) from e

        self._logger.debug(
            "session_retrieved",
            session_id=session_id,
            legacy_format=isinstance(raw, (str, bytes)),
        )
        return session

    async def set(self, session_id: str, session: SessionData) -> None:
        """Write the full session record, replacing any existing one.

        The expiry is always recomputed from the cookie's maxAge (or the
        configured default lifetime); it is never taken from the input.
        """
        expires_at = compute_expires_at(
            session.cookie, self._config.default_ttl_seconds, self._clock()
        )
        item = {
            **self._record_key(session_id),
            EXPIRES_ATTRIBUTE: expires_at,
            PAYLOAD_ATTRIBUTE: normalize_payload(session),
        }

        try:
            await self._kv.put_item(self._config.table_name, item)
        except StoreError as e:
            self._logger.error("session_set_failed", session_id=session_id, error=str(e))
            raise

        self._logger.debug("session_saved", session_id=session_id, expires_at=expires_at)

    async def touch(self, session_id: str, session: SessionData) -> bool:
        """Push out the session's expiry if the throttle window has passed.

        Only the `expires` attribute is rewritten; the payload is untouched.

        Returns:
            True if a write was issued, False if the touch was throttled
        """
        now = self._clock()
        default_ttl = self._config.default_ttl_seconds

        if not should_touch(session.cookie, self._config.touch_after, default_ttl, now):
            self._logger.debug(
                "session_touch_skipped",
                session_id=session_id,
                window_seconds=effective_touch_after(
                    self._config.touch_after,
                    nominal_lifetime_seconds(session.cookie, default_ttl),
                ),
            )
            return False

        expires_at = compute_expires_at(session.cookie, default_ttl, now)
        try:
            await self._kv.update_item(
                self._config.table_name,
                self._record_key(session_id),
                {EXPIRES_ATTRIBUTE: expires_at},
            )
        except StoreError as e:
            self._logger.error("session_touch_failed", session_id=session_id, error=str(e))
            raise

        self._logger.debug("session_touched", session_id=session_id, expires_at=expires_at)
        return True

    async def destroy(self, session_id: str) -> None:
        """Delete a session. Missing sessions are not an error."""
        try:
            await self._kv.delete_item(
                self._config.table_name,
                self._record_key(session_id),
            )
        except StoreError as e:
            self._logger.error("session_destroy_failed", session_id=session_id, error=str(e))
            raise

        self._logger.debug("session_destroyed", session_id=session_id)
