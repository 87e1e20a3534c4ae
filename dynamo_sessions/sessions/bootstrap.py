"""Session table bootstrapping.

Creates the session table and enables TTL on it when it does not exist yet.
This is a convenience for local and test environments; production tables
should be provisioned out of band with TTL already enabled on `expires`.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from dynamo_sessions.config.models.storage import TableCreationConfig
from dynamo_sessions.db.errors import StoreError
from dynamo_sessions.db.store import TABLE_ACTIVE, KeyValueStore
from dynamo_sessions.observability.logging import get_logger
from dynamo_sessions.sessions.expiration import EXPIRES_ATTRIBUTE


class TableBootstrapper:
    """Idempotently ensures a table exists and has expiration enabled.

    Steps:
    1. describe_table; an existing table means nothing to do
    2. otherwise create_table with the hash key as sole partition key
    3. poll describe_table until ACTIVE (bounded attempts, fixed delay)
    4. enable TTL on `expires`

    Running out of poll attempts is not fatal: ensure_table returns False
    and callers may retry later. Errors from create_table or
    enable_expiration propagate.
    """

    def __init__(
        self,
        kv_store: KeyValueStore,
        *,
        logger: structlog.stdlib.BoundLogger | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """Initialize the bootstrapper.

        Args:
            kv_store: Backend to create the table in
            logger: Logger to use (defaults to one named after this module)
            sleep: Delay function between status polls
        """
        self._kv = kv_store
        self._logger = logger if logger is not None else get_logger(__name__)
        self._sleep = sleep

    async def ensure_table(
        self,
        table_name: str,
        hash_key: str,
        creation: TableCreationConfig | None = None,
    ) -> bool:
        """Make sure `table_name` exists with TTL enabled.

        Returns:
            True if the table exists or became ACTIVE, False if it was still
            not ACTIVE when the poll budget ran out

        Raises:
            StoreError: If table creation or TTL enablement fails
        """
        creation = creation or TableCreationConfig()

        try:
            await self._kv.describe_table(table_name)
            self._logger.debug("table_exists", table=table_name)
            return True
        except StoreError as e:
            self._logger.info(
                "table_not_found",
                table=table_name,
                error=str(e),
            )

        options = {"BillingMode": creation.billing_mode, **creation.extra_options}
        self._logger.info(
            "creating_table",
            table=table_name,
            hash_key=hash_key,
            options=options,
        )

        try:
            await self._kv.create_table(table_name, hash_key, options)
        except StoreError as e:
            self._logger.error("table_create_failed", table=table_name, error=str(e))
            raise

        if not await self._wait_until_active(table_name, creation):
            self._logger.warning(
                "table_not_ready",
                table=table_name,
                attempts=creation.poll_attempts,
                interval_seconds=creation.poll_interval_seconds,
            )
            return False

        try:
            await self._kv.enable_expiration(table_name, EXPIRES_ATTRIBUTE)
        except StoreError as e:
            self._logger.error("table_ttl_enable_failed", table=table_name, error=str(e))
            raise

        self._logger.info(
            "table_created",
            table=table_name,
            ttl_attribute=EXPIRES_ATTRIBUTE,
        )
        return True

    async def _wait_until_active(
        self,
        table_name: str,
        creation: TableCreationConfig,
    ) -> bool:
        for attempt in range(1, creation.poll_attempts + 1):
            try:
                table = await self._kv.describe_table(table_name)
                if table.get("TableStatus") == TABLE_ACTIVE:
                    return True
                self._logger.debug(
                    "table_not_active",
                    table=table_name,
                    status=table.get("TableStatus"),
                    attempt=attempt,
                )
            except StoreError as e:
                self._logger.debug(
                    "table_status_check_failed",
                    table=table_name,
                    attempt=attempt,
                    error=str(e),
                )

            if attempt < creation.poll_attempts:
                await self._sleep(creation.poll_interval_seconds)

        return False
