"""KeyValueStore abstract interface."""

from abc import ABC, abstractmethod
from typing import Any

# Table status reported once a table accepts reads and writes
TABLE_ACTIVE = "ACTIVE"


class KeyValueStore(ABC):
    """Abstract interface for the table-oriented key-value backend.

    Covers exactly what the session engine and table bootstrapper need:
    table metadata and creation, native expiration, and single-item
    get/put/update/delete by primary key. Items and keys are plain
    Python mappings.
    """

    @abstractmethod
    async def describe_table(self, table_name: str) -> dict[str, Any]:
        """Return table metadata (including `TableStatus`).

        Raises:
            NotFoundError: If the table does not exist
        """
        pass

    @abstractmethod
    async def create_table(
        self,
        table_name: str,
        hash_key: str,
        options: dict[str, Any] | None = None,
    ) -> None:
        """Create a table with `hash_key` as its sole string partition key."""
        pass

    @abstractmethod
    async def enable_expiration(self, table_name: str, attribute_name: str) -> None:
        """Enable native TTL expiration on an epoch-seconds attribute."""
        pass

    @abstractmethod
    async def get_item(
        self,
        table_name: str,
        key: dict[str, Any],
        *,
        consistent_read: bool = False,
    ) -> dict[str, Any] | None:
        """Get an item by primary key, or None if absent."""
        pass

    @abstractmethod
    async def put_item(self, table_name: str, item: dict[str, Any]) -> None:
        """Write a full item, replacing any existing one."""
        pass

    @abstractmethod
    async def update_item(
        self,
        table_name: str,
        key: dict[str, Any],
        attributes: dict[str, Any],
    ) -> None:
        """Set only the given top-level attributes on an item."""
        pass

    @abstractmethod
    async def delete_item(self, table_name: str, key: dict[str, Any]) -> None:
        """Delete an item by primary key. Deleting an absent item succeeds."""
        pass
