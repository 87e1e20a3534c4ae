"""In-memory implementation of KeyValueStore."""

import copy
from dataclasses import dataclass, field
from typing import Any

from dynamo_sessions.db.errors import NotFoundError
from dynamo_sessions.db.store import TABLE_ACTIVE, KeyValueStore


@dataclass
class _Table:
    hash_key: str
    items: dict[Any, dict[str, Any]] = field(default_factory=dict)
    pending_describes: int = 0
    ttl_attribute: str | None = None


class InMemoryKeyValueStore(KeyValueStore):
    """In-memory implementation of KeyValueStore for testing and development.

    Mirrors the DynamoDB behaviours the session engine relies on:
    - tables must exist before items are read or written
    - a freshly created table reports CREATING for `creating_describes`
      describe calls before turning ACTIVE
    - update_item upserts
    - expired items are never removed (there is no background reaper)

    Every call is appended to `calls` as `(operation, arguments)`.
    Not suitable for production use.
    """

    def __init__(self, creating_describes: int = 0) -> None:
        self._tables: dict[str, _Table] = {}
        self._creating_describes = creating_describes
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def add_table(self, table_name: str, hash_key: str = "id") -> None:
        """Register an already-active table, as if provisioned out of band."""
        self._tables[table_name] = _Table(hash_key=hash_key)

    def call_count(self, operation: str) -> int:
        """Number of recorded calls to `operation`."""
        return sum(1 for name, _ in self.calls if name == operation)

    def _table(self, table_name: str) -> _Table:
        table = self._tables.get(table_name)
        if table is None:
            raise NotFoundError(f"Table not found: {table_name}")
        return table

    def _key_value(self, table: _Table, key: dict[str, Any]) -> Any:
        return key[table.hash_key]

    async def describe_table(self, table_name: str) -> dict[str, Any]:
        self.calls.append(("describe_table", {"table_name": table_name}))
        table = self._table(table_name)

        if table.pending_describes > 0:
            table.pending_describes -= 1
            status = "CREATING"
        else:
            status = TABLE_ACTIVE

        return {
            "TableName": table_name,
            "TableStatus": status,
            "KeySchema": [{"AttributeName": table.hash_key, "KeyType": "HASH"}],
            "ItemCount": len(table.items),
        }

    async def create_table(
        self,
        table_name: str,
        hash_key: str,
        options: dict[str, Any] | None = None,
    ) -> None:
        self.calls.append(
            (
                "create_table",
                {"table_name": table_name, "hash_key": hash_key, "options": options or {}},
            )
        )
        self._tables[table_name] = _Table(
            hash_key=hash_key,
            pending_describes=self._creating_describes,
        )

    async def enable_expiration(self, table_name: str, attribute_name: str) -> None:
        self.calls.append(
            (
                "enable_expiration",
                {"table_name": table_name, "attribute_name": attribute_name},
            )
        )
        self._table(table_name).ttl_attribute = attribute_name

    def ttl_attribute(self, table_name: str) -> str | None:
        """TTL attribute enabled on a table, if any."""
        return self._table(table_name).ttl_attribute

    async def get_item(
        self,
        table_name: str,
        key: dict[str, Any],
        *,
        consistent_read: bool = False,
    ) -> dict[str, Any] | None:
        self.calls.append(
            (
                "get_item",
                {"table_name": table_name, "key": key, "consistent_read": consistent_read},
            )
        )
        table = self._table(table_name)
        item = table.items.get(self._key_value(table, key))
        return copy.deepcopy(item) if item is not None else None

    async def put_item(self, table_name: str, item: dict[str, Any]) -> None:
        self.calls.append(("put_item", {"table_name": table_name, "item": item}))
        table = self._table(table_name)
        table.items[self._key_value(table, item)] = copy.deepcopy(item)

    async def update_item(
        self,
        table_name: str,
        key: dict[str, Any],
        attributes: dict[str, Any],
    ) -> None:
        self.calls.append(
            (
                "update_item",
                {"table_name": table_name, "key": key, "attributes": attributes},
            )
        )
        table = self._table(table_name)
        item = table.items.setdefault(self._key_value(table, key), dict(key))
        item.update(copy.deepcopy(attributes))

    async def delete_item(self, table_name: str, key: dict[str, Any]) -> None:
        self.calls.append(("delete_item", {"table_name": table_name, "key": key}))
        table = self._table(table_name)
        table.items.pop(self._key_value(table, key), None)
