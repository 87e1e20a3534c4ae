"""DynamoDB implementation of KeyValueStore on aiobotocore.

Items cross the boundary as plain Python mappings and are marshalled to
DynamoDB attribute values with boto3's TypeSerializer / TypeDeserializer.
DynamoDB has no float type, so floats are written as Decimal and numbers
are read back as int when integral, float otherwise. Values DynamoDB cannot
represent (NaN, Infinity, arbitrary objects) raise ValidationError.
"""

from collections.abc import Iterator
from contextlib import AsyncExitStack, contextmanager
from decimal import Decimal
from typing import Any

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from dynamo_sessions.config.models.storage import AWSClientConfig
from dynamo_sessions.db.client import create_dynamodb_client
from dynamo_sessions.db.errors import ConnectionError, NotFoundError, ValidationError
from dynamo_sessions.db.store import KeyValueStore
from dynamo_sessions.observability.logging import get_logger

logger = get_logger(__name__)


def _to_dynamo(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_dynamo(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_dynamo(v) for v in value]
    return value


def _from_dynamo(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_from_dynamo(v) for v in value]
    return value


@contextmanager
def _translate_errors(operation: str, table_name: str) -> Iterator[None]:
    """Map botocore exceptions onto the store error hierarchy."""
    try:
        yield
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code", "Unknown")
        if code == "ResourceNotFoundException":
            raise NotFoundError(
                f"{operation}: table {table_name} not found", cause=e
            ) from e
        logger.error(
            "dynamodb_client_error",
            operation=operation,
            table=table_name,
            code=code,
            error=str(e),
        )
        raise ConnectionError(
            f"{operation} failed on table {table_name}: {code}", cause=e
        ) from e
    except BotoCoreError as e:
        logger.error(
            "dynamodb_transport_error",
            operation=operation,
            table=table_name,
            error=str(e),
        )
        raise ConnectionError(
            f"{operation} failed on table {table_name}: {e}", cause=e
        ) from e


class DynamoDBKeyValueStore(KeyValueStore):
    """KeyValueStore backed by an aiobotocore DynamoDB client.

    Either wrap an already-entered client (the caller owns its lifetime), or
    use `connect()` so the store owns the client and releases it in `close()`:

        async with await DynamoDBKeyValueStore.connect(config) as kv:
            await kv.get_item("sessions", {"id": "session#abc"})
    """

    def __init__(self, client: Any) -> None:
        """Initialize with an entered aiobotocore DynamoDB client.

        Args:
            client: Client returned by `async with create_dynamodb_client(...)`
        """
        self._client = client
        self._exit_stack: AsyncExitStack | None = None
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    @classmethod
    async def connect(cls, config: AWSClientConfig) -> "DynamoDBKeyValueStore":
        """Open a client from configuration and return a store that owns it."""
        stack = AsyncExitStack()
        client = await stack.enter_async_context(create_dynamodb_client(config))
        store = cls(client)
        store._exit_stack = stack
        return store

    async def close(self) -> None:
        """Release the underlying client if this store opened it."""
        if self._exit_stack is not None:
            await self._exit_stack.aclose()
            self._exit_stack = None

    async def __aenter__(self) -> "DynamoDBKeyValueStore":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def _serialize(self, attributes: dict[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for name, value in attributes.items():
            try:
                result[name] = self._serializer.serialize(_to_dynamo(value))
            except (TypeError, ArithmeticError) as e:  # unsupported type, NaN, Infinity
                raise ValidationError(
                    f"Attribute {name!r} cannot be stored in DynamoDB: {e}", cause=e
                ) from e
        return result

    def _deserialize(self, attributes: dict[str, Any]) -> dict[str, Any]:
        return {
            name: _from_dynamo(self._deserializer.deserialize(value))
            for name, value in attributes.items()
        }

    async def describe_table(self, table_name: str) -> dict[str, Any]:
        with _translate_errors("describe_table", table_name):
            response = await self._client.describe_table(TableName=table_name)
        table: dict[str, Any] = response["Table"]
        return table

    async def create_table(
        self,
        table_name: str,
        hash_key: str,
        options: dict[str, Any] | None = None,
    ) -> None:
        params: dict[str, Any] = {
            "TableName": table_name,
            "AttributeDefinitions": [
                {"AttributeName": hash_key, "AttributeType": "S"},
            ],
            "KeySchema": [
                {"AttributeName": hash_key, "KeyType": "HASH"},
            ],
            **(options or {}),
        }
        with _translate_errors("create_table", table_name):
            await self._client.create_table(**params)

    async def enable_expiration(self, table_name: str, attribute_name: str) -> None:
        with _translate_errors("enable_expiration", table_name):
            await self._client.update_time_to_live(
                TableName=table_name,
                TimeToLiveSpecification={
                    "AttributeName": attribute_name,
                    "Enabled": True,
                },
            )

    async def get_item(
        self,
        table_name: str,
        key: dict[str, Any],
        *,
        consistent_read: bool = False,
    ) -> dict[str, Any] | None:
        with _translate_errors("get_item", table_name):
            response = await self._client.get_item(
                TableName=table_name,
                Key=self._serialize(key),
                ConsistentRead=consistent_read,
            )
        item = response.get("Item")
        if not item:
            return None
        return self._deserialize(item)

    async def put_item(self, table_name: str, item: dict[str, Any]) -> None:
        with _translate_errors("put_item", table_name):
            await self._client.put_item(
                TableName=table_name,
                Item=self._serialize(item),
            )

    async def update_item(
        self,
        table_name: str,
        key: dict[str, Any],
        attributes: dict[str, Any],
    ) -> None:
        names: dict[str, str] = {}
        values: dict[str, Any] = {}
        assignments: list[str] = []
        for index, (name, value) in enumerate(attributes.items()):
            names[f"#a{index}"] = name
            values[f":v{index}"] = value
            assignments.append(f"#a{index} = :v{index}")

        with _translate_errors("update_item", table_name):
            await self._client.update_item(
                TableName=table_name,
                Key=self._serialize(key),
                UpdateExpression="SET " + ", ".join(assignments),
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=self._serialize(values),
            )

    async def delete_item(self, table_name: str, key: dict[str, Any]) -> None:
        with _translate_errors("delete_item", table_name):
            await self._client.delete_item(
                TableName=table_name,
                Key=self._serialize(key),
            )
