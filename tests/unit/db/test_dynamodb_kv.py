"""Tests for DynamoDBKeyValueStore with a mocked aiobotocore client."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from dynamo_sessions.config.models.storage import AWSClientConfig
from dynamo_sessions.db.dynamodb import DynamoDBKeyValueStore, _from_dynamo, _to_dynamo
from dynamo_sessions.db.errors import ConnectionError, NotFoundError, StoreError, ValidationError


def _client_error(code: str, operation: str = "GetItem") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": "boom"}}, operation)


@pytest.fixture
def client() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def store(client: AsyncMock) -> DynamoDBKeyValueStore:
    return DynamoDBKeyValueStore(client)


class TestNumberConversion:
    """Tests for float/Decimal handling."""

    def test_floats_become_decimals(self) -> None:
        assert _to_dynamo({"a": [1.5, 2]}) == {"a": [Decimal("1.5"), 2]}

    def test_bools_untouched(self) -> None:
        assert _to_dynamo(True) is True

    def test_integral_decimals_become_ints(self) -> None:
        result = _from_dynamo({"n": Decimal("1714568400"), "f": Decimal("0.25")})
        assert result == {"n": 1714568400, "f": 0.25}
        assert isinstance(result["n"], int)


class TestItemOperations:
    """Tests for item reads and writes."""

    @pytest.mark.asyncio
    async def test_get_item_serializes_key(self, store, client) -> None:
        client.get_item.return_value = {
            "Item": {
                "id": {"S": "session#abc"},
                "expires": {"N": "1714568400"},
                "sess": {"M": {"user": {"S": "alice"}, "tags": {"L": [{"S": "a"}]}}},
            }
        }

        item = await store.get_item("sessions", {"id": "session#abc"}, consistent_read=True)

        client.get_item.assert_awaited_once_with(
            TableName="sessions",
            Key={"id": {"S": "session#abc"}},
            ConsistentRead=True,
        )
        assert item == {
            "id": "session#abc",
            "expires": 1714568400,
            "sess": {"user": "alice", "tags": ["a"]},
        }

    @pytest.mark.asyncio
    async def test_get_item_missing(self, store, client) -> None:
        client.get_item.return_value = {}
        assert await store.get_item("sessions", {"id": "x"}) is None

    @pytest.mark.asyncio
    async def test_put_item_marshals_values(self, store, client) -> None:
        await store.put_item(
            "sessions",
            {"id": "session#abc", "expires": 100, "sess": {"ratio": 0.5, "ok": True}},
        )

        client.put_item.assert_awaited_once_with(
            TableName="sessions",
            Item={
                "id": {"S": "session#abc"},
                "expires": {"N": "100"},
                "sess": {"M": {"ratio": {"N": "0.5"}, "ok": {"BOOL": True}}},
            },
        )

    @pytest.mark.asyncio
    async def test_update_item_builds_set_expression(self, store, client) -> None:
        await store.update_item("sessions", {"id": "session#abc"}, {"expires": 200})

        client.update_item.assert_awaited_once_with(
            TableName="sessions",
            Key={"id": {"S": "session#abc"}},
            UpdateExpression="SET #a0 = :v0",
            ExpressionAttributeNames={"#a0": "expires"},
            ExpressionAttributeValues={":v0": {"N": "200"}},
        )

    @pytest.mark.asyncio
    async def test_delete_item(self, store, client) -> None:
        await store.delete_item("sessions", {"id": "session#abc"})

        client.delete_item.assert_awaited_once_with(
            TableName="sessions",
            Key={"id": {"S": "session#abc"}},
        )


class TestTableOperations:
    """Tests for table management calls."""

    @pytest.mark.asyncio
    async def test_describe_table_returns_description(self, store, client) -> None:
        client.describe_table.return_value = {"Table": {"TableStatus": "ACTIVE"}}
        assert await store.describe_table("sessions") == {"TableStatus": "ACTIVE"}

    @pytest.mark.asyncio
    async def test_create_table_params(self, store, client) -> None:
        await store.create_table("sessions", "id", {"BillingMode": "PAY_PER_REQUEST"})

        client.create_table.assert_awaited_once_with(
            TableName="sessions",
            AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
            KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
            BillingMode="PAY_PER_REQUEST",
        )

    @pytest.mark.asyncio
    async def test_enable_expiration(self, store, client) -> None:
        await store.enable_expiration("sessions", "expires")

        client.update_time_to_live.assert_awaited_once_with(
            TableName="sessions",
            TimeToLiveSpecification={"AttributeName": "expires", "Enabled": True},
        )


class TestErrorTranslation:
    """Tests for botocore exception mapping."""

    @pytest.mark.asyncio
    async def test_resource_not_found(self, store, client) -> None:
        client.describe_table.side_effect = _client_error(
            "ResourceNotFoundException", "DescribeTable"
        )

        with pytest.raises(NotFoundError) as exc_info:
            await store.describe_table("sessions")
        assert isinstance(exc_info.value.cause, ClientError)

    @pytest.mark.asyncio
    async def test_other_client_errors(self, store, client) -> None:
        client.put_item.side_effect = _client_error("ProvisionedThroughputExceededException")

        with pytest.raises(ConnectionError, match="ProvisionedThroughputExceededException"):
            await store.put_item("sessions", {"id": "x"})

    @pytest.mark.asyncio
    async def test_transport_errors(self, store, client) -> None:
        client.get_item.side_effect = EndpointConnectionError(
            endpoint_url="http://localhost:8000"
        )

        with pytest.raises(ConnectionError):
            await store.get_item("sessions", {"id": "x"})


class TestConnect:
    """Tests for client ownership."""

    @pytest.mark.asyncio
    async def test_connect_owns_client(self, client) -> None:
        context = MagicMock()
        context.__aenter__.return_value = client

        with patch(
            "dynamo_sessions.db.dynamodb.create_dynamodb_client",
            return_value=context,
        ) as factory:
            config = AWSClientConfig(endpoint_url="http://localhost:8000")
            async with await DynamoDBKeyValueStore.connect(config) as kv:
                await kv.delete_item("sessions", {"id": "x"})

        factory.assert_called_once_with(config)
        client.delete_item.assert_awaited_once()
        context.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_without_connect_is_noop(self, store) -> None:
        await store.close()


class TestUnstorableValues:
    """Tests for values DynamoDB cannot represent."""

    @pytest.mark.asyncio
    async def test_nan_raises_validation_error(self, store, client) -> None:
        """NaN is rejected as a ValidationError before any request is sent."""
        with pytest.raises(ValidationError) as exc_info:
            await store.put_item("sessions", {"id": "x", "sess": {"score": float("nan")}})

        assert isinstance(exc_info.value, StoreError)
        assert exc_info.value.cause is not None
        client.put_item.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_infinity_in_update_raises_validation_error(self, store, client) -> None:
        """Infinity in an update is rejected as a ValidationError."""
        with pytest.raises(ValidationError):
            await store.update_item("sessions", {"id": "x"}, {"expires": float("inf")})

        client.update_item.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unsupported_type_raises_validation_error(self, store, client) -> None:
        """Arbitrary objects are rejected as a ValidationError."""
        with pytest.raises(ValidationError, match="sess"):
            await store.put_item("sessions", {"id": "x", "sess": {"obj": object()}})

        client.put_item.assert_not_awaited()
