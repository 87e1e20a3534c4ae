"""aiobotocore client construction for DynamoDB."""

from typing import Any

from aiobotocore.config import AioConfig
from aiobotocore.session import AioSession, get_session

from dynamo_sessions.config.models.storage import AWSClientConfig
from dynamo_sessions.observability.logging import get_logger

logger = get_logger(__name__)


def create_dynamodb_client(config: AWSClientConfig) -> Any:
    """Create a DynamoDB client context manager.

    Usage:
        async with create_dynamodb_client(config) as client:
            await client.describe_table(TableName="sessions")

    Credentials come from the botocore default chain, optionally narrowed to
    `config.profile_name`.
    """
    session = AioSession(profile=config.profile_name) if config.profile_name else get_session()

    logger.debug(
        "creating_dynamodb_client",
        region=config.region_name,
        endpoint_url=config.endpoint_url,
        profile=config.profile_name,
    )

    return session.create_client(
        "dynamodb",
        region_name=config.region_name,
        endpoint_url=config.endpoint_url,
        config=AioConfig(
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
            retries={"max_attempts": config.max_attempts, "mode": "standard"},
        ),
    )
