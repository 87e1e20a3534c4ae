"""Storage backend configuration models."""

from typing import Any, Literal

from pydantic import BaseModel, Field

BackendType = Literal["dynamodb", "inmemory"]
BillingMode = Literal["PAY_PER_REQUEST", "PROVISIONED"]


class TableCreationConfig(BaseModel):
    """Settings for creating the session table when it does not exist.

    Intended for ad-hoc and test environments only. Production tables are
    provisioned out of band with TTL already enabled on `expires`.
    """

    billing_mode: BillingMode = Field(
        default="PAY_PER_REQUEST",
        description="Capacity mode of the created table",
    )
    extra_options: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional CreateTable parameters, merged over the defaults",
    )
    poll_attempts: int = Field(
        default=10,
        gt=0,
        description="How many times to check for ACTIVE status after creation",
    )
    poll_interval_seconds: float = Field(
        default=3.0,
        ge=0,
        description="Delay between table status checks (seconds)",
    )


class DynamoDBSessionConfig(BaseModel):
    """Session store configuration."""

    table_name: str = Field(
        default="sessions",
        min_length=1,
        description="Name of the DynamoDB table holding session records",
    )
    hash_key: str = Field(
        default="id",
        min_length=1,
        description="Partition key attribute name",
    )
    prefix: str = Field(
        default="session#",
        description="Prefix prepended to the session id to form the record key",
    )
    consistent_read: bool = Field(
        default=False,
        description="Use strongly consistent reads (2x read cost)",
    )
    touch_after: int = Field(
        default=3600,  # 1 hour
        ge=0,
        description=(
            "Skip TTL refreshes until this many seconds have elapsed since the "
            "last one; reduced to 10% of the session lifetime for short sessions"
        ),
    )
    default_ttl_seconds: int = Field(
        default=86400,  # 24 hours
        gt=0,
        description="Session lifetime used when the cookie carries no maxAge",
    )
    create_table: TableCreationConfig | None = Field(
        default=None,
        description="Create the table if missing (None disables creation)",
    )


class AWSClientConfig(BaseModel):
    """Connection settings for the aiobotocore DynamoDB client.

    Credentials are resolved by the default botocore chain (environment,
    shared profile, instance role) and are never read from config files.
    """

    region_name: str | None = Field(
        default=None,
        description="AWS region (None uses the botocore default chain)",
    )
    endpoint_url: str | None = Field(
        default=None,
        description="Endpoint override, e.g. http://localhost:8000 for DynamoDB Local",
    )
    profile_name: str | None = Field(
        default=None,
        description="Shared credentials profile",
    )
    connect_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Connection timeout in seconds",
    )
    read_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Read timeout in seconds",
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        description="botocore retry budget per request",
    )


class StorageConfig(BaseModel):
    """Configuration for the session storage backend."""

    backend: BackendType = Field(
        default="dynamodb",
        description="Key-value backend (dynamodb or inmemory)",
    )
    session: DynamoDBSessionConfig = Field(
        default_factory=DynamoDBSessionConfig,
        description="Session store settings",
    )
    aws: AWSClientConfig = Field(
        default_factory=AWSClientConfig,
        description="AWS client settings",
    )
