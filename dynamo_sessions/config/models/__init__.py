"""Configuration model exports.

    from dynamo_sessions.config.models import DynamoDBSessionConfig, StorageConfig
"""

from dynamo_sessions.config.models.observability import (
    LoggingConfig,
    ObservabilityConfig,
)
from dynamo_sessions.config.models.storage import (
    AWSClientConfig,
    DynamoDBSessionConfig,
    StorageConfig,
    TableCreationConfig,
)

__all__ = [
    # Observability
    "LoggingConfig",
    "ObservabilityConfig",
    # Storage
    "AWSClientConfig",
    "DynamoDBSessionConfig",
    "StorageConfig",
    "TableCreationConfig",
]
