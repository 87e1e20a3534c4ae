"""Observability: structured logging.

Provides standardized logging primitives built on structlog.
"""

from dynamo_sessions.observability.logging import (
    PIIRedactor,
    get_logger,
    setup_logging,
    setup_logging_from_config,
)

__all__ = [
    "PIIRedactor",
    "get_logger",
    "setup_logging",
    "setup_logging_from_config",
]
