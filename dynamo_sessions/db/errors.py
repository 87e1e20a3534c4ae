"""Store error hierarchy.

Key-value store implementations wrap backend-specific exceptions in one of
these classes so callers handle a single family of errors.
"""


class StoreError(Exception):
    """Base exception for all store errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConnectionError(StoreError):
    """Raised on transient infrastructure failures.

    Examples:
        - Network errors and timeouts
        - Throughput exceeded / throttling
        - Any other service error the backend reports
    """

    pass


class NotFoundError(StoreError):
    """Raised when a table does not exist.

    A missing row is not an error; item lookups return None instead.
    """

    pass


class ValidationError(StoreError):
    """Raised on malformed stored data.

    Examples:
        - Legacy string-encoded session payload that is not valid JSON
        - Payload whose cookie does not match the cookie schema
        - Attribute value DynamoDB cannot represent (NaN, Infinity, arbitrary objects)
    """

    pass
