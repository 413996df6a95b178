"""Error taxonomy for the migration engine."""

from typing import Optional


class MigrationError(Exception):
    """Base class for all migration errors."""


class MalformedKeyError(MigrationError):
    """A key does not match the field schema of its transformer.

    This is a data-integrity signal and is never retried.
    """

    def __init__(self, key: str, expected_fields: Optional[int] = None):
        self.key = key
        self.expected_fields = expected_fields
        message = f"malformed key {key}"
        if expected_fields is not None:
            message += f" (expected {expected_fields} fields)"
        super().__init__(message)


class VerificationFailedError(MigrationError):
    """A transformed key is missing from the destination."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"key doesn't exist: {key}")


class TransportError(MigrationError):
    """A network or store error raised while talking to Redis."""

    def __init__(self, operation: str, key: Optional[str] = None, cause: Optional[Exception] = None):
        self.operation = operation
        self.key = key
        self.cause = cause
        message = f"{operation} failed"
        if key is not None:
            message += f" for key {key}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class ConfigurationError(MigrationError):
    """Invalid configuration or failed startup connectivity check."""
