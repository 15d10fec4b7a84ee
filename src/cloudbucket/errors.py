# src/cloudbucket/errors.py
"""Exception hierarchy for bucket resources and bucket clients."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cloudbucket.client.object_errors import ObjectStoreError


class BucketError(Exception):
    """Base exception for all bucket-related errors."""

    pass


class ObjectNotFoundError(BucketError):
    """Requested key is absent from the bucket."""

    def __init__(self, bucket: str, key: str) -> None:
        self.bucket = bucket
        self.key = key
        super().__init__(f"Object does not exist (key={key}, bucket={bucket})")


class ObjectParseError(BucketError):
    """Stored object is not UTF-8 text, or not valid JSON when read as JSON."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        self.message = message
        super().__init__(f"Object could not be parsed (key={key}): {message}")


class TransportError(BucketError):
    """Backend unreachable or rejected a call for reasons unrelated to key existence."""

    def __init__(self, operation: str, message: str, cause: ObjectStoreError | None = None) -> None:
        self.operation = operation
        self.message = message
        self.cause = cause
        super().__init__(f"Bucket {operation} failed: {message}")


class CapabilityError(BucketError):
    """A consumer cannot be bound to a resource for the requested operations."""

    def __init__(self, resource: str, consumer: str, operation: str | None, message: str) -> None:
        self.resource = resource
        self.consumer = consumer
        self.operation = operation
        super().__init__(message)


class UnsupportedFeatureError(BucketError):
    """A stub capability was invoked on a target that does not implement it."""

    def __init__(self, feature: str, message: str) -> None:
        self.feature = feature
        super().__init__(message)


class ConfigurationError(BucketError):
    """Invalid settings, manifest, or target selection."""

    pass


__all__ = [
    "BucketError",
    "ObjectNotFoundError",
    "ObjectParseError",
    "TransportError",
    "CapabilityError",
    "UnsupportedFeatureError",
    "ConfigurationError",
]
