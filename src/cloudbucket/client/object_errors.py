"""Object store error ADT - failures reported by a storage backend.

Each backend classifies its SDK's exceptions into one of these frozen
dataclasses, so the client contract can pattern match on a closed set of
variants instead of on provider-specific error codes.
"""

from dataclasses import dataclass

from cloudbucket.errors import BucketError, ObjectNotFoundError, ObjectParseError, TransportError


@dataclass(frozen=True)
class BucketNotFound:
    """The bucket itself does not exist.

    Attributes:
        bucket_name: Name of the bucket that was not found
        message: Error message from the backend
    """

    bucket_name: str
    message: str


@dataclass(frozen=True)
class ObjectNotFound:
    """Object/key does not exist in bucket.

    Corresponds to S3 "NoSuchKey" / "404" and to GCS ``NotFound`` on a blob.

    Attributes:
        bucket_name: Name of the bucket
        key: Object key that was not found
        message: Error message from the backend
    """

    bucket_name: str
    key: str
    message: str


@dataclass(frozen=True)
class AccessDenied:
    """Credentials lack permission for the operation.

    Attributes:
        bucket_name: Name of the bucket being accessed
        operation: Backend operation that was denied (e.g. "GetObject")
        message: Error message from the backend
    """

    bucket_name: str
    operation: str
    message: str


@dataclass(frozen=True)
class NetworkError:
    """Backend unreachable, timed out, or throttling.

    Attributes:
        message: Error message from the backend
        retry_count: Number of retries attempted before failure
    """

    message: str
    retry_count: int


@dataclass(frozen=True)
class UnknownError:
    """Catch-all for backend errors that don't match a known pattern.

    Attributes:
        error_code: Error code from the backend response
        message: Error message from the backend
    """

    error_code: str
    message: str


ObjectStoreError = BucketNotFound | ObjectNotFound | AccessDenied | NetworkError | UnknownError


def decode_object(key: str, data: bytes) -> str:
    """Decode a stored payload as UTF-8; binary content is a parse failure."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ObjectParseError(key, f"content is not UTF-8 text: {e}") from e


def to_exception(error: ObjectStoreError, operation: str) -> BucketError:
    """Convert a classified backend failure into the contract's exception."""
    match error:
        case ObjectNotFound(bucket_name=bucket, key=key):
            return ObjectNotFoundError(bucket, key)
        case BucketNotFound(bucket_name=bucket, message=message):
            return TransportError(operation, f"bucket {bucket} not found: {message}", error)
        case AccessDenied(operation=denied, message=message):
            return TransportError(operation, f"access denied for {denied}: {message}", error)
        case NetworkError(message=message, retry_count=retries):
            return TransportError(operation, f"{message} (after {retries} retries)", error)
        case UnknownError(error_code=code, message=message):
            return TransportError(operation, f"{code}: {message}", error)


__all__ = [
    "BucketNotFound",
    "ObjectNotFound",
    "AccessDenied",
    "NetworkError",
    "UnknownError",
    "ObjectStoreError",
    "to_exception",
    "decode_object",
]
