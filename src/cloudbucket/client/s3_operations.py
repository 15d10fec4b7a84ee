"""Functional S3 operations wrapper using Result types.

Wraps every boto ``ClientError`` into the object-store error ADT so the S3
backend can pattern match on outcomes instead of on raw error codes.
Throttled calls are retried with exponential backoff before classification.
"""

from __future__ import annotations

import logging

from botocore.exceptions import ClientError

from cloudbucket.client.object_errors import (
    AccessDenied,
    BucketNotFound,
    NetworkError,
    ObjectNotFound,
    ObjectStoreError,
    UnknownError,
)
from cloudbucket.client.protocols import S3ClientProtocol
from cloudbucket.client.retry import THROTTLING_CODES, retry_on_throttle
from cloudbucket.result import Failure, Result, Success


logger = logging.getLogger(__name__)

MAX_RETRIES = 5

_MISSING_KEY_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


class S3Operations:
    """Pure functional interface for S3 operations.

    All methods return ``Result[T, ObjectStoreError]`` instead of raising.

    Example:
        ```python
        s3_ops = S3Operations(s3_client)
        match await s3_ops.get_object("my-bucket", "my-key"):
            case Success(data):
                process(data)
            case Failure(ObjectNotFound(bucket_name=bucket, key=key)):
                logger.info("%s missing from %s", key, bucket)
            case Failure(error):
                logger.error("S3 error: %s", error)
        ```
    """

    def __init__(self, s3_client: S3ClientProtocol, *, base_delay: float = 0.1) -> None:
        self._client = s3_client
        self._retry = retry_on_throttle(max_retries=MAX_RETRIES, base_delay=base_delay)

    async def get_object(self, bucket: str, key: str) -> Result[bytes, ObjectStoreError]:
        """Get object bytes; ObjectNotFound when the key is absent."""

        async def call() -> bytes:
            response = await self._client.get_object(Bucket=bucket, Key=key)
            body = response["Body"]
            read = getattr(body, "read", None)
            if read is None:
                raise TypeError(f"Expected streaming body with read() method, got {type(body)}")
            data = await read()
            if not isinstance(data, bytes):
                raise TypeError(f"Expected bytes from S3, got {type(data)}")
            return data

        try:
            return Success(await self._retry(call)())
        except ClientError as e:
            return Failure(self._classify_error(e, bucket, key, "GetObject"))

    async def put_object(
        self, bucket: str, key: str, body: bytes, **kwargs: object
    ) -> Result[None, ObjectStoreError]:
        """Put object bytes. Extra kwargs (e.g. ContentType) are passed through."""

        async def call() -> None:
            await self._client.put_object(Bucket=bucket, Key=key, Body=body, **kwargs)

        try:
            await self._retry(call)()
            return Success(None)
        except ClientError as e:
            return Failure(self._classify_error(e, bucket, key, "PutObject"))

    async def head_object(self, bucket: str, key: str) -> Result[bool, ObjectStoreError]:
        """Check for an object. Absence is Success(False), not a failure."""

        async def call() -> None:
            await self._client.head_object(Bucket=bucket, Key=key)

        try:
            await self._retry(call)()
            return Success(True)
        except ClientError as e:
            if e.response["Error"]["Code"] in _MISSING_KEY_CODES:
                return Success(False)
            return Failure(self._classify_error(e, bucket, key, "HeadObject"))

    async def delete_object(self, bucket: str, key: str) -> Result[None, ObjectStoreError]:
        """Delete an object. S3 reports success whether or not the key existed."""

        async def call() -> None:
            await self._client.delete_object(Bucket=bucket, Key=key)

        try:
            await self._retry(call)()
            return Success(None)
        except ClientError as e:
            return Failure(self._classify_error(e, bucket, key, "DeleteObject"))

    async def list_objects(self, bucket: str, prefix: str = "") -> Result[list[str], ObjectStoreError]:
        """List object keys with an optional prefix, following pagination."""
        try:
            keys: list[str] = []
            paginator = self._client.get_paginator("list_objects_v2")
            async for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
                contents = page.get("Contents", []) if isinstance(page, dict) else []
                keys.extend(
                    obj["Key"]
                    for obj in contents
                    if isinstance(obj, dict) and isinstance(obj.get("Key"), str)
                )
            return Success(keys)
        except ClientError as e:
            return Failure(self._classify_error(e, bucket, "", "ListObjectsV2"))

    def _classify_error(
        self, error: ClientError, bucket: str, key: str, operation: str
    ) -> ObjectStoreError:
        """Classify a boto ClientError into an ObjectStoreError variant."""
        error_code = error.response["Error"]["Code"]
        message = error.response["Error"].get("Message", "")
        logger.debug("%s %s/%s failed with %s", operation, bucket, key, error_code)

        match error_code:
            case "NoSuchBucket":
                return BucketNotFound(bucket_name=bucket, message=message)

            case "NoSuchKey" | "404" | "NotFound":
                return ObjectNotFound(bucket_name=bucket, key=key, message=message)

            case "AccessDenied" | "Forbidden" | "403" | "InvalidAccessKeyId" | "SignatureDoesNotMatch":
                return AccessDenied(bucket_name=bucket, operation=operation, message=message)

            case code if code in THROTTLING_CODES:
                return NetworkError(message=message, retry_count=MAX_RETRIES)

            case "RequestTimeout" | "InternalError":
                return NetworkError(message=message, retry_count=0)

            case _:
                return UnknownError(error_code=error_code, message=message)


__all__ = ["S3Operations", "MAX_RETRIES"]
