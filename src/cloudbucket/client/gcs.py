# src/cloudbucket/client/gcs.py
"""
Google Cloud Storage object backend.

google-cloud-storage is a blocking SDK, so each call runs in a worker thread
via ``asyncio.to_thread`` and the event loop stays free for other work.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Callable, TypeVar

from google.api_core import exceptions as gexc
from google.auth.exceptions import DefaultCredentialsError
from google.cloud import storage

from cloudbucket.client.object_errors import (
    AccessDenied,
    BucketNotFound,
    NetworkError,
    ObjectNotFound,
    ObjectStoreError,
    UnknownError,
    decode_object,
    to_exception,
)
from cloudbucket.client.protocols import GcsBlobProtocol, GcsClientProtocol
from cloudbucket.errors import BucketError, ObjectNotFoundError, TransportError


logger = logging.getLogger(__name__)

T = TypeVar("T")


def classify_google_error(
    error: gexc.GoogleAPIError, bucket: str, key: str, operation: str
) -> ObjectStoreError:
    """Classify a google-api-core exception into an ObjectStoreError variant."""
    message = str(error)
    match error:
        case gexc.NotFound() if key:
            return ObjectNotFound(bucket_name=bucket, key=key, message=message)
        case gexc.NotFound():
            return BucketNotFound(bucket_name=bucket, message=message)
        case gexc.Forbidden() | gexc.Unauthorized():
            return AccessDenied(bucket_name=bucket, operation=operation, message=message)
        case gexc.TooManyRequests() | gexc.ServiceUnavailable() | gexc.DeadlineExceeded():
            return NetworkError(message=message, retry_count=0)
        case gexc.GoogleAPICallError(code=code):
            return UnknownError(error_code=str(code), message=message)
        case _:
            return UnknownError(error_code=type(error).__name__, message=message)


class GcsObjectBackend:
    """
    ObjectBackend for a Google Cloud Storage bucket.

    Args:
        bucket_name: Physical bucket name
        project_id: GCP project; None uses application default credentials' project
        client: Pre-built ``google.cloud.storage.Client`` or a compatible fake
    """

    def __init__(
        self,
        bucket_name: str,
        project_id: str | None = None,
        client: GcsClientProtocol | None = None,
    ) -> None:
        self._bucket_name = bucket_name
        self._project_id = project_id
        self._client: GcsClientProtocol | None = client
        # first calls may race in separate worker threads
        self._client_lock = threading.Lock()

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    def _storage(self) -> GcsClientProtocol:
        with self._client_lock:
            if self._client is None:
                try:
                    self._client = storage.Client(project=self._project_id)
                except DefaultCredentialsError as e:
                    raise TransportError("connect", f"no Google credentials available: {e}") from e
                logger.debug("created GCS client for project %s", self._project_id)
            return self._client

    def _blob(self, key: str) -> GcsBlobProtocol:
        return self._storage().bucket(self._bucket_name).blob(key)

    async def _call(self, operation: str, key: str, fn: Callable[[], T]) -> T:
        try:
            return await asyncio.to_thread(fn)
        except gexc.GoogleAPIError as e:
            raise to_exception(
                classify_google_error(e, self._bucket_name, key, operation), operation
            ) from e

    async def exists(self, key: str) -> bool:
        try:
            return await self._call("exists", key, lambda: bool(self._blob(key).exists()))
        except BucketError as e:
            # exists() must not report absence as an error; anything else is transport
            raise TransportError("exists", f"Failed to check if object exists. (key={key})") from e

    async def put(self, key: str, body: str) -> None:
        await self._call("put", key, lambda: self._blob(key).upload_from_string(body))

    async def get(self, key: str) -> str:
        data = await self._call("get", key, lambda: self._blob(key).download_as_bytes())
        return decode_object(key, data)

    async def delete(self, key: str, *, must_exist: bool) -> None:
        try:
            await self._call("delete", key, lambda: self._blob(key).delete())
        except ObjectNotFoundError:
            if must_exist:
                raise
            logger.debug("GCS delete of absent key %s/%s", self._bucket_name, key)

    async def list(self, prefix: str | None) -> list[str]:
        def names() -> list[str]:
            return [blob.name for blob in self._storage().list_blobs(self._bucket_name, prefix=prefix)]

        return await self._call("list", "", names)


__all__ = ["GcsObjectBackend", "classify_google_error"]
