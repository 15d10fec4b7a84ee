# src/cloudbucket/client/protocols.py
"""
Shared Protocol definitions for the S3 and GCS SDK clients.

``s3.py``, ``s3_operations.py``, ``gcs.py`` and the aioboto3 stub
(``stubs/aioboto3``) type the SDK clients through these Protocols, which keeps
the test fakes in ``tests/helpers`` interchangeable with the real clients.
"""

from __future__ import annotations

from types import TracebackType
from typing import AsyncIterator, Iterable, Protocol

from botocore.config import Config


# ---------------------------------------------------------------------------
# S3 Response Protocols
# ---------------------------------------------------------------------------


class StreamingBodyProtocol(Protocol):
    """Protocol for S3 StreamingBody."""

    async def read(self) -> bytes: ...


class S3ResponseProtocol(Protocol):
    """Protocol for S3 get_object response."""

    def __getitem__(self, key: str) -> object: ...


class PaginatorProtocol(Protocol):
    """Protocol for S3 paginator returned by get_paginator()."""

    def paginate(self, **kwargs: object) -> AsyncIterator[object]: ...


# ---------------------------------------------------------------------------
# S3 Client Protocol
# ---------------------------------------------------------------------------


class S3ClientProtocol(Protocol):
    """The subset of the aioboto3 S3 client the bucket backend calls."""

    async def put_object(self, **kwargs: object) -> object: ...
    async def get_object(self, **kwargs: object) -> S3ResponseProtocol: ...
    async def head_object(self, **kwargs: object) -> object: ...
    async def delete_object(self, **kwargs: object) -> object: ...
    def get_paginator(self, operation_name: str) -> PaginatorProtocol: ...


class AsyncContextManagerProtocol(Protocol):
    """Protocol for async context manager returned by session.client()."""

    async def __aenter__(self) -> S3ClientProtocol: ...
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None: ...


# ---------------------------------------------------------------------------
# GCS Protocols
# ---------------------------------------------------------------------------


class GcsBlobProtocol(Protocol):
    """The subset of ``google.cloud.storage.Blob`` the GCS backend calls."""

    @property
    def name(self) -> str: ...

    def exists(self) -> bool: ...
    def upload_from_string(self, data: str) -> None: ...
    def download_as_bytes(self) -> bytes: ...
    def delete(self) -> None: ...


class GcsBucketProtocol(Protocol):
    """The subset of ``google.cloud.storage.Bucket`` the GCS backend calls."""

    def blob(self, blob_name: str) -> GcsBlobProtocol: ...


class GcsClientProtocol(Protocol):
    """The subset of ``google.cloud.storage.Client`` the GCS backend calls."""

    def bucket(self, bucket_name: str) -> GcsBucketProtocol: ...
    def list_blobs(
        self, bucket_or_name: str, prefix: str | None = ...
    ) -> Iterable[GcsBlobProtocol]: ...


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class SessionProtocol(Protocol):
    """Protocol for aioboto3.Session."""

    def client(
        self,
        service_name: str,
        endpoint_url: str | None = ...,
        config: Config | None = ...,
        **kwargs: object,
    ) -> AsyncContextManagerProtocol: ...


__all__ = [
    "StreamingBodyProtocol",
    "S3ResponseProtocol",
    "PaginatorProtocol",
    "S3ClientProtocol",
    "AsyncContextManagerProtocol",
    "SessionProtocol",
    "GcsBlobProtocol",
    "GcsBucketProtocol",
    "GcsClientProtocol",
]
