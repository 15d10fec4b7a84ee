# src/cloudbucket/client/s3.py
"""
S3 object backend on top of aioboto3.

The aioboto3 client is an async context manager. The backend opens it lazily
on first use so a consumer can construct a client at startup without an
``async with`` block; ``async with`` and ``aclose()`` are available when the
caller wants deterministic cleanup.
"""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType
from typing import TypeVar

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError

from cloudbucket.client.object_errors import (
    ObjectNotFound,
    ObjectStoreError,
    decode_object,
    to_exception,
)
from cloudbucket.client.protocols import AsyncContextManagerProtocol, S3ClientProtocol
from cloudbucket.client.s3_operations import S3Operations
from cloudbucket.config import AwsSettings
from cloudbucket.errors import ObjectNotFoundError, TransportError
from cloudbucket.result import Failure, Result, Success


logger = logging.getLogger(__name__)

T = TypeVar("T")


class S3ObjectBackend:
    """
    ObjectBackend for Amazon S3 (or any S3-compatible endpoint such as MinIO).

    Args:
        bucket_name: Physical bucket name
        settings: Region, endpoint and credentials (defaults read nothing from env)
        s3_client: Pre-built client; when given the backend never opens a session
    """

    def __init__(
        self,
        bucket_name: str,
        settings: AwsSettings | None = None,
        s3_client: S3ClientProtocol | None = None,
    ) -> None:
        self._bucket_name = bucket_name
        self._settings = settings or AwsSettings()
        self._boto_config = Config(
            max_pool_connections=self._settings.max_pool_connections,
            connect_timeout=self._settings.connect_timeout,
            read_timeout=self._settings.read_timeout,
            retries={"max_attempts": 3, "mode": "adaptive"},
        )
        self._client_context: AsyncContextManagerProtocol | None = None
        self._s3_ops: S3Operations | None = S3Operations(s3_client) if s3_client is not None else None
        self._open_lock = asyncio.Lock()

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    async def __aenter__(self) -> S3ObjectBackend:
        await self._operations()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the session client if this backend opened one."""
        client_ctx = self._client_context
        if client_ctx is not None:
            self._client_context = None
            self._s3_ops = None
            await client_ctx.__aexit__(None, None, None)

    async def _operations(self) -> S3Operations:
        if self._s3_ops is not None:
            return self._s3_ops
        async with self._open_lock:
            if self._s3_ops is None:
                session = aioboto3.Session(
                    aws_access_key_id=self._settings.aws_access_key_id,
                    aws_secret_access_key=self._settings.aws_secret_access_key,
                    region_name=self._settings.region_name,
                )
                client_context = session.client(
                    "s3",
                    endpoint_url=self._settings.endpoint_url,
                    config=self._boto_config,
                )
                s3_client = await client_context.__aenter__()
                self._client_context = client_context
                self._s3_ops = S3Operations(s3_client)
                logger.debug("opened S3 client for bucket %s", self._bucket_name)
            return self._s3_ops

    def _unwrap(self, result: Result[T, ObjectStoreError], operation: str) -> T:
        match result:
            case Success(value):
                return value
            case Failure(error):
                raise to_exception(error, operation)

    async def exists(self, key: str) -> bool:
        ops = await self._operations()
        try:
            return self._unwrap(await ops.head_object(self._bucket_name, key), "exists")
        except BotoCoreError as e:
            raise TransportError("exists", str(e)) from e

    async def put(self, key: str, body: str) -> None:
        ops = await self._operations()
        try:
            self._unwrap(
                await ops.put_object(self._bucket_name, key, body.encode("utf-8")),
                "put",
            )
        except BotoCoreError as e:
            raise TransportError("put", str(e)) from e

    async def get(self, key: str) -> str:
        ops = await self._operations()
        try:
            data = self._unwrap(await ops.get_object(self._bucket_name, key), "get")
        except BotoCoreError as e:
            raise TransportError("get", str(e)) from e
        return decode_object(key, data)

    async def delete(self, key: str, *, must_exist: bool) -> None:
        # S3 deletes idempotently, so absence is only detectable with a HEAD request first
        if must_exist and not await self.exists(key):
            raise ObjectNotFoundError(self._bucket_name, key)
        ops = await self._operations()
        try:
            match await ops.delete_object(self._bucket_name, key):
                case Failure(ObjectNotFound()) if not must_exist:
                    return
                case result:
                    self._unwrap(result, "delete")
        except BotoCoreError as e:
            raise TransportError("delete", str(e)) from e

    async def list(self, prefix: str | None) -> list[str]:
        ops = await self._operations()
        try:
            return self._unwrap(await ops.list_objects(self._bucket_name, prefix or ""), "list")
        except BotoCoreError as e:
            raise TransportError("list", str(e)) from e


__all__ = ["S3ObjectBackend"]
