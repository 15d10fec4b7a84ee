# src/cloudbucket/client/contract.py
"""
The bucket client contract shared by every deployment target.

A target only supplies an :class:`ObjectBackend` - five primitives that talk to
the real store and normalise "not found" into :class:`ObjectNotFoundError`.
:class:`BucketClient` layers the rest of the contract on top (JSON helpers,
``try_*`` compositions, the ``public_url`` stub), so behaviour is identical
whichever backend holds the bytes.

``try_get``, ``try_get_json`` and ``try_delete`` are check-then-act: an
``exists`` check followed by the primary call. Another actor may create or
delete the object between the two calls, so ``try_get`` can still raise
:class:`ObjectNotFoundError` and ``try_delete`` can return a stale answer.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Protocol, TypeAlias

from cloudbucket.errors import ObjectNotFoundError, ObjectParseError, UnsupportedFeatureError


logger = logging.getLogger(__name__)

Json: TypeAlias = str | int | float | bool | None | dict[str, "Json"] | list["Json"]


class ObjectBackend(Protocol):
    """Storage primitives a target must provide."""

    @property
    def bucket_name(self) -> str: ...

    async def exists(self, key: str) -> bool: ...

    async def put(self, key: str, body: str) -> None: ...

    async def get(self, key: str) -> str:
        """Return the object body; raise ObjectNotFoundError when absent."""
        ...

    async def delete(self, key: str, *, must_exist: bool) -> None:
        """
        Remove the object.

        Must raise ObjectNotFoundError when ``must_exist`` is set and the key is
        absent. Otherwise absence may either pass silently or raise
        ObjectNotFoundError; the client tolerates both.
        """
        ...

    async def list(self, prefix: str | None) -> list[str]: ...


@dataclass(frozen=True)
class ClientLocator:
    """Where a client points: target id, physical bucket name, visibility."""

    target: str
    bucket_name: str
    public: bool = False


class BucketClient:
    """
    Inflight client for a single bucket.

    Holds only the immutable locator and the backend handle; every call is a
    fresh round trip, so one instance may be shared by concurrent tasks.

    Usage:
        client = connect("BUCKET_NAME_1A2B3C4D")
        await client.put_json("config.json", {"cool": "beans"})
        config = await client.try_get_json("config.json")
    """

    def __init__(self, locator: ClientLocator, backend: ObjectBackend) -> None:
        self._locator = locator
        self._backend = backend

    @property
    def locator(self) -> ClientLocator:
        return self._locator

    @property
    def bucket_name(self) -> str:
        return self._locator.bucket_name

    @property
    def backend(self) -> ObjectBackend:
        return self._backend

    async def exists(self, key: str) -> bool:
        return await self._backend.exists(key)

    async def put(self, key: str, body: str) -> None:
        logger.debug("put %s/%s (%d chars)", self.bucket_name, key, len(body))
        await self._backend.put(key, body)

    async def put_json(self, key: str, value: Json) -> None:
        # TypeError/ValueError from json.dumps propagate as the serialization error
        await self.put(key, json.dumps(value, indent=2))

    async def get(self, key: str) -> str:
        return await self._backend.get(key)

    async def try_get(self, key: str) -> str | None:
        if await self.exists(key):
            return await self.get(key)
        return None

    async def get_json(self, key: str) -> Json:
        body = await self.get(key)
        try:
            parsed: Json = json.loads(body)
        except json.JSONDecodeError as exc:
            raise ObjectParseError(key, str(exc)) from exc
        return parsed

    async def try_get_json(self, key: str) -> Json | None:
        if await self.exists(key):
            return await self.get_json(key)
        return None

    async def delete(self, key: str, *, must_exist: bool = False) -> None:
        """
        Delete an object.

        With ``must_exist=False`` only absence is tolerated; transport errors
        always propagate.
        """
        try:
            await self._backend.delete(key, must_exist=must_exist)
        except ObjectNotFoundError:
            if must_exist:
                raise
            logger.debug("delete %s/%s: already absent", self.bucket_name, key)

    async def try_delete(self, key: str) -> bool:
        if await self.exists(key):
            await self.delete(key)
            return True
        return False

    async def list(self, prefix: str | None = None) -> list[str]:
        return await self._backend.list(prefix)

    async def public_url(self, key: str) -> str:
        raise UnsupportedFeatureError(
            "public_url",
            f"public_url is not supported yet. (key={key}, public={self._locator.public})",
        )


__all__ = ["Json", "ObjectBackend", "ClientLocator", "BucketClient"]
