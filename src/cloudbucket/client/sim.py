# src/cloudbucket/client/sim.py
"""In-memory object backend used by the simulator target."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from cloudbucket.errors import ObjectNotFoundError


logger = logging.getLogger(__name__)


@dataclass
class SimBucketState:
    """
    Contents of one simulated bucket.

    **Mutability Warning**: ``objects`` is the live store shared by every
    client of this bucket within the simulator. Use ``snapshot()`` for a
    read-only view.
    """

    name: str
    public: bool = False
    objects: dict[str, str] = field(default_factory=dict)

    def snapshot(self) -> Mapping[str, str]:
        return MappingProxyType(dict(self.objects))


class SimObjectBackend:
    """
    Object backend over a :class:`SimBucketState`.

    Mirrors cloud behaviour that tests depend on: reads of missing keys raise
    ObjectNotFoundError, listing is ordered by key, and every call yields to
    the event loop once so interleavings look like real round trips.
    """

    def __init__(self, state: SimBucketState) -> None:
        self._state = state

    @property
    def bucket_name(self) -> str:
        return self._state.name

    async def exists(self, key: str) -> bool:
        await asyncio.sleep(0)
        return key in self._state.objects

    async def put(self, key: str, body: str) -> None:
        await asyncio.sleep(0)
        self._state.objects[key] = body
        logger.debug("sim put %s/%s (%d chars)", self._state.name, key, len(body))

    async def get(self, key: str) -> str:
        await asyncio.sleep(0)
        try:
            return self._state.objects[key]
        except KeyError:
            raise ObjectNotFoundError(self._state.name, key) from None

    async def delete(self, key: str, *, must_exist: bool) -> None:
        await asyncio.sleep(0)
        if self._state.objects.pop(key, None) is None and must_exist:
            raise ObjectNotFoundError(self._state.name, key)
        logger.debug("sim delete %s/%s", self._state.name, key)

    async def list(self, prefix: str | None) -> list[str]:
        await asyncio.sleep(0)
        return sorted(k for k in self._state.objects if prefix is None or k.startswith(prefix))


__all__ = ["SimBucketState", "SimObjectBackend"]
