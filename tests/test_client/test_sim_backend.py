# tests/test_client/test_sim_backend.py
"""Simulator backend specifics: shared live state and ordered listing."""

from __future__ import annotations

from types import MappingProxyType

import pytest

from cloudbucket.client.contract import BucketClient, ClientLocator
from cloudbucket.client.sim import SimBucketState, SimObjectBackend


def _client(state: SimBucketState) -> BucketClient:
    return BucketClient(ClientLocator(target="sim", bucket_name=state.name), SimObjectBackend(state))


@pytest.mark.asyncio
async def test_clients_share_bucket_state() -> None:
    state = SimBucketState(name="root/Bucket")
    writer, reader = _client(state), _client(state)
    await writer.put("KEY", "VALUE")
    assert await reader.get("KEY") == "VALUE"
    assert state.snapshot() == {"KEY": "VALUE"}


@pytest.mark.asyncio
async def test_list_is_sorted() -> None:
    state = SimBucketState(name="root/Bucket", objects={"b": "", "a": "", "c/d": ""})
    assert await _client(state).list() == ["a", "b", "c/d"]


@pytest.mark.asyncio
async def test_empty_body_is_a_real_object() -> None:
    client = _client(SimBucketState(name="root/Bucket"))
    await client.put("empty", "")
    assert await client.exists("empty") is True
    assert await client.get("empty") == ""
    assert await client.try_delete("empty") is True


def test_snapshot_is_read_only() -> None:
    state = SimBucketState(name="root/Bucket", objects={"k": "v"})
    snapshot = state.snapshot()
    assert isinstance(snapshot, MappingProxyType)
    state.objects["k"] = "changed"
    assert snapshot["k"] == "v"
