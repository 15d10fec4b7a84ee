# tests/test_client/test_s3_backend.py
"""S3 backend: error classification and S3-specific behaviour."""

from __future__ import annotations

import pytest
from botocore.exceptions import EndpointConnectionError

from cloudbucket.client.object_errors import (
    AccessDenied,
    BucketNotFound,
    NetworkError,
    ObjectNotFound,
    UnknownError,
)
from cloudbucket.client.s3 import S3ObjectBackend
from cloudbucket.client.s3_operations import MAX_RETRIES, S3Operations
from cloudbucket.errors import ObjectNotFoundError, TransportError
from tests.helpers import FakeS3Client, client_error, expect_failure, expect_success


@pytest.mark.asyncio
async def test_operations_return_results(fake_s3: FakeS3Client) -> None:
    ops = S3Operations(fake_s3, base_delay=0.0)
    expect_success(await ops.put_object("test-bucket", "k", b"v"))
    assert expect_success(await ops.get_object("test-bucket", "k")) == b"v"
    assert expect_success(await ops.head_object("test-bucket", "k")) is True
    assert expect_success(await ops.head_object("test-bucket", "missing")) is False
    assert expect_success(await ops.list_objects("test-bucket")) == ["k"]


@pytest.mark.asyncio
async def test_missing_key_is_object_not_found(fake_s3: FakeS3Client) -> None:
    ops = S3Operations(fake_s3, base_delay=0.0)
    error = expect_failure(await ops.get_object("test-bucket", "missing"))
    assert isinstance(error, ObjectNotFound)
    assert error.key == "missing"


@pytest.mark.asyncio
async def test_missing_bucket_is_bucket_not_found(fake_s3: FakeS3Client) -> None:
    ops = S3Operations(fake_s3, base_delay=0.0)
    error = expect_failure(await ops.get_object("other-bucket", "k"))
    assert isinstance(error, BucketNotFound)
    assert error.bucket_name == "other-bucket"
    assert isinstance(expect_failure(await ops.list_objects("other-bucket")), BucketNotFound)


@pytest.mark.parametrize(
    ("code", "variant"),
    [
        ("AccessDenied", AccessDenied),
        ("InvalidAccessKeyId", AccessDenied),
        ("403", AccessDenied),
        ("RequestTimeout", NetworkError),
        ("InternalError", NetworkError),
        ("SomethingNew", UnknownError),
    ],
)
@pytest.mark.asyncio
async def test_error_codes_classified(fake_s3: FakeS3Client, code: str, variant: type[object]) -> None:
    ops = S3Operations(fake_s3, base_delay=0.0)
    fake_s3.fail_next("put_object", code)
    error = expect_failure(await ops.put_object("test-bucket", "k", b"v"))
    assert isinstance(error, variant)


@pytest.mark.asyncio
async def test_head_object_failure_other_than_absence(fake_s3: FakeS3Client) -> None:
    ops = S3Operations(fake_s3, base_delay=0.0)
    fake_s3.fail_next("head_object", "403")
    assert isinstance(expect_failure(await ops.head_object("test-bucket", "k")), AccessDenied)


@pytest.mark.asyncio
async def test_list_follows_pagination() -> None:
    fake = FakeS3Client(buckets={"b"}, page_size=2)
    backend = S3ObjectBackend("b", s3_client=fake)
    for i in range(5):
        await backend.put(f"key-{i}", "x")
    assert await backend.list(None) == [f"key-{i}" for i in range(5)]


@pytest.mark.asyncio
async def test_backend_raises_transport_error_for_denied(fake_s3: FakeS3Client) -> None:
    backend = S3ObjectBackend("test-bucket", s3_client=fake_s3)
    fake_s3.fail_next("get_object", "AccessDenied")
    with pytest.raises(TransportError) as excinfo:
        await backend.get("k")
    assert isinstance(excinfo.value.cause, AccessDenied)
    assert excinfo.value.operation == "get"


@pytest.mark.asyncio
async def test_exists_on_missing_bucket_is_transport_error() -> None:
    backend = S3ObjectBackend("nope", s3_client=FakeS3Client())
    with pytest.raises(TransportError) as excinfo:
        await backend.exists("k")
    assert isinstance(excinfo.value.cause, BucketNotFound)


@pytest.mark.asyncio
async def test_delete_must_exist_checks_first(fake_s3: FakeS3Client) -> None:
    backend = S3ObjectBackend("test-bucket", s3_client=fake_s3)
    with pytest.raises(ObjectNotFoundError):
        await backend.delete("k", must_exist=True)
    assert fake_s3.calls["head_object"] == 1
    assert fake_s3.calls["delete_object"] == 0

    await backend.delete("k", must_exist=False)
    assert fake_s3.calls["head_object"] == 1
    assert fake_s3.calls["delete_object"] == 1


@pytest.mark.asyncio
async def test_delete_propagates_denied(fake_s3: FakeS3Client) -> None:
    backend = S3ObjectBackend("test-bucket", s3_client=fake_s3)
    fake_s3.fail_next("delete_object", "AccessDenied")
    with pytest.raises(TransportError):
        await backend.delete("k", must_exist=False)


@pytest.mark.asyncio
async def test_botocore_connection_errors_become_transport_errors(
    fake_s3: FakeS3Client, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def unreachable(**kwargs: object) -> object:
        raise EndpointConnectionError(endpoint_url="https://s3.example.invalid")

    monkeypatch.setattr(fake_s3, "put_object", unreachable)
    backend = S3ObjectBackend("test-bucket", s3_client=fake_s3)
    with pytest.raises(TransportError, match="s3.example.invalid"):
        await backend.put("k", "v")


@pytest.mark.asyncio
async def test_throttling_exhaustion_is_network_error(fake_s3: FakeS3Client) -> None:
    ops = S3Operations(fake_s3, base_delay=0.0)
    fake_s3.fail_next("get_object", "SlowDown", times=MAX_RETRIES + 1)
    error = expect_failure(await ops.get_object("test-bucket", "k"))
    assert isinstance(error, NetworkError)
    assert error.retry_count == MAX_RETRIES
    assert fake_s3.calls["get_object"] == MAX_RETRIES + 1


def test_client_error_helper_carries_code() -> None:
    error = client_error("NoSuchKey", "GetObject")
    assert error.response["Error"]["Code"] == "NoSuchKey"
