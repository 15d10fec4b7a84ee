# tests/helpers/__init__.py
"""Shared test utilities: Result unwrapping and in-memory cloud fakes.

Usage:
    >>> from tests.helpers import expect_success, FakeS3Client
    >>> grant = expect_success(infer_grant("root/Bucket", "root/Function", ["get"]))
"""

from __future__ import annotations

from tests.helpers.fakes import FakeGcsClient, FakeS3Client, client_error
from tests.helpers.result_utils import expect_failure, expect_success


__all__ = [
    "expect_success",
    "expect_failure",
    "FakeS3Client",
    "FakeGcsClient",
    "client_error",
]
