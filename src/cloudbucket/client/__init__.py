# src/cloudbucket/client/__init__.py
"""Inflight bucket clients: the shared contract and one backend per target."""

from __future__ import annotations

from .contract import BucketClient, ClientLocator, Json, ObjectBackend
from .gcs import GcsObjectBackend
from .object_errors import (
    AccessDenied,
    BucketNotFound,
    NetworkError,
    ObjectNotFound,
    ObjectStoreError,
    UnknownError,
)
from .retry import retry_on_throttle
from .s3 import S3ObjectBackend
from .sim import SimBucketState, SimObjectBackend


__all__ = [
    "BucketClient",
    "ClientLocator",
    "Json",
    "ObjectBackend",
    # Backends
    "SimBucketState",
    "SimObjectBackend",
    "S3ObjectBackend",
    "GcsObjectBackend",
    # Error ADT
    "BucketNotFound",
    "ObjectNotFound",
    "AccessDenied",
    "NetworkError",
    "UnknownError",
    "ObjectStoreError",
    "retry_on_throttle",
]
