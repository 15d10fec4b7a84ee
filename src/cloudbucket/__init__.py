# src/cloudbucket/__init__.py
"""
One logical object-storage bucket, many deployment targets.

Preflight (build time):
    App, Bucket, Function and the per-target synthesizers in
    ``cloudbucket.targets`` turn a declaration into Terraform JSON or a
    simulator document, with least-privilege grants for every consumer.

Inflight (run time):
    ``connect(env_name)`` returns a :class:`BucketClient` whose semantics are
    the same on the simulator, S3 and GCS.
"""

from __future__ import annotations

from .app import App
from .binder import BindingGrant, BucketOperation, Permission, infer_grant
from .bucket import Bucket, BucketProps, Visibility
from .client import BucketClient, ClientLocator, Json
from .errors import (
    BucketError,
    CapabilityError,
    ConfigurationError,
    ObjectNotFoundError,
    ObjectParseError,
    TransportError,
    UnsupportedFeatureError,
)
from .hosts import Function, InflightHost
from .runtime import connect
from .simulator import Simulator
from .state import DeploymentState
from .targets import BUCKET_TARGETS, RuntimeContext


__all__ = [
    # Preflight
    "App",
    "Bucket",
    "BucketProps",
    "Visibility",
    "Function",
    "InflightHost",
    "DeploymentState",
    "BUCKET_TARGETS",
    # Binding
    "BindingGrant",
    "BucketOperation",
    "Permission",
    "infer_grant",
    # Inflight
    "BucketClient",
    "ClientLocator",
    "Json",
    "RuntimeContext",
    "Simulator",
    "connect",
    # Errors
    "BucketError",
    "CapabilityError",
    "ConfigurationError",
    "ObjectNotFoundError",
    "ObjectParseError",
    "TransportError",
    "UnsupportedFeatureError",
]
