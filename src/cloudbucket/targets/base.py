# src/cloudbucket/targets/base.py
"""
The per-target strategy record.

Each deployment target is one :class:`BucketTarget` value in the registry
(``cloudbucket.targets.BUCKET_TARGETS``) rather than a subclass of the
logical bucket.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Mapping

from cloudbucket.client.contract import BucketClient, ClientLocator
from cloudbucket.config import TARGET_ENV, AwsSettings, GcpSettings
from cloudbucket.errors import CapabilityError, ConfigurationError
from cloudbucket.hosts import Function
from cloudbucket.result import Failure, Success
from cloudbucket.validation import describe_validation_error

if TYPE_CHECKING:
    from cloudbucket.app import App
    from cloudbucket.binder import BindingGrant, Permission
    from cloudbucket.bucket import Bucket
    from cloudbucket.client.protocols import GcsClientProtocol, S3ClientProtocol
    from cloudbucket.hosts import InflightHost
    from cloudbucket.simulator import Simulator


@dataclass(frozen=True)
class RuntimeContext:
    """
    Process-level inputs a target needs to build a client.

    Attributes:
        simulator: Running simulator (``sim`` target only)
        aws: S3 connection settings (``tf-aws``)
        gcp: GCS project settings (``tf-gcp``)
        s3_client: Pre-built aioboto3-compatible client, bypassing session setup
        gcs_client: Pre-built google-cloud-storage client
    """

    simulator: Simulator | None = None
    aws: AwsSettings | None = None
    gcp: GcpSettings | None = None
    s3_client: S3ClientProtocol | None = None
    gcs_client: GcsClientProtocol | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = os.environ) -> RuntimeContext:
        match AwsSettings.from_env(environ), GcpSettings.from_env(environ):
            case Success(aws), Success(gcp):
                return cls(aws=aws, gcp=gcp)
            case Failure(error), _:
                raise ConfigurationError(describe_validation_error(error))
            case _, Failure(error):
                raise ConfigurationError(describe_validation_error(error))
        raise AssertionError("Unreachable: settings results are exhaustive")


@dataclass(frozen=True)
class BucketTarget:
    """
    Strategy entry for one deployment target.

    Attributes:
        target_id: Registry key, e.g. "tf-gcp"
        output_file: File name ``App.synth`` writes the rendered document to
        synthesize: Emit the bucket's infrastructure (and its grants) into the app
        bind_consumer: Validate the host and wire environment + grant onto it
        make_client: Build the inflight client for a locator at run time
        render: Produce the target's output document from a synthesized app
    """

    target_id: str
    output_file: str
    synthesize: Callable[[Bucket, App], None]
    bind_consumer: Callable[[Bucket, InflightHost, BindingGrant], None]
    make_client: Callable[[ClientLocator, RuntimeContext], BucketClient]
    render: Callable[[App], dict[str, object]]


def require_function_host(target_id: str, bucket: Bucket, host: InflightHost) -> Function:
    """Buckets can only be bound by functions; anything else is a CapabilityError."""
    if not isinstance(host, Function):
        raise CapabilityError(
            resource=bucket.path,
            consumer=host.path,
            operation=None,
            message=(
                f"Buckets can only be bound by functions on the {target_id} target for now "
                f"({host.path} is a {type(host).__name__})."
            ),
        )
    return host


def add_bucket_environment(target_id: str, bucket: Bucket, host: InflightHost, name: str) -> None:
    """Environment every target injects: target id, physical name, visibility."""
    host.add_environment(TARGET_ENV, target_id)
    host.add_environment(bucket.env_name, name)
    host.add_environment(bucket.public_env_name, "true" if bucket.public else "false")


def permissions_by_host(
    bucket: Bucket, app: App
) -> list[tuple[InflightHost, frozenset[Permission]]]:
    """
    Hosts bound to ``bucket`` with the union of their grants' permissions.

    A host bound several times to one bucket appears once. Hosts whose grants
    need no permission are left out.
    """
    merged: list[tuple[InflightHost, frozenset[Permission]]] = []
    for host in app.hosts:
        permissions = frozenset(
            p for grant in host.grants if grant.resource == bucket.path for p in grant.permissions
        )
        if permissions:
            merged.append((host, permissions))
    return merged


__all__ = [
    "RuntimeContext",
    "BucketTarget",
    "require_function_host",
    "add_bucket_environment",
    "permissions_by_host",
]
