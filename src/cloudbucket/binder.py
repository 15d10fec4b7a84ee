# src/cloudbucket/binder.py
"""
Capability inference: from the operations a consumer declares to the grant it needs.

The operation set is an explicit value passed in by the caller; nothing here
inspects consumer code. Every function is pure and returns a ``Result``;
:meth:`cloudbucket.bucket.Bucket.bind` turns a failure into a
:class:`~cloudbucket.errors.CapabilityError`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Iterable

from cloudbucket.result import Failure, Result, Success, collect_results


logger = logging.getLogger(__name__)


class BucketOperation(StrEnum):
    """Inflight operations a bucket exposes to consumers."""

    EXISTS = "exists"
    GET = "get"
    GET_JSON = "get_json"
    TRY_GET = "try_get"
    TRY_GET_JSON = "try_get_json"
    PUT = "put"
    PUT_JSON = "put_json"
    LIST = "list"
    DELETE = "delete"
    TRY_DELETE = "try_delete"
    PUBLIC_URL = "public_url"


class Permission(StrEnum):
    """Coarse-grained permission levels provider role models map onto."""

    READ = "read"
    WRITE = "write"


WRITE_OPERATIONS: frozenset[BucketOperation] = frozenset(
    {
        BucketOperation.PUT,
        BucketOperation.PUT_JSON,
        BucketOperation.DELETE,
        BucketOperation.TRY_DELETE,
    }
)
READ_OPERATIONS: frozenset[BucketOperation] = frozenset(BucketOperation) - WRITE_OPERATIONS


@dataclass(frozen=True)
class UnsupportedOperation:
    """A consumer asked for an operation the resource does not define."""

    resource: str
    consumer: str
    operation: str

    @property
    def message(self) -> str:
        return (
            f"Resource {self.resource} does not support inflight operation "
            f"{self.operation} (requested by {self.consumer})"
        )


@dataclass(frozen=True)
class BindingGrant:
    """
    Immutable result of binding one consumer to one resource.

    Attributes:
        consumer: Construct path of the consumer (e.g. "root/Handler")
        resource: Construct path of the resource (e.g. "root/Uploads")
        operations: Operations the consumer declared
        permissions: Union of permission levels those operations require
    """

    consumer: str
    resource: str
    operations: frozenset[BucketOperation]
    permissions: frozenset[Permission]

    @property
    def can_read(self) -> bool:
        return Permission.READ in self.permissions

    @property
    def can_write(self) -> bool:
        return Permission.WRITE in self.permissions


def _normalize(name: str) -> str:
    # "getJson" and "tryGetJson" are accepted alongside the snake_case names
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", name.strip()).lower()


def _parse_operation(
    resource: str, consumer: str, name: str
) -> Result[BucketOperation, UnsupportedOperation]:
    try:
        return Success(BucketOperation(_normalize(name)))
    except ValueError:
        return Failure(UnsupportedOperation(resource=resource, consumer=consumer, operation=name))


def parse_operations(
    resource: str, consumer: str, operations: Iterable[str]
) -> Result[frozenset[BucketOperation], UnsupportedOperation]:
    """Map operation names onto BucketOperation; the first unknown name fails."""
    return collect_results([_parse_operation(resource, consumer, name) for name in operations]).map(
        frozenset
    )


def required_permissions(operations: frozenset[BucketOperation]) -> frozenset[Permission]:
    """Read-class operations need READ, write-class need WRITE; both when mixed."""
    permissions: set[Permission] = set()
    if operations & READ_OPERATIONS:
        permissions.add(Permission.READ)
    if operations & WRITE_OPERATIONS:
        permissions.add(Permission.WRITE)
    return frozenset(permissions)


def infer_grant(
    resource: str, consumer: str, operations: Iterable[str]
) -> Result[BindingGrant, UnsupportedOperation]:
    """
    Compute the least-privilege grant for a (consumer, resource) edge.

    Example:
        >>> infer_grant("root/Bucket", "root/Function", ["get", "list"]).unwrap().permissions
        frozenset({<Permission.READ: 'read'>})
    """
    grant = parse_operations(resource, consumer, operations).map(
        lambda ops: BindingGrant(
            consumer=consumer,
            resource=resource,
            operations=ops,
            permissions=required_permissions(ops),
        )
    )
    if isinstance(grant, Success):
        logger.debug(
            "%s -> %s: %s",
            consumer,
            resource,
            sorted(p.value for p in grant.value.permissions),
        )
    return grant


__all__ = [
    "BucketOperation",
    "Permission",
    "READ_OPERATIONS",
    "WRITE_OPERATIONS",
    "UnsupportedOperation",
    "BindingGrant",
    "parse_operations",
    "required_permissions",
    "infer_grant",
]
