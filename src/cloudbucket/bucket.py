# src/cloudbucket/bucket.py
"""
The logical, target-independent bucket resource.

A :class:`Bucket` owns its configuration (visibility, name hint, seeded
objects). Everything target-specific - physical naming, emitted
infrastructure, how a consumer is wired up - is delegated to the app's
:class:`~cloudbucket.targets.base.BucketTarget` strategy.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cloudbucket.binder import BindingGrant, infer_grant
from cloudbucket.errors import CapabilityError, ConfigurationError, UnsupportedFeatureError
from cloudbucket.names import path_hash
from cloudbucket.result import Failure, Success

if TYPE_CHECKING:
    from cloudbucket.app import App
    from cloudbucket.hosts import InflightHost


logger = logging.getLogger(__name__)

BucketEventHandler = Callable[..., object]


class Visibility(StrEnum):
    PUBLIC = "public"
    PRIVATE = "private"


class BucketProps(BaseModel):
    """Declared configuration of a bucket."""

    visibility: Visibility = Visibility.PRIVATE
    name: str | None = None
    initial_objects: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("initial_objects")
    @classmethod
    def _keys_not_empty(cls, value: dict[str, str]) -> dict[str, str]:
        if any(not key for key in value):
            raise ValueError("object keys must be non-empty")
        return value


class Bucket:
    """
    A bucket declared by application code.

    Usage:
        app = App("tf-gcp")
        uploads = Bucket(app, "Uploads", BucketProps(visibility=Visibility.PUBLIC))
        uploads.add_object("index.html", "<h1>hello</h1>")
        handler = Function(app, "Handler")
        uploads.bind(handler, ["get", "put"])
        app.synth(Path("target"))
    """

    def __init__(self, app: App, id: str, props: BucketProps | None = None) -> None:
        self.app = app
        self.id = id
        self.path = f"root/{id}"
        self._props = props or BucketProps()
        self._objects: dict[str, str] = dict(self._props.initial_objects)
        self._sealed = False
        app.register_resource(self)

    @property
    def props(self) -> BucketProps:
        return self._props

    @property
    def public(self) -> bool:
        return self._props.visibility is Visibility.PUBLIC

    @property
    def name_hint(self) -> str:
        return self._props.name or self.id

    @property
    def objects(self) -> Mapping[str, str]:
        """Objects provisioned with the bucket (initial objects plus add_object calls)."""
        return MappingProxyType(self._objects)

    @property
    def env_name(self) -> str:
        """Environment variable through which bound consumers find this bucket."""
        return f"BUCKET_NAME_{path_hash(self.path).upper()}"

    @property
    def public_env_name(self) -> str:
        return f"BUCKET_PUBLIC_{path_hash(self.path).upper()}"

    def add_object(self, key: str, content: str) -> None:
        """Seed an object into the bucket's infrastructure definition."""
        if self._sealed:
            raise ConfigurationError(f"Cannot add objects to {self.path} after synthesis")
        if not key:
            raise ConfigurationError(f"Object keys of {self.path} must be non-empty")
        self._objects[key] = content

    def bind(self, host: InflightHost, operations: Iterable[str]) -> BindingGrant:
        """
        Grant ``host`` what it needs to call ``operations`` on this bucket.

        Raises:
            CapabilityError: unknown operation, or a host type the target cannot bind
        """
        match infer_grant(self.path, host.path, operations):
            case Failure(unsupported):
                raise CapabilityError(
                    resource=unsupported.resource,
                    consumer=unsupported.consumer,
                    operation=unsupported.operation,
                    message=unsupported.message,
                )
            case Success(grant):
                self.app.target.bind_consumer(self, host, grant)
                logger.info(
                    "bound %s to %s for %s",
                    host.path,
                    self.path,
                    ", ".join(sorted(op.value for op in grant.operations)) or "<no operations>",
                )
                return grant

    def synthesize(self) -> None:
        """Emit this bucket's infrastructure for the app's target; seals the bucket."""
        self.app.target.synthesize(self, self.app)
        self._sealed = True

    def _unsupported_event(self, method: str) -> UnsupportedFeatureError:
        return UnsupportedFeatureError(
            method,
            f"{method} method isn't implemented yet on the current target ({self.app.target.target_id}).",
        )

    def on_create(self, handler: BucketEventHandler, opts: Mapping[str, object] | None = None) -> None:
        """Run an inflight whenever a file is uploaded to the bucket."""
        raise self._unsupported_event("on_create")

    def on_update(self, handler: BucketEventHandler, opts: Mapping[str, object] | None = None) -> None:
        """Run an inflight whenever a file is updated in the bucket."""
        raise self._unsupported_event("on_update")

    def on_delete(self, handler: BucketEventHandler, opts: Mapping[str, object] | None = None) -> None:
        """Run an inflight whenever a file is deleted from the bucket."""
        raise self._unsupported_event("on_delete")

    def on_event(self, handler: BucketEventHandler, opts: Mapping[str, object] | None = None) -> None:
        """Run an inflight whenever a file is uploaded, modified, or deleted."""
        raise self._unsupported_event("on_event")

    def __repr__(self) -> str:
        return f"Bucket({self.path!r}, visibility={self._props.visibility.value})"


__all__ = ["Visibility", "BucketProps", "Bucket", "BucketEventHandler"]
