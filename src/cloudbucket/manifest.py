# src/cloudbucket/manifest.py
"""
JSON application manifests for the command line.

Example manifest::

    {
      "name": "uploads-app",
      "buckets": [
        {"id": "Uploads", "public": true, "objects": {"index.html": "<h1>hi</h1>"}}
      ],
      "functions": [
        {"id": "Handler", "bindings": {"Uploads": ["get", "put"]}}
      ]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from cloudbucket.app import App
from cloudbucket.bucket import Bucket, BucketProps, Visibility
from cloudbucket.config import SynthSettings
from cloudbucket.hosts import Function
from cloudbucket.result import Failure, Result, Success
from cloudbucket.state import DeploymentState
from cloudbucket.validation import describe_validation_error


logger = logging.getLogger(__name__)


class BucketManifest(BaseModel):
    id: str = Field(..., min_length=1)
    public: bool = False
    name: str | None = None
    objects: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("objects")
    @classmethod
    def _keys_not_empty(cls, value: dict[str, str]) -> dict[str, str]:
        if any(not key for key in value):
            raise ValueError("object keys must be non-empty")
        return value

    def props(self) -> BucketProps:
        return BucketProps(
            visibility=Visibility.PUBLIC if self.public else Visibility.PRIVATE,
            name=self.name,
            initial_objects=self.objects,
        )


class FunctionManifest(BaseModel):
    id: str = Field(..., min_length=1)
    handler: str = "index.handler"
    bindings: dict[str, list[str]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="forbid")


class AppManifest(BaseModel):
    name: str = "app"
    buckets: list[BucketManifest] = Field(default_factory=list)
    functions: list[FunctionManifest] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _check_references(self) -> AppManifest:
        ids = [b.id for b in self.buckets] + [f.id for f in self.functions]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"duplicate construct ids: {', '.join(duplicates)}")
        bucket_ids = {b.id for b in self.buckets}
        for fn in self.functions:
            missing = sorted(set(fn.bindings) - bucket_ids)
            if missing:
                raise ValueError(f"function {fn.id} binds unknown bucket(s): {', '.join(missing)}")
        return self


def load_manifest(path: Path) -> Result[AppManifest, str]:
    """Parse a manifest file. I/O errors propagate; content errors are a Failure."""
    text = path.read_text(encoding="utf-8")
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        return Failure(f"{path} is not valid JSON: {e}")
    try:
        return Success(AppManifest.model_validate(raw))
    except ValidationError as e:
        return Failure(f"{path}: {describe_validation_error(e)}")


def build_app(manifest: AppManifest, settings: SynthSettings) -> App:
    """
    Declare every bucket and function of ``manifest`` and bind them.

    Raises:
        ConfigurationError: unknown target or invalid deployment state
        CapabilityError: a binding names an operation buckets do not support
    """
    app = App(
        settings.target,
        state=DeploymentState(settings.state_file),
        gcp=settings.gcp,
        aws_region=settings.aws_region,
        name=manifest.name,
    )
    buckets = {b.id: Bucket(app, b.id, b.props()) for b in manifest.buckets}
    for fn_manifest in manifest.functions:
        fn = Function(app, fn_manifest.id, handler=fn_manifest.handler)
        for bucket_id, operations in fn_manifest.bindings.items():
            app.bind(buckets[bucket_id], fn, operations)
    logger.info(
        "built app %s: %d bucket(s), %d function(s)",
        manifest.name,
        len(manifest.buckets),
        len(manifest.functions),
    )
    return app


__all__ = ["AppManifest", "BucketManifest", "FunctionManifest", "load_manifest", "build_app"]
