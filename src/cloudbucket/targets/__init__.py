# src/cloudbucket/targets/__init__.py
"""Registry of deployment targets, keyed by target id."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from cloudbucket.errors import ConfigurationError
from cloudbucket.targets.base import BucketTarget, RuntimeContext
from cloudbucket.targets.sim import SIM_TARGET
from cloudbucket.targets.tf_aws import TF_AWS_TARGET
from cloudbucket.targets.tf_gcp import TF_GCP_TARGET


BUCKET_TARGETS: Mapping[str, BucketTarget] = MappingProxyType(
    {target.target_id: target for target in (SIM_TARGET, TF_AWS_TARGET, TF_GCP_TARGET)}
)


def resolve_target(target_id: str) -> BucketTarget:
    try:
        return BUCKET_TARGETS[target_id]
    except KeyError:
        known = ", ".join(sorted(BUCKET_TARGETS))
        raise ConfigurationError(f"Unknown target {target_id!r} (expected one of: {known})") from None


__all__ = ["BUCKET_TARGETS", "BucketTarget", "RuntimeContext", "resolve_target"]
