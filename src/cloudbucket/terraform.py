# src/cloudbucket/terraform.py
"""Declarative Terraform resources and their JSON rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from cloudbucket.names import CaseConvention, NameOptions, generate_name


LOCAL_NAME_OPTIONS = NameOptions(
    max_len=128,
    case=CaseConvention.LOWERCASE,
    disallowed=r"[^a-z0-9_]+",
    include_hash=True,
    sep="_",
)


@dataclass(frozen=True)
class TerraformResource:
    """
    One ``resource "<type>" "<name>"`` block.

    Attributes:
        type: Provider resource type, e.g. "google_storage_bucket"
        name: Local name, unique per type within a stack
        attributes: Resource arguments; values may contain ``${...}`` references
    """

    type: str
    name: str
    attributes: Mapping[str, object] = field(default_factory=dict)

    @property
    def address(self) -> str:
        return f"{self.type}.{self.name}"


@dataclass(frozen=True)
class TerraformProvider:
    """A required provider and its configuration block."""

    name: str
    source: str
    version: str
    config: Mapping[str, object] = field(default_factory=dict)


def local_name(path: str) -> str:
    """Terraform local name for a construct path, e.g. ``root/Uploads`` -> ``uploads_<hash>``."""
    return generate_name(path, LOCAL_NAME_OPTIONS)


def ref(resource: TerraformResource, attribute: str) -> str:
    """Interpolation string pointing at another resource's attribute."""
    return f"${{{resource.address}.{attribute}}}"


class TerraformStack:
    """Ordered collection of resources rendered as a ``main.tf.json`` document."""

    def __init__(self) -> None:
        self._resources: dict[str, TerraformResource] = {}
        self._providers: dict[str, TerraformProvider] = {}

    def add_provider(self, provider: TerraformProvider) -> None:
        self._providers[provider.name] = provider

    def add(self, resource: TerraformResource) -> TerraformResource:
        if resource.address in self._resources:
            raise ValueError(f"Duplicate Terraform resource {resource.address}")
        self._resources[resource.address] = resource
        return resource

    @property
    def resources(self) -> Mapping[str, TerraformResource]:
        return MappingProxyType(self._resources)

    def render(self) -> dict[str, object]:
        blocks: dict[str, dict[str, object]] = {}
        for resource in self._resources.values():
            blocks.setdefault(resource.type, {})[resource.name] = dict(resource.attributes)
        return {
            "terraform": {
                "required_providers": {
                    p.name: {"source": p.source, "version": p.version}
                    for p in self._providers.values()
                }
            },
            "provider": {p.name: [dict(p.config)] for p in self._providers.values()},
            "resource": blocks,
        }


__all__ = ["TerraformResource", "TerraformProvider", "TerraformStack", "ref", "local_name"]
