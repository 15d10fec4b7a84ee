# src/cloudbucket/app.py
"""
Root of the construct tree.

An :class:`App` fixes the deployment target, owns the deployment state and
the output being built (a Terraform stack or a list of simulator resources),
and keeps every resource and inflight host registered under it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from cloudbucket.config import GcpSettings
from cloudbucket.errors import ConfigurationError
from cloudbucket.simulator import SimResource
from cloudbucket.state import DeploymentState
from cloudbucket.targets import BucketTarget, resolve_target
from cloudbucket.terraform import TerraformStack

if TYPE_CHECKING:
    from cloudbucket.binder import BindingGrant
    from cloudbucket.bucket import Bucket
    from cloudbucket.hosts import InflightHost


logger = logging.getLogger(__name__)


class App:
    """
    Usage:
        app = App("tf-gcp", state=DeploymentState(Path(".cloudbucket/state.json")))
        bucket = Bucket(app, "Uploads")
        fn = Function(app, "Handler")
        app.bind(bucket, fn, ["get", "put"])
        app.synth(Path("target"))
    """

    def __init__(
        self,
        target_id: str,
        *,
        state: DeploymentState | None = None,
        gcp: GcpSettings | None = None,
        aws_region: str = "us-east-1",
        name: str = "app",
    ) -> None:
        self.target: BucketTarget = resolve_target(target_id)
        self.state = state or DeploymentState()
        self.gcp = gcp or GcpSettings()
        self.aws_region = aws_region
        self.name = name
        self.stack = TerraformStack()
        self.sim_resources: list[SimResource] = []
        self._resources: dict[str, Bucket] = {}
        self._hosts: dict[str, InflightHost] = {}
        self._synthesized = False

    @property
    def target_id(self) -> str:
        return self.target.target_id

    @property
    def resources(self) -> list[Bucket]:
        return list(self._resources.values())

    @property
    def hosts(self) -> list[InflightHost]:
        return list(self._hosts.values())

    def _check_path(self, path: str) -> None:
        if path in self._resources or path in self._hosts:
            raise ConfigurationError(f"There is already a construct at {path}")

    def register_resource(self, resource: Bucket) -> None:
        self._check_path(resource.path)
        self._resources[resource.path] = resource

    def register_host(self, host: InflightHost) -> None:
        self._check_path(host.path)
        self._hosts[host.path] = host

    def bind(self, resource: Bucket, host: InflightHost, operations: Iterable[str]) -> BindingGrant:
        """Host-binding entry point: ``resource.bind(host, operations)``."""
        return resource.bind(host, operations)

    def synth(self, output_dir: Path) -> Path:
        """
        Synthesize every resource and write the target's output document.

        Returns:
            Path of the written document (``main.tf.json`` or ``simulator.json``)

        Raises:
            ConfigurationError: the app was already synthesized
            CapabilityError / UnsupportedFeatureError: from the target synthesizer
            OSError: the output could not be written
        """
        if self._synthesized:
            raise ConfigurationError(f"App {self.name} has already been synthesized")
        for resource in self._resources.values():
            resource.synthesize()
        document = self.target.render(self)

        output_dir.mkdir(parents=True, exist_ok=True)
        output = output_dir / self.target.output_file
        output.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
        self.state.save()
        self._synthesized = True
        logger.info(
            "synthesized %d resource(s) for %s into %s",
            len(self._resources),
            self.target_id,
            output,
        )
        return output


__all__ = ["App"]
