# src/cloudbucket/simulator.py
"""
In-process simulator for applications synthesized with the ``sim`` target.

The ``sim`` synthesizer writes a ``simulator.json`` document describing every
simulated resource. :class:`Simulator` loads that document, seeds each
bucket's initial objects, and hands out handles (``sim-0``, ``sim-1``, ...).
Bindings place the bucket's construct path in a consumer's environment;
:meth:`Simulator.handle_for` maps that path to its handle, and clients resolve
a handle back to the live bucket state.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cloudbucket.client.contract import BucketClient, ClientLocator
from cloudbucket.client.sim import SimBucketState, SimObjectBackend
from cloudbucket.errors import ConfigurationError
from cloudbucket.validation import describe_validation_error


logger = logging.getLogger(__name__)

SIM_BUCKET_TYPE = "cloud.Bucket"


class SimResource(BaseModel):
    """One entry of ``simulator.json``."""

    type: str
    path: str
    props: dict[str, object] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="forbid")


class SimDocument(BaseModel):
    """The whole ``simulator.json`` document."""

    resources: list[SimResource] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")


class Simulator:
    """
    Holds the live state of every simulated bucket.

    Usage:
        sim = Simulator.from_file(Path("target/simulator.json"))
        client = sim.client(sim.handle_for("root/Uploads"))
        await client.put("KEY", "VALUE")
    """

    def __init__(self, document: SimDocument) -> None:
        self._states: dict[str, SimBucketState] = {}
        self._handles: dict[str, str] = {}
        for resource in document.resources:
            if resource.type != SIM_BUCKET_TYPE:
                logger.debug("simulator ignoring resource %s of type %s", resource.path, resource.type)
                continue
            handle = f"sim-{len(self._states)}"
            initial = resource.props.get("initialObjects", {})
            if not isinstance(initial, dict):
                raise ConfigurationError(f"initialObjects of {resource.path} must be an object")
            self._states[handle] = SimBucketState(
                name=resource.path,
                public=bool(resource.props.get("public", False)),
                objects={str(k): str(v) for k, v in initial.items()},
            )
            self._handles[resource.path] = handle
        logger.info("simulator started with %d bucket(s)", len(self._states))

    @classmethod
    def from_document(cls, raw: Mapping[str, object]) -> Simulator:
        try:
            return cls(SimDocument.model_validate(raw))
        except ValidationError as e:
            raise ConfigurationError(describe_validation_error(e)) from e

    @classmethod
    def from_file(cls, path: Path) -> Simulator:
        return cls.from_document(json.loads(path.read_text(encoding="utf-8")))

    @property
    def handles(self) -> Mapping[str, str]:
        """Resource path -> handle."""
        return MappingProxyType(self._handles)

    def handle_for(self, path: str) -> str:
        try:
            return self._handles[path]
        except KeyError:
            raise ConfigurationError(f"No simulated bucket at {path}") from None

    def state(self, handle: str) -> SimBucketState:
        try:
            return self._states[handle]
        except KeyError:
            raise ConfigurationError(f"Unknown simulator handle {handle!r}") from None

    def client(self, handle: str) -> BucketClient:
        state = self.state(handle)
        return BucketClient(
            ClientLocator(target="sim", bucket_name=state.name, public=state.public),
            SimObjectBackend(state),
        )


__all__ = ["SIM_BUCKET_TYPE", "SimResource", "SimDocument", "Simulator"]
