# src/cloudbucket/targets/sim.py
"""Simulator target: buckets live in memory inside a :class:`Simulator`."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cloudbucket.client.contract import BucketClient, ClientLocator
from cloudbucket.errors import ConfigurationError
from cloudbucket.simulator import SIM_BUCKET_TYPE, SimDocument, SimResource
from cloudbucket.targets.base import (
    BucketTarget,
    RuntimeContext,
    add_bucket_environment,
    require_function_host,
)

if TYPE_CHECKING:
    from cloudbucket.app import App
    from cloudbucket.binder import BindingGrant
    from cloudbucket.bucket import Bucket
    from cloudbucket.hosts import InflightHost


logger = logging.getLogger(__name__)

TARGET_ID = "sim"


def synthesize(bucket: Bucket, app: App) -> None:
    logger.info("sim: declaring bucket %s (public=%s)", bucket.path, bucket.public)
    app.sim_resources.append(
        SimResource(
            type=SIM_BUCKET_TYPE,
            path=bucket.path,
            props={"public": bucket.public, "initialObjects": dict(bucket.objects)},
        )
    )


def bind_consumer(bucket: Bucket, host: InflightHost, grant: BindingGrant) -> None:
    require_function_host(TARGET_ID, bucket, host)
    # the simulator resolves buckets by construct path; permissions are not enforced
    add_bucket_environment(TARGET_ID, bucket, host, bucket.path)
    host.attach_grant(grant)


def make_client(locator: ClientLocator, context: RuntimeContext) -> BucketClient:
    if context.simulator is None:
        raise ConfigurationError("The sim target needs a running Simulator in the RuntimeContext")
    simulator = context.simulator
    return simulator.client(simulator.handle_for(locator.bucket_name))


def render(app: App) -> dict[str, object]:
    return SimDocument(resources=list(app.sim_resources)).model_dump(mode="json")


SIM_TARGET = BucketTarget(
    target_id=TARGET_ID,
    output_file="simulator.json",
    synthesize=synthesize,
    bind_consumer=bind_consumer,
    make_client=make_client,
    render=render,
)

__all__ = ["SIM_TARGET"]
