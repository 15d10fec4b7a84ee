# src/cloudbucket/runtime.py
"""Inflight entry point: build a bucket client from a binding's environment."""

from __future__ import annotations

import logging
import os
from typing import Mapping

from cloudbucket.client.contract import BucketClient, ClientLocator
from cloudbucket.config import TARGET_ENV
from cloudbucket.errors import ConfigurationError
from cloudbucket.targets import RuntimeContext, resolve_target


logger = logging.getLogger(__name__)

NAME_PREFIX = "BUCKET_NAME_"
PUBLIC_PREFIX = "BUCKET_PUBLIC_"


def _require(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name)
    if not value:
        raise ConfigurationError(f"Environment variable {name} is not set")
    return value


def locator_from_env(env_name: str, environ: Mapping[str, str] = os.environ) -> ClientLocator:
    """Read target, physical name and visibility for the bucket behind ``env_name``."""
    if not env_name.startswith(NAME_PREFIX):
        raise ConfigurationError(f"{env_name} is not a bucket environment variable")
    public_env = PUBLIC_PREFIX + env_name[len(NAME_PREFIX) :]
    return ClientLocator(
        target=_require(environ, TARGET_ENV),
        bucket_name=_require(environ, env_name),
        public=environ.get(public_env, "false") == "true",
    )


def connect(
    env_name: str,
    environ: Mapping[str, str] = os.environ,
    context: RuntimeContext | None = None,
) -> BucketClient:
    """
    Build the client for a bound bucket.

    Args:
        env_name: The bucket's ``BUCKET_NAME_<hash>`` variable (``Bucket.env_name``)
        environ: Environment the binding populated
        context: Target-specific runtime inputs; read from ``environ`` when omitted

    Raises:
        ConfigurationError: missing environment, unknown target, invalid settings
    """
    locator = locator_from_env(env_name, environ)
    target = resolve_target(locator.target)
    ctx = context if context is not None else RuntimeContext.from_env(environ)
    logger.debug("connecting to %s on %s", locator.bucket_name, locator.target)
    return target.make_client(locator, ctx)


__all__ = ["connect", "locator_from_env"]
