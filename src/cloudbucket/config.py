# src/cloudbucket/config.py
"""
Settings for synthesis and for inflight clients.

All settings are frozen pydantic models. ``from_env`` helpers read the
conventional provider environment variables and return a ``Result`` so the
caller decides how an invalid environment is reported.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cloudbucket.result import Result
from cloudbucket.validation import validate_model


DEFAULT_STATE_FILE = Path(".cloudbucket") / "state.json"

TARGET_ENV = "CLOUDBUCKET_TARGET"


class AwsSettings(BaseModel):
    """Connection settings for the S3 backend."""

    region_name: str = "us-east-1"
    endpoint_url: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    max_pool_connections: int = Field(50, gt=0)
    connect_timeout: float = Field(5.0, gt=0)
    read_timeout: float = Field(60.0, gt=0)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = os.environ) -> Result[AwsSettings, ValidationError]:
        region = environ.get("AWS_REGION") or environ.get("AWS_DEFAULT_REGION") or "us-east-1"
        return validate_model(
            cls,
            region_name=region,
            endpoint_url=environ.get("AWS_ENDPOINT_URL"),
            aws_access_key_id=environ.get("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=environ.get("AWS_SECRET_ACCESS_KEY"),
        )


class GcpSettings(BaseModel):
    """Project and location used by the GCS backend and the GCP synthesizer."""

    project_id: str | None = None
    location: str = Field("US", min_length=1)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = os.environ) -> Result[GcpSettings, ValidationError]:
        return validate_model(
            cls,
            project_id=environ.get("GOOGLE_CLOUD_PROJECT"),
            location=environ.get("CLOUDBUCKET_GCP_LOCATION", "US"),
        )


class SynthSettings(BaseModel):
    """Where synthesis writes its output and keeps persisted state."""

    target: str = Field(..., min_length=1)
    output_dir: Path = Path("target")
    state_file: Path = DEFAULT_STATE_FILE
    gcp: GcpSettings = GcpSettings()
    aws_region: str = "us-east-1"

    model_config = ConfigDict(frozen=True, extra="forbid")


__all__ = ["AwsSettings", "GcpSettings", "SynthSettings", "DEFAULT_STATE_FILE", "TARGET_ENV"]
