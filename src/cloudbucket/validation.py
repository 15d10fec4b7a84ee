"""
Result-returning construction of cloudbucket's pydantic models.

Settings (``AwsSettings``, ``GcpSettings``, ``SynthSettings``) and the CLI
build their models here so an empty target or a bad environment value becomes a
``Failure`` the caller reports, not a traceback.

Usage:
    >>> match validate_model(SynthSettings, target="tf-gcp"):
    ...     case Success(settings):
    ...         print(settings.output_dir)
    ...     case Failure(error):
    ...         print(describe_validation_error(error))
"""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel, ValidationError

from cloudbucket.result import Failure, Result, Success


TModel = TypeVar("TModel", bound=BaseModel)

__all__: list[str] = ["validate_model", "describe_validation_error"]


def validate_model(model_cls: type[TModel], **data: object) -> Result[TModel, ValidationError]:
    """
    Construct a Pydantic model and surface validation issues as a Result.

    Pydantic raises internally; the exception is caught at this boundary so
    settings and manifest loaders can stay expression-oriented.
    """
    try:
        return Success(model_cls(**data))
    except ValidationError as exc:
        return Failure(exc)


def describe_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic ValidationError into a single readable line."""
    parts = [
        f"{'.'.join(str(loc) for loc in item['loc']) or '<root>'}: {item['msg']}"
        for item in error.errors()
    ]
    return f"{error.title}: " + "; ".join(parts)
