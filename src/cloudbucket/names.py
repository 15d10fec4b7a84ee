# src/cloudbucket/names.py
"""Physical resource name generation under per-target naming constraints."""

from __future__ import annotations

import hashlib
import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


HASH_LENGTH = 8


class CaseConvention(Enum):
    """Case applied to generated names."""

    NONE = "none"
    LOWERCASE = "lowercase"
    UPPERCASE = "uppercase"


class NameOptions(BaseModel):
    """Constraints a target places on a physical name."""

    max_len: int = Field(63, gt=HASH_LENGTH + 1)
    case: CaseConvention = CaseConvention.NONE
    disallowed: str = r"[^a-zA-Z0-9_\-]+"
    include_hash: bool = True
    sep: str = "-"

    model_config = ConfigDict(frozen=True, extra="forbid")


def path_hash(path: str) -> str:
    """First eight hex characters of the sha256 of a construct path."""
    return hashlib.sha256(path.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def generate_name(path: str, options: NameOptions) -> str:
    """
    Derive a physical name from a construct path such as ``root/Uploads``.

    The ``root`` segment is dropped, the rest is joined with ``sep``, case is
    applied, disallowed character runs collapse to ``sep``, and the result is
    truncated so that the optional hash suffix still fits in ``max_len``.
    """
    segments = [s for s in path.split("/") if s and s != "root"] or ["root"]
    name = options.sep.join(segments)

    match options.case:
        case CaseConvention.LOWERCASE:
            name = name.lower()
        case CaseConvention.UPPERCASE:
            name = name.upper()
        case CaseConvention.NONE:
            pass

    name = re.sub(options.disallowed, options.sep, name).strip(options.sep)

    if not options.include_hash:
        return name[: options.max_len].rstrip(options.sep)

    suffix = path_hash(path)
    if options.case is CaseConvention.UPPERCASE:
        suffix = suffix.upper()
    budget = options.max_len - len(options.sep) - len(suffix)
    return f"{name[:budget].rstrip(options.sep)}{options.sep}{suffix}"


__all__ = ["CaseConvention", "NameOptions", "generate_name", "path_hash", "HASH_LENGTH"]
