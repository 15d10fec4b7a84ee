# src/cloudbucket/state.py
"""Persisted deployment state.

Some targets need a random suffix to make a physical name globally unique.
The suffix is generated once per resource path and stored here, so repeated
synthesis of the same application produces the same physical name.
"""

from __future__ import annotations

import json
import logging
import secrets
from pathlib import Path

from cloudbucket.errors import ConfigurationError


logger = logging.getLogger(__name__)

SUFFIX_BYTES = 4  # 4 bytes = 8 hex characters


class DeploymentState:
    """
    JSON-file backed mapping of resource path -> persisted values.

    ``path=None`` keeps the state in memory only (used by tests and dry runs).
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._suffixes: dict[str, str] = {}
        if path is not None and path.exists():
            self._suffixes = self._load(path)

    @staticmethod
    def _load(path: Path) -> dict[str, str]:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Deployment state {path} is not valid JSON: {e}") from e
        suffixes = raw.get("suffixes", {}) if isinstance(raw, dict) else None
        if not isinstance(suffixes, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in suffixes.items()
        ):
            raise ConfigurationError(f"Deployment state {path} has an invalid 'suffixes' section")
        return dict(suffixes)

    @property
    def path(self) -> Path | None:
        return self._path

    def suffix_for(self, resource_path: str) -> str:
        """Return the persisted random suffix for a resource, generating it once."""
        existing = self._suffixes.get(resource_path)
        if existing is not None:
            return existing
        suffix = secrets.token_hex(SUFFIX_BYTES)
        self._suffixes[resource_path] = suffix
        logger.info("generated uniqueness suffix %s for %s", suffix, resource_path)
        return suffix

    def save(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps({"suffixes": dict(sorted(self._suffixes.items()))}, indent=2) + "\n",
            encoding="utf-8",
        )


__all__ = ["DeploymentState", "SUFFIX_BYTES"]
