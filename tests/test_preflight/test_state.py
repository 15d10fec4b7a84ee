# tests/test_preflight/test_state.py
"""Persisted uniqueness suffixes."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cloudbucket.errors import ConfigurationError
from cloudbucket.state import DeploymentState


def test_suffix_generated_once(state_file: Path) -> None:
    state = DeploymentState(state_file)
    first = state.suffix_for("root/Bucket")
    assert len(first) == 8
    assert int(first, 16) >= 0
    assert state.suffix_for("root/Bucket") == first
    assert state.suffix_for("root/Other") != first


def test_suffix_survives_reload(state_file: Path) -> None:
    state = DeploymentState(state_file)
    suffix = state.suffix_for("root/Bucket")
    state.save()

    reloaded = DeploymentState(state_file)
    assert reloaded.suffix_for("root/Bucket") == suffix
    assert json.loads(state_file.read_text()) == {"suffixes": {"root/Bucket": suffix}}


def test_in_memory_state_does_not_write(tmp_path: Path) -> None:
    state = DeploymentState()
    state.suffix_for("root/Bucket")
    state.save()
    assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize(
    "content",
    ["not json", json.dumps({"suffixes": ["a"]}), json.dumps({"suffixes": {"root/B": 1}})],
)
def test_invalid_state_file(tmp_path: Path, content: str) -> None:
    path = tmp_path / "state.json"
    path.write_text(content)
    with pytest.raises(ConfigurationError):
        DeploymentState(path)
