# tests/test_manifest.py
"""Building apps from manifests."""

from __future__ import annotations

from pathlib import Path

import pytest

from cloudbucket.binder import Permission
from cloudbucket.config import SynthSettings
from cloudbucket.errors import CapabilityError
from cloudbucket.hosts import Function
from cloudbucket.manifest import AppManifest, build_app, load_manifest
from tests.helpers import expect_failure, expect_success


def _settings(tmp_path: Path, target: str) -> SynthSettings:
    return SynthSettings(target=target, state_file=tmp_path / "state.json")


def test_build_app_binds_functions(tmp_path: Path) -> None:
    manifest = AppManifest.model_validate(
        {
            "buckets": [{"id": "Uploads", "public": True}, {"id": "Logs"}],
            "functions": [{"id": "Handler", "bindings": {"Uploads": ["get"], "Logs": ["put"]}}],
        }
    )
    app = build_app(manifest, _settings(tmp_path, "tf-gcp"))

    assert [b.path for b in app.resources] == ["root/Uploads", "root/Logs"]
    assert app.resources[0].public is True
    (handler,) = app.hosts
    assert isinstance(handler, Function)
    assert [g.permissions for g in handler.grants] == [
        frozenset({Permission.READ}),
        frozenset({Permission.WRITE}),
    ]


def test_build_app_rejects_unknown_operation(tmp_path: Path) -> None:
    manifest = AppManifest.model_validate(
        {"buckets": [{"id": "B"}], "functions": [{"id": "F", "bindings": {"B": ["frobnicate"]}}]}
    )
    with pytest.raises(CapabilityError, match="frobnicate"):
        build_app(manifest, _settings(tmp_path, "sim"))


def test_load_manifest(tmp_path: Path) -> None:
    path = tmp_path / "app.json"
    path.write_text('{"name": "demo", "buckets": [{"id": "B", "name": "assets"}]}')
    manifest = expect_success(load_manifest(path))
    assert manifest.name == "demo"
    assert manifest.buckets[0].props().name == "assets"


def test_load_manifest_reports_field(tmp_path: Path) -> None:
    path = tmp_path / "app.json"
    path.write_text('{"buckets": [{"public": true}]}')
    assert "id" in expect_failure(load_manifest(path))
