# tests/test_preflight/test_target_tf_gcp.py
"""Terraform JSON emitted for GCP."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Callable

from cloudbucket.app import App
from cloudbucket.bucket import Bucket, BucketProps, Visibility
from cloudbucket.config import GcpSettings
from cloudbucket.hosts import Function
from cloudbucket.state import DeploymentState
from cloudbucket.terraform import local_name


def _resources(document: dict[str, object], type_: str) -> dict[str, dict[str, object]]:
    resources = document["resource"]
    assert isinstance(resources, dict)
    found = resources.get(type_, {})
    assert isinstance(found, dict)
    return found


def _synth(app: App, out: Path) -> dict[str, object]:
    document = json.loads(app.synth(out).read_text())
    assert isinstance(document, dict)
    return document


def test_private_bucket(make_app: Callable[[str], App], tmp_path: Path) -> None:
    app = make_app("tf-gcp")
    Bucket(app, "Uploads")
    document = _synth(app, tmp_path)

    buckets = _resources(document, "google_storage_bucket")
    assert list(buckets) == [local_name("root/Uploads")]
    bucket = buckets[local_name("root/Uploads")]
    assert re.fullmatch(r"uploads-[0-9a-f]{8}", str(bucket["name"]))
    assert bucket["location"] == "US"
    assert bucket["uniform_bucket_level_access"] is True
    assert bucket["public_access_prevention"] == "enforced"
    assert _resources(document, "google_storage_bucket_iam_member") == {}


def test_public_bucket_grants_all_users_read(make_app: Callable[[str], App], tmp_path: Path) -> None:
    app = make_app("tf-gcp")
    Bucket(app, "Site", BucketProps(visibility=Visibility.PUBLIC))
    document = _synth(app, tmp_path)

    bucket = _resources(document, "google_storage_bucket")[local_name("root/Site")]
    assert bucket["public_access_prevention"] == "inherited"
    members = list(_resources(document, "google_storage_bucket_iam_member").values())
    assert members == [
        {
            "bucket": f"${{google_storage_bucket.{local_name('root/Site')}.name}}",
            "role": "roles/storage.objectViewer",
            "member": "allUsers",
        }
    ]


def test_name_is_stable_across_syntheses(state_file: Path, tmp_path: Path) -> None:
    names: list[object] = []
    for run in range(2):
        app = App("tf-gcp", state=DeploymentState(state_file))
        Bucket(app, "Uploads")
        document = _synth(app, tmp_path / str(run))
        names.append(_resources(document, "google_storage_bucket")[local_name("root/Uploads")]["name"])
    assert names[0] == names[1]


def test_fresh_state_gives_fresh_suffix(tmp_path: Path) -> None:
    names: list[object] = []
    for run in range(2):
        app = App("tf-gcp", state=DeploymentState(tmp_path / f"state-{run}.json"))
        Bucket(app, "Uploads")
        document = _synth(app, tmp_path / str(run))
        names.append(_resources(document, "google_storage_bucket")[local_name("root/Uploads")]["name"])
    assert names[0] != names[1]


def test_long_names_fit_gcs_limit(make_app: Callable[[str], App], tmp_path: Path) -> None:
    app = make_app("tf-gcp")
    Bucket(app, "A" * 80)
    document = _synth(app, tmp_path)
    (bucket,) = _resources(document, "google_storage_bucket").values()
    assert len(str(bucket["name"])) <= 63


def test_objects_are_emitted(make_app: Callable[[str], App], tmp_path: Path) -> None:
    app = make_app("tf-gcp")
    bucket = Bucket(app, "Uploads", BucketProps(initial_objects={"a.txt": "A"}))
    bucket.add_object("b.txt", "B")
    document = _synth(app, tmp_path)
    objects = sorted(
        (str(o["name"]), str(o["content"]))
        for o in _resources(document, "google_storage_bucket_object").values()
    )
    assert objects == [("a.txt", "A"), ("b.txt", "B")]


def test_binding_emits_least_privilege_roles(make_app: Callable[[str], App], tmp_path: Path) -> None:
    app = make_app("tf-gcp")
    bucket = Bucket(app, "Uploads")
    reader = Function(app, "Reader")
    writer = Function(app, "Writer")
    app.bind(bucket, reader, ["get", "list"])
    app.bind(bucket, writer, ["put", "try_get"])
    document = _synth(app, tmp_path)

    accounts = _resources(document, "google_service_account")
    assert set(accounts) == {local_name("root/Reader"), local_name("root/Writer")}

    roles_by_member: dict[str, set[str]] = {}
    for member in _resources(document, "google_storage_bucket_iam_member").values():
        roles_by_member.setdefault(str(member["member"]), set()).add(str(member["role"]))
    reader_member = f"serviceAccount:${{google_service_account.{local_name('root/Reader')}.email}}"
    writer_member = f"serviceAccount:${{google_service_account.{local_name('root/Writer')}.email}}"
    assert roles_by_member == {
        reader_member: {"roles/storage.objectViewer"},
        writer_member: {"roles/storage.objectViewer", "roles/storage.objectUser"},
    }


def test_function_environment_points_at_bucket(make_app: Callable[[str], App]) -> None:
    app = make_app("tf-gcp")
    bucket = Bucket(app, "Uploads")
    fn = Function(app, "Handler")
    app.bind(bucket, fn, ["get"])
    assert fn.environment[bucket.env_name] == (
        f"${{google_storage_bucket.{local_name('root/Uploads')}.name}}"
    )
    assert fn.environment["CLOUDBUCKET_TARGET"] == "tf-gcp"


def test_provider_uses_gcp_settings(state_file: Path, tmp_path: Path) -> None:
    app = App(
        "tf-gcp",
        state=DeploymentState(state_file),
        gcp=GcpSettings(project_id="demo", location="EU"),
    )
    Bucket(app, "Uploads")
    document = _synth(app, tmp_path)
    assert document["provider"] == {"google": [{"project": "demo"}]}
    (bucket,) = _resources(document, "google_storage_bucket").values()
    assert bucket["location"] == "EU"


def test_synth_persists_state(make_app: Callable[[str], App], state_file: Path, tmp_path: Path) -> None:
    app = make_app("tf-gcp")
    Bucket(app, "Uploads")
    _synth(app, tmp_path)
    saved = json.loads(state_file.read_text())
    assert list(saved["suffixes"]) == ["root/Uploads"]


def test_repeated_bindings_merge_into_one_member_per_role(
    make_app: Callable[[str], App], tmp_path: Path
) -> None:
    app = make_app("tf-gcp")
    bucket = Bucket(app, "Uploads")
    fn = Function(app, "Handler")
    app.bind(bucket, fn, ["get"])
    app.bind(bucket, fn, ["list"])
    app.bind(bucket, fn, ["put"])
    document = _synth(app, tmp_path)

    members = list(_resources(document, "google_storage_bucket_iam_member").values())
    assert sorted(str(m["role"]) for m in members) == [
        "roles/storage.objectUser",
        "roles/storage.objectViewer",
    ]
    assert set(_resources(document, "google_service_account")) == {local_name("root/Handler")}
