# tests/test_preflight/test_terraform.py
"""Terraform JSON rendering."""

from __future__ import annotations

import pytest

from cloudbucket.names import path_hash
from cloudbucket.terraform import (
    TerraformProvider,
    TerraformResource,
    TerraformStack,
    local_name,
    ref,
)


def test_ref_interpolates_address() -> None:
    bucket = TerraformResource("google_storage_bucket", "uploads", {})
    assert ref(bucket, "name") == "${google_storage_bucket.uploads.name}"


def test_local_name_is_identifier_safe() -> None:
    assert local_name("root/My-Bucket") == f"my_bucket_{path_hash('root/My-Bucket')}"


def test_render_groups_resources_by_type() -> None:
    stack = TerraformStack()
    stack.add_provider(TerraformProvider("google", "hashicorp/google", ">= 5.0", {"project": "p"}))
    stack.add(TerraformResource("google_storage_bucket", "a", {"name": "a-1"}))
    stack.add(TerraformResource("google_storage_bucket", "b", {"name": "b-1"}))
    stack.add(TerraformResource("google_storage_bucket_object", "a_obj", {"name": "k"}))

    assert stack.render() == {
        "terraform": {
            "required_providers": {"google": {"source": "hashicorp/google", "version": ">= 5.0"}}
        },
        "provider": {"google": [{"project": "p"}]},
        "resource": {
            "google_storage_bucket": {"a": {"name": "a-1"}, "b": {"name": "b-1"}},
            "google_storage_bucket_object": {"a_obj": {"name": "k"}},
        },
    }


def test_duplicate_address_rejected() -> None:
    stack = TerraformStack()
    stack.add(TerraformResource("aws_s3_bucket", "a"))
    with pytest.raises(ValueError, match="aws_s3_bucket.a"):
        stack.add(TerraformResource("aws_s3_bucket", "a"))
