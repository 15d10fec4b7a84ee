# src/cloudbucket/targets/tf_gcp.py
"""
Terraform-on-GCP target.

GCS bucket names are global and the provider has no ``bucket_prefix``, so the
physical name is a generated base plus an 8-hex random suffix kept in the
deployment state. Consumers get one ``google_storage_bucket_iam_member`` per
role their grant needs, for the function's service account.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cloudbucket.binder import Permission
from cloudbucket.client.contract import BucketClient, ClientLocator
from cloudbucket.client.gcs import GcsObjectBackend
from cloudbucket.names import CaseConvention, NameOptions, generate_name
from cloudbucket.targets.base import (
    BucketTarget,
    RuntimeContext,
    add_bucket_environment,
    permissions_by_host,
    require_function_host,
)
from cloudbucket.terraform import TerraformProvider, TerraformResource, local_name, ref

if TYPE_CHECKING:
    from cloudbucket.app import App
    from cloudbucket.binder import BindingGrant
    from cloudbucket.bucket import Bucket
    from cloudbucket.hosts import InflightHost


logger = logging.getLogger(__name__)

TARGET_ID = "tf-gcp"

# 63 characters max, 9 reserved for "-" plus the random suffix
BUCKET_NAME_OPTIONS = NameOptions(
    max_len=54,
    case=CaseConvention.LOWERCASE,
    disallowed=r"[^a-z0-9_\-]+",
    include_hash=False,
)

PUBLIC_READ_ROLE = "roles/storage.objectViewer"
PERMISSION_ROLES: dict[Permission, str] = {
    Permission.READ: "roles/storage.objectViewer",
    Permission.WRITE: "roles/storage.objectUser",
}


def physical_name(bucket: Bucket, app: App) -> str:
    """``<generated base>-<persisted suffix>``; stable across syntheses sharing a state file."""
    base = generate_name(f"root/{bucket.name_hint}", BUCKET_NAME_OPTIONS)
    return f"{base}-{app.state.suffix_for(bucket.path)}"


def roles_for(permissions: frozenset[Permission]) -> list[str]:
    """Predefined roles covering a set of permissions, read before write."""
    return [PERMISSION_ROLES[p] for p in (Permission.READ, Permission.WRITE) if p in permissions]


def _service_account(host: InflightHost, app: App) -> TerraformResource:
    name = local_name(host.path)
    existing = app.stack.resources.get(f"google_service_account.{name}")
    if existing is not None:
        return existing
    # account_id: 6-30 chars, lowercase letters, digits and hyphens
    account_id = generate_name(
        host.path,
        NameOptions(max_len=30, case=CaseConvention.LOWERCASE, disallowed=r"[^a-z0-9\-]+"),
    )
    return app.stack.add(
        TerraformResource(
            "google_service_account",
            name,
            {"account_id": account_id, "display_name": f"Service account for {host.path}"},
        )
    )


def synthesize(bucket: Bucket, app: App) -> None:
    name = local_name(bucket.path)
    gcs_bucket = app.stack.add(
        TerraformResource(
            "google_storage_bucket",
            name,
            {
                "name": physical_name(bucket, app),
                "location": app.gcp.location,
                "uniform_bucket_level_access": True,
                "public_access_prevention": "inherited" if bucket.public else "enforced",
                "force_destroy": False,
            },
        )
    )
    if bucket.public:
        app.stack.add(
            TerraformResource(
                "google_storage_bucket_iam_member",
                f"{name}_public",
                {"bucket": ref(gcs_bucket, "name"), "role": PUBLIC_READ_ROLE, "member": "allUsers"},
            )
        )

    for key, content in bucket.objects.items():
        app.stack.add(
            TerraformResource(
                "google_storage_bucket_object",
                f"{name}_{local_name(f'{bucket.path}/{key}')}",
                {"bucket": ref(gcs_bucket, "id"), "name": key, "content": content},
            )
        )

    for host, permissions in permissions_by_host(bucket, app):
        account = _service_account(host, app)
        for role in roles_for(permissions):
            app.stack.add(
                TerraformResource(
                    "google_storage_bucket_iam_member",
                    f"{name}_{local_name(host.path)}_{role.rsplit('.', 1)[-1].lower()}",
                    {
                        "bucket": ref(gcs_bucket, "name"),
                        "role": role,
                        "member": f"serviceAccount:{ref(account, 'email')}",
                    },
                )
            )
    logger.info("synthesized %s as google_storage_bucket.%s", bucket.path, name)


def bind_consumer(bucket: Bucket, host: InflightHost, grant: BindingGrant) -> None:
    require_function_host(TARGET_ID, bucket, host)
    add_bucket_environment(
        TARGET_ID, bucket, host, f"${{google_storage_bucket.{local_name(bucket.path)}.name}}"
    )
    host.attach_grant(grant)


def make_client(locator: ClientLocator, context: RuntimeContext) -> BucketClient:
    project_id = context.gcp.project_id if context.gcp is not None else None
    return BucketClient(
        locator,
        GcsObjectBackend(locator.bucket_name, project_id=project_id, client=context.gcs_client),
    )


def render(app: App) -> dict[str, object]:
    config: dict[str, object] = {}
    if app.gcp.project_id is not None:
        config["project"] = app.gcp.project_id
    app.stack.add_provider(
        TerraformProvider(name="google", source="hashicorp/google", version=">= 5.0", config=config)
    )
    return app.stack.render()


TF_GCP_TARGET = BucketTarget(
    target_id=TARGET_ID,
    output_file="main.tf.json",
    synthesize=synthesize,
    bind_consumer=bind_consumer,
    make_client=make_client,
    render=render,
)

__all__ = ["TF_GCP_TARGET", "PERMISSION_ROLES", "physical_name", "roles_for"]
