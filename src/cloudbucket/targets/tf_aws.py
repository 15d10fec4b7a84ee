# src/cloudbucket/targets/tf_aws.py
"""
Terraform-on-AWS target.

Buckets become ``aws_s3_bucket`` resources named through ``bucket_prefix``,
so AWS supplies the uniqueness and no persisted suffix is needed. Consumers
receive IAM policy statements that are rendered into one
``aws_iam_role_policy`` per function role.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from cloudbucket.binder import BucketOperation
from cloudbucket.client.contract import BucketClient, ClientLocator
from cloudbucket.client.s3 import S3ObjectBackend
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

TARGET_ID = "tf-aws"

# AWS appends 26 characters to a bucket_prefix and caps names at 63
BUCKET_PREFIX_OPTIONS = NameOptions(
    max_len=37,
    case=CaseConvention.LOWERCASE,
    disallowed=r"[^a-z0-9\-]+",
    include_hash=False,
)

READ_ACTIONS: tuple[str, ...] = ("s3:GetObject*", "s3:GetBucket*", "s3:List*")
WRITE_ACTIONS: tuple[str, ...] = ("s3:PutObject*", "s3:DeleteObject*", "s3:Abort*")
# delete(must_exist=True) and try_delete check existence with HeadObject; without
# s3:ListBucket a missing key answers 403 instead of 404
EXISTENCE_CHECK_ACTIONS: tuple[str, ...] = ("s3:GetObject", "s3:ListBucket")
CHECKING_WRITE_OPERATIONS = frozenset({BucketOperation.DELETE, BucketOperation.TRY_DELETE})

LAMBDA_ASSUME_ROLE_POLICY = json.dumps(
    {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": {"Service": "lambda.amazonaws.com"},
                "Action": "sts:AssumeRole",
            }
        ],
    }
)


def bucket_resource_name(bucket: Bucket) -> str:
    return local_name(bucket.path)


def bucket_reference(bucket: Bucket, attribute: str) -> str:
    return f"${{aws_s3_bucket.{bucket_resource_name(bucket)}.{attribute}}}"


def bucket_prefix(bucket: Bucket) -> str:
    return generate_name(f"root/{bucket.name_hint}", BUCKET_PREFIX_OPTIONS) + "-"


def policy_statements(grant: BindingGrant, bucket_arn: str) -> list[dict[str, object]]:
    """Least-privilege IAM statements for a grant on one bucket."""
    actions: list[str] = []
    if grant.can_read:
        actions.extend(READ_ACTIONS)
    if grant.can_write:
        actions.extend(WRITE_ACTIONS)
        if not grant.can_read and grant.operations & CHECKING_WRITE_OPERATIONS:
            actions.extend(EXISTENCE_CHECK_ACTIONS)
    if not actions:
        return []
    return [
        {
            "Effect": "Allow",
            "Action": actions,
            "Resource": [bucket_arn, f"{bucket_arn}/*"],
        }
    ]


def synthesize(bucket: Bucket, app: App) -> None:
    name = bucket_resource_name(bucket)
    s3_bucket = app.stack.add(
        TerraformResource(
            "aws_s3_bucket",
            name,
            {"bucket_prefix": bucket_prefix(bucket), "force_destroy": False},
        )
    )
    blocked = not bucket.public
    app.stack.add(
        TerraformResource(
            "aws_s3_bucket_public_access_block",
            name,
            {
                "bucket": ref(s3_bucket, "bucket"),
                "block_public_acls": blocked,
                "block_public_policy": blocked,
                "ignore_public_acls": blocked,
                "restrict_public_buckets": blocked,
            },
        )
    )
    if bucket.public:
        app.stack.add(
            TerraformResource(
                "aws_s3_bucket_policy",
                name,
                {
                    "bucket": ref(s3_bucket, "bucket"),
                    "policy": json.dumps(
                        {
                            "Version": "2012-10-17",
                            "Statement": [
                                {
                                    "Effect": "Allow",
                                    "Principal": "*",
                                    "Action": ["s3:GetObject"],
                                    "Resource": [f"{ref(s3_bucket, 'arn')}/*"],
                                }
                            ],
                        }
                    ),
                    "depends_on": [f"aws_s3_bucket_public_access_block.{name}"],
                },
            )
        )

    for key, content in bucket.objects.items():
        app.stack.add(
            TerraformResource(
                "aws_s3_object",
                f"{name}_{local_name(f'{bucket.path}/{key}')}",
                {"bucket": ref(s3_bucket, "bucket"), "key": key, "content": content},
            )
        )

    for host, _permissions in permissions_by_host(bucket, app):
        _ensure_function_role(host, app)
    logger.info("synthesized %s as aws_s3_bucket.%s", bucket.path, name)


def _ensure_function_role(host: InflightHost, app: App) -> None:
    # one role and one inline policy per function, covering all of its buckets
    role_name = local_name(host.path)
    if f"aws_iam_role.{role_name}" in app.stack.resources:
        return
    role = app.stack.add(
        TerraformResource(
            "aws_iam_role",
            role_name,
            {"name_prefix": f"{role_name[:32]}-", "assume_role_policy": LAMBDA_ASSUME_ROLE_POLICY},
        )
    )
    app.stack.add(
        TerraformResource(
            "aws_iam_role_policy",
            role_name,
            {
                "role": ref(role, "id"),
                "policy": json.dumps(
                    {"Version": "2012-10-17", "Statement": list(host.policy_statements)}
                ),
            },
        )
    )


def bind_consumer(bucket: Bucket, host: InflightHost, grant: BindingGrant) -> None:
    require_function_host(TARGET_ID, bucket, host)
    add_bucket_environment(TARGET_ID, bucket, host, bucket_reference(bucket, "bucket"))
    for statement in policy_statements(grant, bucket_reference(bucket, "arn")):
        host.add_policy_statement(statement)
    host.attach_grant(grant)


def make_client(locator: ClientLocator, context: RuntimeContext) -> BucketClient:
    return BucketClient(
        locator,
        S3ObjectBackend(locator.bucket_name, settings=context.aws, s3_client=context.s3_client),
    )


def render(app: App) -> dict[str, object]:
    app.stack.add_provider(
        TerraformProvider(
            name="aws",
            source="hashicorp/aws",
            version=">= 5.0",
            config={"region": app.aws_region},
        )
    )
    return app.stack.render()


TF_AWS_TARGET = BucketTarget(
    target_id=TARGET_ID,
    output_file="main.tf.json",
    synthesize=synthesize,
    bind_consumer=bind_consumer,
    make_client=make_client,
    render=render,
)

__all__ = [
    "TF_AWS_TARGET",
    "policy_statements",
    "READ_ACTIONS",
    "WRITE_ACTIONS",
    "EXISTENCE_CHECK_ACTIONS",
]
