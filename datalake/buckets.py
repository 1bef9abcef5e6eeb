"""
S3 Buckets
Access-log sink, data lake storage and Athena results, all private and TLS-only
"""
import json
from typing import Dict, List, Optional

import pulumi
import pulumi_aws as aws

from .config import DataLakeConfig
from .context import DeploymentContext
from .errors import ConfigurationError
from .keys import ATHENA_RESULTS_KEY, DATA_LAKE_KEY

LOGGING_BUCKET_PREFIX = "logging"
DATA_LAKE_BUCKET_PREFIX = "data-lake-bucket"
ATHENA_RESULTS_BUCKET_PREFIX = "athena-results-bucket"

# Same action set as a read/write bucket grant
READ_WRITE_ACTIONS = [
    "s3:GetObject*",
    "s3:GetBucket*",
    "s3:List*",
    "s3:DeleteObject*",
    "s3:PutObject",
    "s3:PutObjectLegalHold",
    "s3:PutObjectRetention",
    "s3:PutObjectTagging",
    "s3:PutObjectVersionTagging",
    "s3:Abort*",
]


def build_bucket_policy(bucket_arn: str, read_write_principals: Optional[List[str]] = None) -> Dict:
    """
    Bucket policy document

    Args:
        bucket_arn: ARN of the bucket
        read_write_principals: Principals allowed to read and write objects

    Returns:
        Policy that denies non-TLS requests and grants read/write to the principals
    """
    statements = [{
        "Sid": "DenyInsecureTransport",
        "Effect": "Deny",
        "Principal": {"AWS": "*"},
        "Action": "s3:*",
        "Resource": [bucket_arn, f"{bucket_arn}/*"],
        "Condition": {"Bool": {"aws:SecureTransport": "false"}},
    }]
    if read_write_principals:
        statements.append({
            "Sid": "GovernanceReadWrite",
            "Effect": "Allow",
            "Principal": {"AWS": list(read_write_principals)},
            "Action": READ_WRITE_ACTIONS,
            "Resource": [bucket_arn, f"{bucket_arn}/*"],
        })
    return {"Version": "2012-10-17", "Statement": statements}


def create_bucket(context: DeploymentContext,
                  name: str,
                  bucket_name: str,
                  key: Optional[aws.kms.Key] = None,
                  object_ownership: str = "BucketOwnerEnforced",
                  log_sink: Optional[Dict[str, any]] = None,
                  tags: Dict[str, str] = None) -> Dict[str, any]:
    """
    Create a private bucket with encryption, ownership controls and optional access logging

    Args:
        context: Deployment context
        name: Resource name prefix
        bucket_name: S3 bucket name
        key: KMS key for SSE-KMS, SSE-S3 when omitted
        object_ownership: Object ownership mode
        log_sink: Bucket dict (from create_bucket) receiving this bucket's access logs
        tags: Additional tags

    Returns:
        Dict with bucket resources and outputs
    """
    tags = tags or {}

    if log_sink is not None and log_sink["bucket_name"] == bucket_name:
        raise ConfigurationError(f"{name}.log_sink", f"bucket {bucket_name} cannot receive its own access logs")

    bucket = aws.s3.Bucket(name,
        bucket=bucket_name,
        force_destroy=True,
        tags={**tags, "Name": bucket_name})

    public_access_block = aws.s3.BucketPublicAccessBlock(f"{name}-pab",
        bucket=bucket.id,
        block_public_acls=True,
        block_public_policy=True,
        ignore_public_acls=True,
        restrict_public_buckets=True)

    ownership_controls = aws.s3.BucketOwnershipControls(f"{name}-ownership",
        bucket=bucket.id,
        rule=aws.s3.BucketOwnershipControlsRuleArgs(
            object_ownership=object_ownership))

    if key is not None:
        default_encryption = aws.s3.BucketServerSideEncryptionConfigurationRuleApplyServerSideEncryptionByDefaultArgs(
            sse_algorithm="aws:kms",
            kms_master_key_id=key.arn)
    else:
        default_encryption = aws.s3.BucketServerSideEncryptionConfigurationRuleApplyServerSideEncryptionByDefaultArgs(
            sse_algorithm="AES256")

    encryption = aws.s3.BucketServerSideEncryptionConfiguration(f"{name}-encryption",
        bucket=bucket.id,
        rules=[aws.s3.BucketServerSideEncryptionConfigurationRuleArgs(
            apply_server_side_encryption_by_default=default_encryption,
            bucket_key_enabled=key is not None)])

    access_logging = None
    if log_sink is not None:
        access_logging = aws.s3.BucketLogging(f"{name}-logging",
            bucket=bucket.id,
            target_bucket=log_sink["bucket"].id,
            target_prefix=f"{bucket_name}/")

    return {
        "bucket": bucket,
        "bucket_name": bucket_name,
        "bucket_arn": context.bucket_arn(bucket_name),
        "encrypted_with": key,
        "public_access_block": public_access_block,
        "ownership_controls": ownership_controls,
        "encryption": encryption,
        "logging": access_logging,
        "log_prefix": f"{bucket_name}/" if access_logging is not None else None,
    }


def attach_bucket_policy(name: str,
                         bucket_info: Dict[str, any],
                         read_write_principals: Optional[List[str]] = None,
                         depends_on: Optional[List[pulumi.Resource]] = None) -> aws.s3.BucketPolicy:
    """Attach the TLS-only policy, granting read/write to the given principals"""
    policy = aws.s3.BucketPolicy(f"{name}-policy",
        bucket=bucket_info["bucket"].id,
        policy=json.dumps(build_bucket_policy(bucket_info["bucket_arn"], read_write_principals)),
        opts=pulumi.ResourceOptions(
            depends_on=[bucket_info["public_access_block"], *(depends_on or [])]))
    bucket_info["policy"] = policy
    return policy


def create_buckets(context: DeploymentContext,
                   config: DataLakeConfig,
                   keys: Dict[str, aws.kms.Key],
                   governance_principals: List[str],
                   depends_on: Optional[List[pulumi.Resource]] = None,
                   tags: Dict[str, str] = None) -> Dict[str, Dict[str, any]]:
    """
    Create the log sink, data lake and Athena results buckets

    Args:
        context: Deployment context
        config: Deployment configuration
        keys: KMS keys by role (see keys.py)
        governance_principals: Principals Lake Formation reads and writes data as
        depends_on: Resources the bucket policies wait for (principals must exist first)
        tags: Additional tags

    Returns:
        Dict of bucket dicts keyed logging / data_lake / athena_results
    """
    tags = tags or {}

    # Server access logs only support SSE-S3 on the destination
    logging_bucket = create_bucket(context, "logging-bucket",
        context.bucket_name(LOGGING_BUCKET_PREFIX),
        object_ownership="ObjectWriter",
        tags=tags)

    log_delivery_acl = aws.s3.BucketAcl("logging-bucket-acl",
        bucket=logging_bucket["bucket"].id,
        acl="log-delivery-write",
        opts=pulumi.ResourceOptions(depends_on=[logging_bucket["ownership_controls"]]))
    logging_bucket["acl"] = log_delivery_acl

    data_lake_bucket = create_bucket(context, "data-lake-bucket",
        context.bucket_name(DATA_LAKE_BUCKET_PREFIX),
        key=keys.get(DATA_LAKE_KEY),
        log_sink=logging_bucket,
        tags=tags)

    athena_results_bucket = create_bucket(context, "athena-results-bucket",
        context.bucket_name(ATHENA_RESULTS_BUCKET_PREFIX),
        key=keys.get(ATHENA_RESULTS_KEY),
        log_sink=logging_bucket,
        tags=tags)

    attach_bucket_policy("logging-bucket", logging_bucket)
    attach_bucket_policy("data-lake-bucket", data_lake_bucket, governance_principals, depends_on)
    attach_bucket_policy("athena-results-bucket", athena_results_bucket, governance_principals, depends_on)

    pulumi.log.warn("Buckets are created with force_destroy: objects are deleted with the stack")
    if not config.uses_bucket_keys:
        pulumi.log.info("Bucket encryption: SSE-S3")

    return {
        "logging": logging_bucket,
        "data_lake": data_lake_bucket,
        "athena_results": athena_results_bucket,
    }
