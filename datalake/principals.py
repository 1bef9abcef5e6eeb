"""
Principals
Lake Formation service role and the admin principal list
"""
import json
from typing import Dict, List, Optional

import pulumi
import pulumi_aws as aws

from .context import DeploymentContext

S3_DATA_ACCESS_ACTIONS = [
    "s3:GetObject",
    "s3:GetObjectVersion",
    "s3:PutObject",
    "s3:DeleteObject",
    "s3:ListAllMyBuckets",
    "s3:ListBucket",
    "s3:GetBucketLocation",
]

LAKE_FORMATION_ACTIONS = [
    "lakeformation:GetDataAccess",
    "lakeformation:GrantPermissions",
    "lakeformation:RevokePermissions",
    "lakeformation:BatchGrantPermissions",
    "lakeformation:BatchRevokePermissions",
    "lakeformation:ListPermissions",
]

KMS_DATA_KEY_ACTIONS = [
    "kms:Decrypt",
    "kms:Encrypt",
    "kms:GenerateDataKey*",
    "kms:ReEncrypt*",
    "kms:DescribeKey",
]


def service_role_name(context: DeploymentContext) -> str:
    return f"LakeFormationServiceRole-{context.account_id}"


def build_service_role_trust_policy() -> Dict:
    # sts:SetContext is required for trusted identity propagation
    return {
        "Version": "2012-10-17",
        "Statement": [{
            "Effect": "Allow",
            "Principal": {"Service": "lakeformation.amazonaws.com"},
            "Action": ["sts:AssumeRole", "sts:SetContext"],
        }],
    }


def build_service_role_policy(key_arns: List[str]) -> Dict:
    """Inline policy of the service role; KMS statement only when bucket keys exist"""
    statements = [
        {
            "Sid": "S3ReadWriteAccess",
            "Effect": "Allow",
            "Action": S3_DATA_ACCESS_ACTIONS,
            "Resource": "*",
        },
        {
            "Sid": "LakeFormationPermissions",
            "Effect": "Allow",
            "Action": LAKE_FORMATION_ACTIONS,
            "Resource": "*",
        },
    ]
    if key_arns:
        statements.append({
            "Sid": "BucketKeyUsage",
            "Effect": "Allow",
            "Action": KMS_DATA_KEY_ACTIONS,
            "Resource": list(key_arns),
        })
    return {"Version": "2012-10-17", "Statement": statements}


def create_lake_formation_service_role(context: DeploymentContext,
                                       bucket_keys: Optional[List[aws.kms.Key]] = None,
                                       tags: Dict[str, str] = None) -> Dict[str, any]:
    """
    Create the custom role Lake Formation assumes for the registered location

    Args:
        context: Deployment context
        bucket_keys: KMS keys protecting the governed buckets
        tags: Additional tags

    Returns:
        Dict with role resource, its (deterministic) ARN and name
    """
    tags = tags or {}
    bucket_keys = bucket_keys or []
    role_name = service_role_name(context)

    role = aws.iam.Role("lake-formation-service-role",
        name=role_name,
        assume_role_policy=json.dumps(build_service_role_trust_policy()),
        tags={**tags, "Name": role_name})

    aws.iam.RolePolicyAttachment("lake-formation-data-admin",
        policy_arn=f"arn:{context.partition}:iam::aws:policy/AWSLakeFormationDataAdmin",
        role=role.name)

    if bucket_keys:
        policy = pulumi.Output.all(*[key.arn for key in bucket_keys]).apply(
            lambda arns: json.dumps(build_service_role_policy(arns)))
    else:
        policy = json.dumps(build_service_role_policy([]))

    inline_policy = aws.iam.RolePolicy("lake-formation-s3-data-access",
        name="S3DataAccess",
        role=role.id,
        policy=policy)

    return {
        "role": role,
        "role_arn": context.iam_role_arn(role_name),
        "role_name": role_name,
        "inline_policy": inline_policy,
    }


def resolve_admin_principals(admin_arn: str, service_role_arn: str, deployer_arn: str) -> List[str]:
    """Ordered, de-duplicated Lake Formation admin list"""
    admins: List[str] = []
    for arn in (admin_arn, service_role_arn, deployer_arn):
        if arn and arn not in admins:
            admins.append(arn)
    return admins
