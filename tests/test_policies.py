"""
Unit tests for principals, IAM/S3 policy documents and catalog settings
"""

import unittest

from stubs import ACCOUNT_ID, ADMIN_ARN, CONTEXT, DEPLOYER_ARN
from datalake.buckets import READ_WRITE_ACTIONS, build_bucket_policy
from datalake.catalog import build_data_lake_settings_args
from datalake.principals import (
    build_service_role_policy,
    build_service_role_trust_policy,
    resolve_admin_principals,
    service_role_name,
)

SERVICE_ROLE_ARN = f"arn:aws:iam::{ACCOUNT_ID}:role/LakeFormationServiceRole-{ACCOUNT_ID}"


class TestDeploymentContext(unittest.TestCase):

    def test_service_linked_role_arn(self):
        self.assertEqual(
            CONTEXT.service_linked_role_arn,
            "arn:aws:iam::123456789012:role/aws-service-role/lakeformation.amazonaws.com/"
            "AWSServiceRoleForLakeFormationDataAccess")

    def test_bucket_names_derive_from_account(self):
        self.assertEqual(CONTEXT.bucket_name("logging"), "logging-123456789012")
        self.assertEqual(CONTEXT.bucket_arn("logging-123456789012"), "arn:aws:s3:::logging-123456789012")

    def test_service_role_arn(self):
        self.assertEqual(CONTEXT.iam_role_arn(service_role_name(CONTEXT)), SERVICE_ROLE_ARN)


class TestAdminPrincipals(unittest.TestCase):

    def test_order_is_admin_service_role_deployer(self):
        self.assertEqual(
            resolve_admin_principals(ADMIN_ARN, SERVICE_ROLE_ARN, DEPLOYER_ARN),
            [ADMIN_ARN, SERVICE_ROLE_ARN, DEPLOYER_ARN])

    def test_deployer_equal_to_admin_is_listed_once(self):
        self.assertEqual(
            resolve_admin_principals(ADMIN_ARN, SERVICE_ROLE_ARN, ADMIN_ARN),
            [ADMIN_ARN, SERVICE_ROLE_ARN])


class TestServiceRolePolicies(unittest.TestCase):

    def test_trust_policy_allows_set_context(self):
        statement, = build_service_role_trust_policy()["Statement"]
        self.assertEqual(statement["Principal"], {"Service": "lakeformation.amazonaws.com"})
        self.assertEqual(statement["Action"], ["sts:AssumeRole", "sts:SetContext"])

    def test_no_kms_statement_without_keys(self):
        sids = [s["Sid"] for s in build_service_role_policy([])["Statement"]]
        self.assertEqual(sids, ["S3ReadWriteAccess", "LakeFormationPermissions"])

    def test_kms_statement_scoped_to_bucket_keys(self):
        keys = ["arn:aws:kms:us-east-1:123456789012:key/a", "arn:aws:kms:us-east-1:123456789012:key/b"]
        kms = build_service_role_policy(keys)["Statement"][-1]
        self.assertEqual(kms["Sid"], "BucketKeyUsage")
        self.assertEqual(kms["Resource"], keys)
        self.assertIn("kms:GenerateDataKey*", kms["Action"])


class TestBucketPolicy(unittest.TestCase):
    bucket_arn = "arn:aws:s3:::data-lake-bucket-123456789012"

    def test_denies_insecure_transport(self):
        deny, = build_bucket_policy(self.bucket_arn)["Statement"]
        self.assertEqual(deny["Effect"], "Deny")
        self.assertEqual(deny["Condition"], {"Bool": {"aws:SecureTransport": "false"}})
        self.assertEqual(deny["Resource"], [self.bucket_arn, f"{self.bucket_arn}/*"])

    def test_grants_read_write_to_governance_principals(self):
        policy = build_bucket_policy(self.bucket_arn, [SERVICE_ROLE_ARN, CONTEXT.service_linked_role_arn])
        allow = policy["Statement"][1]
        self.assertEqual(allow["Effect"], "Allow")
        self.assertEqual(allow["Principal"], {"AWS": [SERVICE_ROLE_ARN, CONTEXT.service_linked_role_arn]})
        self.assertEqual(allow["Action"], READ_WRITE_ACTIONS)
        for action in ["s3:GetObject*", "s3:GetBucket*", "s3:List*"]:
            self.assertIn(action, allow["Action"])


class TestDataLakeSettings(unittest.TestCase):

    def test_default_permissions_are_empty(self):
        args = build_data_lake_settings_args(CONTEXT, [ADMIN_ARN])
        self.assertEqual(args["create_database_default_permissions"], [])
        self.assertEqual(args["create_table_default_permissions"], [])

    def test_admins_and_cross_account_version(self):
        args = build_data_lake_settings_args(CONTEXT, [ADMIN_ARN, SERVICE_ROLE_ARN])
        self.assertEqual(args["admins"], [ADMIN_ARN, SERVICE_ROLE_ARN])
        self.assertEqual(args["parameters"], {"CROSS_ACCOUNT_VERSION": "4"})
        self.assertEqual(args["catalog_id"], ACCOUNT_ID)


if __name__ == "__main__":
    unittest.main()
