"""
Catalog Settings
Glue Data Catalog encryption and Lake Formation data lake settings
"""
from typing import Dict, List, Optional

import pulumi
import pulumi_aws as aws

from .context import DeploymentContext

CROSS_ACCOUNT_VERSION = "4"


def configure_catalog_encryption(context: DeploymentContext,
                                 key: Optional[aws.kms.Key] = None) -> aws.glue.DataCatalogEncryptionSettings:
    """
    Encrypt catalog metadata at rest

    SSE-KMS with the AWS managed key unless a customer managed key is given.
    """
    encryption_at_rest = aws.glue.DataCatalogEncryptionSettingsDataCatalogEncryptionSettingsEncryptionAtRestArgs(
        catalog_encryption_mode="SSE-KMS",
        sse_aws_kms_key_id=key.arn if key is not None else None)

    return aws.glue.DataCatalogEncryptionSettings("catalog-encryption-settings",
        catalog_id=context.account_id,
        data_catalog_encryption_settings=aws.glue.DataCatalogEncryptionSettingsDataCatalogEncryptionSettingsArgs(
            encryption_at_rest=encryption_at_rest,
            connection_password_encryption=aws.glue.DataCatalogEncryptionSettingsDataCatalogEncryptionSettingsConnectionPasswordEncryptionArgs(
                return_connection_password_encrypted=False)))


def build_data_lake_settings_args(context: DeploymentContext, admins: List[str]) -> Dict[str, any]:
    # Empty defaults: every access must come from an explicit grant
    return {
        "catalog_id": context.account_id,
        "admins": list(admins),
        "parameters": {"CROSS_ACCOUNT_VERSION": CROSS_ACCOUNT_VERSION},
        "create_database_default_permissions": [],
        "create_table_default_permissions": [],
    }


def configure_data_lake_settings(context: DeploymentContext,
                                 admins: List[str],
                                 depends_on: Optional[List[pulumi.Resource]] = None) -> aws.lakeformation.DataLakeSettings:
    """Publish the admin list and drop implicit IAMAllowedPrincipals defaults"""
    args = build_data_lake_settings_args(context, admins)
    pulumi.log.info(f"Lake Formation admins: {', '.join(args['admins'])}")

    return aws.lakeformation.DataLakeSettings("data-lake-settings",
        **args,
        opts=pulumi.ResourceOptions(depends_on=depends_on or []))
