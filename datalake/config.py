"""
Configuration management for the Lake Formation / Glue deployment
"""

import os
import re
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

import pulumi

from .errors import ConfigurationError
from .permissions import grant_suffix
from .schema import DatabaseDefinition, parse_database, sample_database

ADMIN_ROLE_ENV_VAR = "LF_ADMIN_ROLE_ARN"

IAM_PRINCIPAL_ARN = re.compile(r'^arn:aws[a-z-]*:iam::\d{12}:(role|user)/.+$')


class BucketEncryption(str, Enum):
    S3_MANAGED = "s3-managed"
    KMS = "kms"


class CatalogEncryption(str, Enum):
    AWS_MANAGED = "aws-managed"
    KMS = "kms"


class LocationRole(str, Enum):
    """How Lake Formation assumes access to the registered location"""
    SERVICE_ROLE = "service-role"
    SERVICE_LINKED_ROLE = "service-linked-role"


def _choice(enum_cls, key: str, value: Optional[str], default):
    if value is None:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ConfigurationError(key, f"unknown value '{value}', expected one of {allowed}") from None


def _principal_arn(key: str, value: str) -> str:
    if not IAM_PRINCIPAL_ARN.match(value):
        raise ConfigurationError(key, f"'{value}' is not an IAM role or user ARN")
    return value


class DataLakeConfig:
    """Centralized configuration for the data lake deployment"""

    def __init__(self, config: Optional[pulumi.Config] = None, environ: Optional[Mapping[str, str]] = None):
        self.config = config if config is not None else pulumi.Config()
        environ = os.environ if environ is None else environ

        # Administrator identity - nothing is declared without it
        admin_role_arn = self.config.get("lf_admin_role_arn") or environ.get(ADMIN_ROLE_ENV_VAR, "")
        if not admin_role_arn:
            raise ConfigurationError(
                "lf_admin_role_arn",
                f"administrator principal is not set (pulumi config or {ADMIN_ROLE_ENV_VAR} environment variable)")
        self.admin_role_arn = _principal_arn("lf_admin_role_arn", admin_role_arn)

        # Encryption
        self.bucket_encryption = _choice(
            BucketEncryption, "bucket_encryption", self.config.get("bucket_encryption"), BucketEncryption.KMS)
        self.catalog_encryption = _choice(
            CatalogEncryption, "catalog_encryption", self.config.get("catalog_encryption"), CatalogEncryption.KMS)

        # Location registration
        self.location_role = _choice(
            LocationRole, "location_role", self.config.get("location_role"), LocationRole.SERVICE_ROLE)
        hybrid = self.config.get_bool("hybrid_access_enabled")
        self.hybrid_access_enabled = True if hybrid is None else hybrid

        # Catalog
        raw_database = self.config.get_object("database")
        self.database: DatabaseDefinition = (
            sample_database() if raw_database is None else parse_database(raw_database))

        readers = self.config.get_object("reader_principal_arns") or []
        self.reader_principal_arns: List[str] = [
            _principal_arn(f"reader_principal_arns[{i}]", arn) for i, arn in enumerate(readers)
        ]
        names = [grant_suffix(arn) for arn in self.grantees]
        if len(set(names)) != len(names):
            raise ConfigurationError("reader_principal_arns", "principals must have distinct account/name pairs")

        # Sample data and workgroup
        self.data_asset_dir = self.config.get("data_asset_dir") or "data"
        self.workgroup_name = self.config.get("workgroup_name") or "ReadOnly"

        # Additional tags
        self.additional_tags: Dict[str, str] = self.config.get_object("tags") or {}

    @property
    def common_tags(self) -> Dict[str, str]:
        """Get common tags for all resources"""
        base_tags = {
            "Project": "lf-glue-basic-setup",
            "ManagedBy": "pulumi",
            "Purpose": "sample-data-lake",
        }
        base_tags.update(self.additional_tags)
        return base_tags

    @property
    def uses_bucket_keys(self) -> bool:
        return self.bucket_encryption == BucketEncryption.KMS

    @property
    def uses_catalog_key(self) -> bool:
        return self.catalog_encryption == CatalogEncryption.KMS

    @property
    def grantees(self) -> List[str]:
        """Principals receiving read-only grants, admin first, without duplicates"""
        seen: List[str] = []
        for arn in [self.admin_role_arn, *self.reader_principal_arns]:
            if arn not in seen:
                seen.append(arn)
        return seen

    def describe(self) -> Dict[str, Any]:
        return {
            "bucket_encryption": self.bucket_encryption.value,
            "catalog_encryption": self.catalog_encryption.value,
            "location_role": self.location_role.value,
            "database": self.database.name,
            "tables": [table.name for table in self.database.tables],
        }


def get_config() -> DataLakeConfig:
    """Get the configuration for the current stack"""
    return DataLakeConfig()
