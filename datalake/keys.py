"""
KMS Keys
One key per protected bucket and one for the catalog, never shared
"""
from typing import Dict

import pulumi
import pulumi_aws as aws

from .config import DataLakeConfig

# Shortest window AWS allows, keys go away with the stack
DELETION_WINDOW_DAYS = 7

DATA_LAKE_KEY = "data-lake"
ATHENA_RESULTS_KEY = "athena-results"
CATALOG_KEY = "catalog"


def create_encryption_key(name: str, description: str, tags: Dict[str, str] = None) -> aws.kms.Key:
    """Create a rotating, destroyable KMS key with an alias"""
    tags = tags or {}

    key = aws.kms.Key(f"{name}-key",
        description=description,
        key_usage="ENCRYPT_DECRYPT",
        enable_key_rotation=True,
        deletion_window_in_days=DELETION_WINDOW_DAYS,
        tags={**tags, "Name": f"{name}-key"})

    aws.kms.Alias(f"{name}-key-alias",
        name=f"alias/{name}",
        target_key_id=key.key_id)

    return key


def create_keys(config: DataLakeConfig, tags: Dict[str, str] = None) -> Dict[str, aws.kms.Key]:
    """Create the keys the configured encryption modes need"""
    keys = {}

    if config.uses_bucket_keys:
        keys[DATA_LAKE_KEY] = create_encryption_key(
            DATA_LAKE_KEY, "Encrypts objects in the data lake bucket", tags)
        keys[ATHENA_RESULTS_KEY] = create_encryption_key(
            ATHENA_RESULTS_KEY, "Encrypts Athena query results", tags)

    if config.uses_catalog_key:
        keys[CATALOG_KEY] = create_encryption_key(
            "glue-catalog", "Encrypts Glue Data Catalog metadata", tags)

    if keys:
        pulumi.log.info(f"Declared KMS keys: {', '.join(keys)}")
    return keys
