"""
Data lake composition
Declares every component in dependency order and returns the graph as a dict
"""
from typing import Dict

import pulumi

from .assets import upload_data_assets
from .buckets import create_buckets
from .catalog import configure_catalog_encryption, configure_data_lake_settings
from .config import DataLakeConfig, LocationRole
from .context import DeploymentContext
from .keys import ATHENA_RESULTS_KEY, CATALOG_KEY, DATA_LAKE_KEY, create_keys
from .location import register_location
from .permissions import grant_read_access
from .principals import create_lake_formation_service_role, resolve_admin_principals
from .tables import create_catalog
from .workgroup import create_workgroup


def build_data_lake(config: DataLakeConfig, context: DeploymentContext) -> Dict[str, any]:
    """Declare the whole data lake for one account"""
    tags = config.common_tags
    pulumi.log.info(f"Declaring data lake: {config.describe()}")

    # 1. Encryption keys
    keys = create_keys(config, tags)
    bucket_keys = [keys[role] for role in (DATA_LAKE_KEY, ATHENA_RESULTS_KEY) if role in keys]

    # 2. Principals
    service_role = create_lake_formation_service_role(context, bucket_keys, tags)
    admins = resolve_admin_principals(config.admin_role_arn, service_role["role_arn"], context.deployer_arn)

    governance_principals = [service_role["role_arn"]]
    if config.location_role == LocationRole.SERVICE_LINKED_ROLE:
        governance_principals.append(context.service_linked_role_arn)

    # 3. Buckets
    buckets = create_buckets(context, config, keys, governance_principals,
        depends_on=[service_role["role"]], tags=tags)

    # 4. Catalog settings
    catalog_encryption = configure_catalog_encryption(context, keys.get(CATALOG_KEY))
    data_lake_settings = configure_data_lake_settings(context, admins,
        depends_on=[service_role["role"]])

    # 5. Registered location
    location = register_location(context, buckets["data_lake"], config.location_role,
        service_role=service_role if config.location_role == LocationRole.SERVICE_ROLE else None,
        hybrid_access_enabled=config.hybrid_access_enabled,
        depends_on=[data_lake_settings])

    # 6. Database and tables, after the empty defaults are in place
    catalog = create_catalog(context, config.database, buckets["data_lake"],
        depends_on=[data_lake_settings, catalog_encryption])

    # 7. Grants
    grants = grant_read_access(context, catalog, config.grantees, depends_on=[data_lake_settings])

    # 8. Sample data
    assets = upload_data_assets(buckets["data_lake"], config.data_asset_dir, f"{config.database.name}/",
        depends_on=[buckets["data_lake"]["encryption"]])

    # 9. Athena workgroup
    workgroup = create_workgroup(buckets["athena_results"], config.workgroup_name,
        key=keys.get(ATHENA_RESULTS_KEY), tags=tags)

    return {
        "keys": keys,
        "service_role": service_role,
        "admins": admins,
        "buckets": buckets,
        "catalog_encryption": catalog_encryption,
        "data_lake_settings": data_lake_settings,
        "location": location,
        "catalog": catalog,
        "grants": grants,
        "assets": assets,
        "workgroup": workgroup,
    }
