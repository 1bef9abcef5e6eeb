"""
Lake Formation Permissions
Explicit read-only grants on the database and its tables
"""
import re
from enum import Enum
from typing import Dict, Iterable, List, Optional

import pulumi
import pulumi_aws as aws

from .context import DeploymentContext
from .errors import ConfigurationError


class Permission(str, Enum):
    """Lake Formation permissions"""
    ALL = "ALL"
    SELECT = "SELECT"
    ALTER = "ALTER"
    DROP = "DROP"
    DELETE = "DELETE"
    INSERT = "INSERT"
    DESCRIBE = "DESCRIBE"
    CREATE_DATABASE = "CREATE_DATABASE"
    CREATE_TABLE = "CREATE_TABLE"
    DATA_LOCATION_ACCESS = "DATA_LOCATION_ACCESS"


READ_ONLY = frozenset({Permission.DESCRIBE, Permission.SELECT})

DATABASE_READ = [Permission.DESCRIBE]
TABLE_READ = [Permission.DESCRIBE, Permission.SELECT]


def _read_only(field: str, permissions: Iterable[Permission]) -> List[str]:
    requested = [Permission(p) for p in permissions]
    if not requested:
        raise ConfigurationError(field, "at least one permission is required")
    extra = [p.value for p in requested if p not in READ_ONLY]
    if extra:
        raise ConfigurationError(field, f"only read-only grants are allowed, got {', '.join(extra)}")
    return [p.value for p in requested]


def grant_suffix(principal: str) -> str:
    """Resource-name suffix for a principal: its account and IAM name, independent of list order"""
    parts = principal.split(":", 5)
    if len(parts) < 6 or not parts[5]:
        raise ConfigurationError("principal", f"'{principal}' is not an ARN")
    account, resource = parts[4], parts[5]
    return re.sub(r"[^A-Za-z0-9_.-]+", "-", f"{account}-{resource}").strip("-")


def grant_database(context: DeploymentContext,
                   name: str,
                   database_info: Dict[str, any],
                   principal: str,
                   permissions: Iterable[Permission] = DATABASE_READ,
                   depends_on: Optional[List[pulumi.Resource]] = None) -> Dict[str, any]:
    """Grant database-level permissions; waits for the database"""
    granted = _read_only(f"{name}.permissions", permissions)
    target = database_info["database"]

    permission = aws.lakeformation.Permissions(name,
        catalog_id=context.account_id,
        principal=principal,
        permissions=granted,
        permissions_with_grant_options=[],
        database=aws.lakeformation.PermissionsDatabaseArgs(
            catalog_id=context.account_id,
            name=database_info["name"]),
        opts=pulumi.ResourceOptions(depends_on=[target, *(depends_on or [])]))

    return {
        "permission": permission,
        "target": target,
        "principal": principal,
        "permissions": granted,
        "resource": {"catalog_id": context.account_id, "name": database_info["name"]},
    }


def grant_table(context: DeploymentContext,
                name: str,
                database_info: Dict[str, any],
                table_info: Dict[str, any],
                principal: str,
                permissions: Iterable[Permission] = TABLE_READ,
                depends_on: Optional[List[pulumi.Resource]] = None) -> Dict[str, any]:
    """Grant table-level permissions; waits for the table"""
    granted = _read_only(f"{name}.permissions", permissions)
    target = table_info["table"]

    permission = aws.lakeformation.Permissions(name,
        catalog_id=context.account_id,
        principal=principal,
        permissions=granted,
        permissions_with_grant_options=[],
        table=aws.lakeformation.PermissionsTableArgs(
            catalog_id=context.account_id,
            database_name=database_info["name"],
            name=table_info["name"]),
        opts=pulumi.ResourceOptions(depends_on=[target, *(depends_on or [])]))

    return {
        "permission": permission,
        "target": target,
        "principal": principal,
        "permissions": granted,
        "resource": {
            "catalog_id": context.account_id,
            "database_name": database_info["name"],
            "name": table_info["name"],
        },
    }


def grant_read_access(context: DeploymentContext,
                      catalog_info: Dict[str, any],
                      principals: List[str],
                      depends_on: Optional[List[pulumi.Resource]] = None) -> List[Dict[str, any]]:
    """
    Read-only access for each principal

    Args:
        context: Deployment context
        catalog_info: Dict from create_catalog
        principals: Grantee ARNs
        depends_on: Extra dependencies (e.g. data lake settings making the deployer an admin)

    Returns:
        List of grant dicts: one DESCRIBE on the database and DESCRIBE+SELECT per table, per principal
    """
    grants = []
    database_name = catalog_info["name"]

    # Grant names depend on the principal only, never on its position
    suffixes = {principal: grant_suffix(principal) for principal in principals}
    if len(set(suffixes.values())) != len(suffixes):
        raise ConfigurationError("reader_principal_arns", "principals must have distinct account/name pairs")

    for principal, suffix in suffixes.items():
        grants.append(grant_database(context,
            f"{database_name}-database-permission-{suffix}",
            catalog_info, principal, DATABASE_READ, depends_on))

        for table_name, table_info in catalog_info["tables"].items():
            grants.append(grant_table(context,
                f"{database_name}-{table_name}-table-permission-{suffix}",
                catalog_info, table_info, principal, TABLE_READ, depends_on))

    pulumi.log.info(f"Declared {len(grants)} Lake Formation grants for {len(principals)} principal(s)")
    return grants
