"""
Registered Location
Puts the data lake bucket under Lake Formation mediation
"""
from typing import Dict, Optional

import pulumi
import pulumi_aws as aws

from .config import LocationRole
from .context import DeploymentContext
from .errors import ConfigurationError


def register_location(context: DeploymentContext,
                      bucket_info: Dict[str, any],
                      mode: LocationRole,
                      service_role: Optional[Dict[str, any]] = None,
                      hybrid_access_enabled: bool = True,
                      depends_on: Optional[list] = None) -> aws.lakeformation.Resource:
    """
    Register the bucket root with exactly one access role

    Args:
        context: Deployment context
        bucket_info: Bucket dict from create_bucket
        mode: Service role or service-linked role
        service_role: Role dict from create_lake_formation_service_role (service-role mode only)
        hybrid_access_enabled: Keep IAM permissions working alongside Lake Formation
        depends_on: Additional resources to wait for

    Returns:
        Lake Formation resource registration
    """
    if mode == LocationRole.SERVICE_ROLE:
        if service_role is None:
            raise ConfigurationError("location_role", "service-role registration needs the Lake Formation service role")
        role_arn = service_role["role_arn"]
        use_service_linked_role = False
        dependencies = [service_role["role"]]
    elif mode == LocationRole.SERVICE_LINKED_ROLE:
        if service_role is not None:
            raise ConfigurationError(
                "location_role",
                "service-linked-role registration cannot also use a custom service role for the same location")
        role_arn = context.service_linked_role_arn
        use_service_linked_role = True
        dependencies = []
    else:
        raise ConfigurationError("location_role", f"unknown mode {mode}")

    pulumi.log.info(f"Registering s3://{bucket_info['bucket_name']}/ with {mode.value} {role_arn}")

    return aws.lakeformation.Resource("data-lake-registered-location",
        arn=bucket_info["bucket_arn"],
        role_arn=role_arn,
        use_service_linked_role=use_service_linked_role,
        hybrid_access_enabled=hybrid_access_enabled,
        opts=pulumi.ResourceOptions(
            depends_on=[bucket_info["bucket"], *dependencies, *(depends_on or [])]))
