"""
Deployment context
Account, partition and region of the target environment, resolved once and passed to every component
"""
from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

LAKE_FORMATION_SLR_NAME = "AWSServiceRoleForLakeFormationDataAccess"


@dataclass(frozen=True)
class DeploymentContext:
    account_id: str
    partition: str
    region: str
    deployer_arn: str

    def arn(self, service: str, resource: str, region: str = "") -> str:
        """Build an ARN in this account and partition"""
        return f"arn:{self.partition}:{service}:{region}:{self.account_id}:{resource}"

    def iam_role_arn(self, path_and_name: str) -> str:
        return self.arn("iam", f"role/{path_and_name}")

    @property
    def service_linked_role_arn(self) -> str:
        """Lake Formation data-access service-linked role (fixed AWS naming)"""
        return self.iam_role_arn(f"aws-service-role/lakeformation.amazonaws.com/{LAKE_FORMATION_SLR_NAME}")

    def bucket_name(self, prefix: str) -> str:
        return f"{prefix}-{self.account_id}"

    def bucket_arn(self, bucket_name: str) -> str:
        # S3 ARNs carry neither region nor account
        return f"arn:{self.partition}:s3:::{bucket_name}"


def resolve_deployment_context() -> DeploymentContext:
    """Resolve the context from the credentials Pulumi runs with"""
    current = aws.get_caller_identity()
    partition = aws.get_partition()
    region = aws.get_region()

    # An assumed-role caller ARN is an STS ARN; Lake Formation needs the IAM role behind it
    session = aws.iam.get_session_context(arn=current.arn)

    pulumi.log.info(f"Deploying to account {current.account_id} ({partition.partition}, {region.region}) "
                    f"as {session.issuer_arn}")

    return DeploymentContext(
        account_id=current.account_id,
        partition=partition.partition,
        region=region.region,
        deployer_arn=session.issuer_arn,
    )
