"""
Athena WorkGroup
Named query context writing results to the results bucket
"""
from typing import Dict, Optional

import pulumi
import pulumi_aws as aws


def result_output_location(bucket_name: str, workgroup_name: str) -> str:
    return f"s3://{bucket_name}/{workgroup_name}WorkGroup/"


def create_workgroup(bucket_info: Dict[str, any],
                     name: str = "ReadOnly",
                     key: Optional[aws.kms.Key] = None,
                     tags: Dict[str, str] = None) -> Dict[str, any]:
    """Create the workgroup; results use the bucket's KMS key when it has one"""
    tags = tags or {}
    output_location = result_output_location(bucket_info["bucket_name"], name)

    if key is not None:
        encryption = aws.athena.WorkgroupConfigurationResultConfigurationEncryptionConfigurationArgs(
            encryption_option="SSE_KMS",
            kms_key_arn=key.arn)
    else:
        encryption = aws.athena.WorkgroupConfigurationResultConfigurationEncryptionConfigurationArgs(
            encryption_option="SSE_S3")

    workgroup = aws.athena.Workgroup(f"{name.lower()}-workgroup",
        name=name,
        force_destroy=True,
        configuration=aws.athena.WorkgroupConfigurationArgs(
            enforce_workgroup_configuration=True,
            publish_cloudwatch_metrics_enabled=True,
            result_configuration=aws.athena.WorkgroupConfigurationResultConfigurationArgs(
                output_location=output_location,
                encryption_configuration=encryption)),
        tags=tags,
        opts=pulumi.ResourceOptions(depends_on=[bucket_info["bucket"]]))

    return {
        "workgroup": workgroup,
        "name": name,
        "output_location": output_location,
    }
