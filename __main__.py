"""
Lake Formation + Glue basic setup
Governed S3 data lake with a Glue catalog, read-only grants and an Athena workgroup
"""
import pulumi
from dotenv import load_dotenv

from datalake.config import get_config
from datalake.context import resolve_deployment_context
from datalake.stack import build_data_lake

# LF_ADMIN_ROLE_ARN may come from a local .env file
load_dotenv()

# Configuration (fails before anything is declared)
config = get_config()

# Account / partition / deployer identity
context = resolve_deployment_context()

data_lake = build_data_lake(config, context)

buckets = data_lake["buckets"]
catalog = data_lake["catalog"]

# Exports
pulumi.export("logging_bucket", buckets["logging"]["bucket"].bucket)
pulumi.export("data_lake_bucket", buckets["data_lake"]["bucket"].bucket)
pulumi.export("athena_results_bucket", buckets["athena_results"]["bucket"].bucket)
pulumi.export("lake_formation_service_role_arn", data_lake["service_role"]["role"].arn)
pulumi.export("lake_formation_admins", data_lake["admins"])
pulumi.export("database_name", catalog["database"].name)
pulumi.export("database_location", catalog["location_uri"])
pulumi.export("tables", {name: info["location"] for name, info in catalog["tables"].items()})
pulumi.export("workgroup_name", data_lake["workgroup"]["workgroup"].name)
pulumi.export("query_results_location", data_lake["workgroup"]["output_location"])
pulumi.export("kms_key_arns", {role: key.arn for role, key in data_lake["keys"].items()})
