"""
Glue Database and Tables
One database located under the data lake bucket, one external table per definition
"""
from typing import Dict, List, Optional

import pulumi
import pulumi_aws as aws

from .context import DeploymentContext
from .schema import DatabaseDefinition, TableDefinition


def create_database(context: DeploymentContext,
                    definition: DatabaseDefinition,
                    bucket_info: Dict[str, any],
                    depends_on: Optional[List[pulumi.Resource]] = None) -> Dict[str, any]:
    """Create the Glue database at s3://<bucket>/<database>/"""
    location_uri = definition.location_uri(bucket_info["bucket_name"])

    database = aws.glue.CatalogDatabase(f"{definition.name}-database",
        catalog_id=context.account_id,
        name=definition.name,
        description=definition.description,
        location_uri=location_uri,
        opts=pulumi.ResourceOptions(depends_on=[bucket_info["bucket"], *(depends_on or [])]))

    return {
        "database": database,
        "definition": definition,
        "name": definition.name,
        "location_uri": location_uri,
    }


def create_table(context: DeploymentContext,
                 database_info: Dict[str, any],
                 table: TableDefinition,
                 bucket_info: Dict[str, any]) -> Dict[str, any]:
    """
    Create an external table with an explicit storage descriptor

    Args:
        context: Deployment context
        database_info: Database dict from create_database
        table: Table definition
        bucket_info: Bucket dict holding the table data

    Returns:
        Dict with table resource, name and location
    """
    definition: DatabaseDefinition = database_info["definition"]
    location = definition.table_location(bucket_info["bucket_name"], table)

    storage_format = table.storage_format

    glue_table = aws.glue.CatalogTable(f"{definition.name}-{table.name}-table",
        catalog_id=context.account_id,
        database_name=definition.name,
        name=table.name,
        description=table.description,
        table_type="EXTERNAL_TABLE",
        parameters={
            "classification": storage_format.classification,
            "EXTERNAL": "TRUE",
        },
        storage_descriptor=aws.glue.CatalogTableStorageDescriptorArgs(
            location=location,
            input_format=storage_format.input_format,
            output_format=storage_format.output_format,
            columns=[
                aws.glue.CatalogTableStorageDescriptorColumnArgs(
                    name=column.name,
                    type=column.type.value,
                    comment=column.comment)
                for column in table.columns
            ],
            ser_de_info=aws.glue.CatalogTableStorageDescriptorSerDeInfoArgs(
                serialization_library=storage_format.serialization_library,
                parameters=table.serde_parameters or None)),
        opts=pulumi.ResourceOptions(depends_on=[database_info["database"]]))

    return {
        "table": glue_table,
        "definition": table,
        "name": table.name,
        "location": location,
    }


def create_catalog(context: DeploymentContext,
                   definition: DatabaseDefinition,
                   bucket_info: Dict[str, any],
                   depends_on: Optional[List[pulumi.Resource]] = None) -> Dict[str, any]:
    """Create the database and all of its tables"""
    database_info = create_database(context, definition, bucket_info, depends_on)
    tables = {
        table.name: create_table(context, database_info, table, bucket_info)
        for table in definition.tables
    }
    pulumi.log.info(f"Declared Glue database {definition.name} with tables: {', '.join(tables) or '-'}")
    return {**database_info, "tables": tables}
