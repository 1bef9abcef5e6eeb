"""
Unit tests for catalog definitions
Column types, storage formats and location rules
"""

import unittest

from pydantic import ValidationError

from stubs import ACCOUNT_ID
from datalake.errors import ConfigurationError
from datalake.schema import (
    Column,
    ColumnType,
    DataFormat,
    DatabaseDefinition,
    TableDefinition,
    parse_database,
    sample_database,
)

BUCKET = f"data-lake-bucket-{ACCOUNT_ID}"


class TestColumns(unittest.TestCase):

    def test_known_types_are_accepted(self):
        for literal in ["tinyint", "smallint", "int", "bigint", "float", "double", "string"]:
            with self.subTest(type=literal):
                self.assertEqual(Column(name="c", type=literal).type.value, literal)

    def test_type_literal_is_case_insensitive(self):
        self.assertEqual(Column(name="id", type="BIGINT").type, ColumnType.BIGINT)

    def test_unknown_type_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            Column(name="created", type="timestamp")
        self.assertIn("unsupported column type 'timestamp'", str(ctx.exception))

    def test_reserved_word_is_reported(self):
        with self.assertLogs("datalake.schema", level="WARNING") as logs:
            Column(name="select", type="int")
        self.assertIn("reserved word", logs.output[0])

    def test_upper_case_name_is_reported(self):
        with self.assertLogs("datalake.schema", level="WARNING") as logs:
            Column(name="Amount", type="float")
        self.assertIn("lower-cased", logs.output[0])

    def test_invalid_name_is_rejected(self):
        with self.assertRaises(ValidationError):
            Column(name="1st", type="int")


class TestTables(unittest.TestCase):

    def test_table_needs_columns(self):
        with self.assertRaises(ValidationError):
            TableDefinition(name="empty", columns=[])

    def test_duplicate_columns_rejected(self):
        with self.assertRaises(ValidationError):
            TableDefinition(name="t", columns=[
                Column(name="id", type="int"),
                Column(name="ID", type="bigint"),
            ])

    def test_json_format_has_no_serde_parameters(self):
        table = TableDefinition(name="t", columns=[Column(name="n", type="int")])
        self.assertEqual(table.data_format, DataFormat.JSON)
        self.assertEqual(table.serde_parameters, {})
        self.assertEqual(table.storage_format.serialization_library, "org.openx.data.jsonserde.JsonSerDe")
        self.assertEqual(table.storage_format.input_format, "org.apache.hadoop.mapred.TextInputFormat")
        self.assertEqual(table.storage_format.output_format,
                         "org.apache.hadoop.hive.ql.io.HiveIgnoreKeyTextOutputFormat")

    def test_csv_format_carries_delimiter_and_header(self):
        table = TableDefinition(
            name="orders",
            data_format="csv",
            delimiter="|",
            skip_header_lines=2,
            columns=[Column(name="amount", type="float")],
        )
        self.assertEqual(table.storage_format.serialization_library,
                         "org.apache.hadoop.hive.serde2.OpenCSVSerde")
        self.assertEqual(table.serde_parameters, {"separatorChar": "|", "skip.header.line.count": "2"})


class TestDatabases(unittest.TestCase):

    def test_sample_database(self):
        database = sample_database()
        self.assertEqual(database.name, "sample_database")
        self.assertEqual([t.name for t in database.tables], ["sample_table"])
        column, = database.tables[0].columns
        self.assertEqual((column.name, column.type, column.comment), ("number", ColumnType.INT, "An integer."))

    def test_locations_nest_under_bucket(self):
        database = sample_database()
        table = database.tables[0]
        db_location = database.location_uri(BUCKET)
        table_location = database.table_location(BUCKET, table)

        self.assertEqual(db_location, f"s3://{BUCKET}/sample_database/")
        self.assertEqual(table_location, f"s3://{BUCKET}/sample_database/sample_table/")
        self.assertTrue(table_location.startswith(db_location))

    def test_duplicate_tables_rejected(self):
        table = TableDefinition(name="t", columns=[Column(name="n", type="int")])
        with self.assertRaises(ValidationError):
            DatabaseDefinition(name="db", tables=[table, table])

    def test_database_needs_tables(self):
        with self.assertRaises(ValidationError):
            DatabaseDefinition(name="db", tables=[])
        with self.assertRaises(ValidationError):
            DatabaseDefinition(name="db")


class TestParseDatabase(unittest.TestCase):

    def test_parses_config_data(self):
        database = parse_database({
            "name": "sales",
            "description": "Sales database containing customer and order information.",
            "tables": [{
                "name": "customers",
                "data_format": "csv",
                "columns": [
                    {"name": "id", "type": "bigint", "comment": "Customer ID"},
                    {"name": "email", "type": "string"},
                ],
            }],
        })
        self.assertEqual(database.tables[0].columns[0].type, ColumnType.BIGINT)
        self.assertEqual(database.tables[0].data_format, DataFormat.CSV)

    def test_unknown_type_is_a_configuration_error(self):
        with self.assertRaises(ConfigurationError) as ctx:
            parse_database({
                "name": "sales",
                "tables": [{"name": "orders", "columns": [{"name": "at", "type": "varchar(20)"}]}],
            })
        self.assertEqual(ctx.exception.field, "database.tables.0.columns.0.type")
        self.assertIn("varchar(20)", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
