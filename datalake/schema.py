"""
Catalog definitions for the Glue database and its tables.

This module contains:
- ColumnType: the primitive column types the catalog accepts
- DataFormat / StorageFormat: storage format presets (input/output format + SerDe)
- Column, TableDefinition, DatabaseDefinition: validated declarations
- sample_database: the definition deployed when none is configured

Definitions are plain data; Glue resources are declared from them in tables.py.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = r'^[a-z][a-z0-9_]*$'

TEXT_INPUT_FORMAT = "org.apache.hadoop.mapred.TextInputFormat"
TEXT_OUTPUT_FORMAT = "org.apache.hadoop.hive.ql.io.HiveIgnoreKeyTextOutputFormat"

# Athena DDL reserved keywords; such column names need backticks in queries
RESERVED_WORDS = frozenset("""
    all alter and array as authorization between bigint binary boolean both by case cast char column
    commit constraint create cross cube current current_date current_timestamp cursor database date
    decimal delete describe distinct double drop else end exchange exists extended external extract
    false fetch float floor following for foreign from full function grant group grouping having if
    import in inner insert int integer intersect interval into is join lateral left less like local
    macro map more none not null numeric of on only or order out outer over partition percent
    preceding precision preserve primary procedure range reads reduce references regexp revoke right
    rlike rollback rollup row rows select set smallint start table tablesample then time timestamp to
    transform trigger true truncate unbounded union uniquejoin update user using utc_timestamp values
    varchar view when where window with
""".split())


class ColumnType(str, Enum):
    """Primitive Hive types recognized by the Glue catalog"""
    TINYINT = "tinyint"
    SMALLINT = "smallint"
    INT = "int"
    BIGINT = "bigint"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"


class DataFormat(str, Enum):
    JSON = "json"
    CSV = "csv"


class StorageFormat(BaseModel):
    """Input/output format pair plus the record serialization library"""
    model_config = ConfigDict(frozen=True)

    input_format: str
    output_format: str
    serialization_library: str
    classification: str


STORAGE_FORMATS: Dict[DataFormat, StorageFormat] = {
    DataFormat.JSON: StorageFormat(
        input_format=TEXT_INPUT_FORMAT,
        output_format=TEXT_OUTPUT_FORMAT,
        serialization_library="org.openx.data.jsonserde.JsonSerDe",
        classification="json",
    ),
    DataFormat.CSV: StorageFormat(
        input_format=TEXT_INPUT_FORMAT,
        output_format=TEXT_OUTPUT_FORMAT,
        serialization_library="org.apache.hadoop.hive.serde2.OpenCSVSerde",
        classification="csv",
    ),
}


class Column(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., pattern=r'^[A-Za-z_][A-Za-z0-9_]*$')
    type: ColumnType
    comment: Optional[str] = Field(None, max_length=255)

    @field_validator("type", mode="before")
    @classmethod
    def check_type(cls, v: Any) -> Any:
        if isinstance(v, ColumnType):
            return v
        literal = str(v).strip().lower()
        known = [t.value for t in ColumnType]
        if literal not in known:
            raise ValueError(f"unsupported column type '{v}', expected one of {', '.join(known)}")
        return literal

    @field_validator("name")
    @classmethod
    def warn_on_awkward_name(cls, v: str) -> str:
        if v != v.lower():
            logger.warning(f"Column name '{v}' will be lower-cased by the Glue catalog")
        if v.lower() in RESERVED_WORDS:
            logger.warning(f"Column name '{v}' is a reserved word and must be quoted in Athena queries")
        return v


class TableDefinition(BaseModel):
    """An external table stored under its database's prefix"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., pattern=IDENTIFIER_PATTERN)
    description: str = ""
    columns: List[Column] = Field(..., min_length=1)
    data_format: DataFormat = DataFormat.JSON
    delimiter: str = Field(",", min_length=1, max_length=1)
    skip_header_lines: int = Field(1, ge=0)

    @field_validator("columns")
    @classmethod
    def unique_column_names(cls, v: List[Column]) -> List[Column]:
        seen = set()
        for column in v:
            key = column.name.lower()
            if key in seen:
                raise ValueError(f"duplicate column '{column.name}'")
            seen.add(key)
        return v

    @property
    def storage_format(self) -> StorageFormat:
        return STORAGE_FORMATS[self.data_format]

    @property
    def serde_parameters(self) -> Dict[str, str]:
        """Format-specific SerDe parameters (none for JSON)"""
        if self.data_format == DataFormat.CSV:
            return {
                "separatorChar": self.delimiter,
                "skip.header.line.count": str(self.skip_header_lines),
            }
        return {}


class DatabaseDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., pattern=IDENTIFIER_PATTERN)
    description: str = ""
    tables: List[TableDefinition] = Field(..., min_length=1)

    @field_validator("tables")
    @classmethod
    def unique_table_names(cls, v: List[TableDefinition]) -> List[TableDefinition]:
        names = [table.name for table in v]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate tables: {', '.join(duplicates)}")
        return v

    def location_uri(self, bucket_name: str) -> str:
        return f"s3://{bucket_name}/{self.name}/"

    def table_location(self, bucket_name: str, table: TableDefinition) -> str:
        # Always strictly below location_uri: table names are non-empty identifiers
        return f"{self.location_uri(bucket_name)}{table.name}/"


def sample_database() -> DatabaseDefinition:
    return DatabaseDefinition(
        name="sample_database",
        description="This is the description.",
        tables=[
            TableDefinition(
                name="sample_table",
                description="This is the table description",
                data_format=DataFormat.JSON,
                columns=[Column(name="number", type=ColumnType.INT, comment="An integer.")],
            ),
        ],
    )


def parse_database(raw: Dict[str, Any], field: str = "database") -> DatabaseDefinition:
    """Build a database definition from configuration data"""
    try:
        return DatabaseDefinition.model_validate(raw)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        ]
        first = e.errors()[0]["loc"] if e.errors() else ()
        path = ".".join([field, *(str(part) for part in first)])
        raise ConfigurationError(path, "; ".join(problems)) from e
