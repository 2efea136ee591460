"""
Schema sources supplying table metadata, one per database engine.
"""

from .base import SchemaSource, SqlSchemaSource, SchemaUnavailableError, SYSTEM_DATABASES
from .mysql import MySqlSchemaSource
from .postgresql import PostgresSchemaSource
from .json_file import JsonFileSchemaSource
from .factory import ConnectionSettings, create_schema_source

__all__ = [
    "SchemaSource",
    "SqlSchemaSource",
    "SchemaUnavailableError",
    "SYSTEM_DATABASES",
    "MySqlSchemaSource",
    "PostgresSchemaSource",
    "JsonFileSchemaSource",
    "ConnectionSettings",
    "create_schema_source",
]
