"""PostgreSQL schema source based on information_schema and pg_index."""

from typing import List, Optional

from sqlalchemy.engine import Engine

from ..codegen.core.schema import ColumnInfo, ColumnKey, TableInfo
from ..logging_config import get_logger
from .base import SqlSchemaSource

logger = get_logger(__name__)

DATABASES_SQL = """
    SELECT datname FROM pg_database
    WHERE datistemplate = false AND datname <> 'postgres'
    ORDER BY datname
"""

TABLES_SQL = """
    SELECT tablename FROM pg_tables
    WHERE schemaname = :schema
    ORDER BY tablename
"""

COLUMNS_SQL = """
    SELECT column_name, data_type, is_nullable, column_default,
           character_maximum_length, numeric_precision, numeric_scale
    FROM information_schema.columns
    WHERE table_schema = :schema AND table_name = :table
    ORDER BY ordinal_position
"""

# The regclass cast fails for a missing table, which surfaces as an error
# instead of an empty column list.
PRIMARY_KEYS_SQL = """
    SELECT a.attname
    FROM pg_index i
    JOIN pg_attribute a ON a.attrelid = i.indrelid AND a.attnum = ANY(i.indkey)
    WHERE i.indrelid = CAST(:qualified AS regclass)
    AND i.indisprimary
"""

# information_schema reports a precision for every numeric type; only
# these declare one
ARBITRARY_PRECISION_TYPES = ("numeric", "decimal")


class PostgresSchemaSource(SqlSchemaSource):
    """
    Reads table metadata from PostgreSQL.

    The database is chosen by the engine URL; tables are looked up in
    ``schema`` (``public`` by default).
    """

    def __init__(self, engine: Engine, schema: str = "public"):
        super().__init__(engine)
        self.schema = schema

    def fetch_databases(self) -> List[str]:
        return [row["datname"] for row in self._query(DATABASES_SQL)]

    def fetch_tables(self, database: Optional[str]) -> List[str]:
        rows = self._query(TABLES_SQL, {"schema": self.schema})
        return [row["tablename"] for row in rows]

    def fetch_columns(self, database: Optional[str], table: str) -> TableInfo:
        rows = self._query(
            COLUMNS_SQL, {"schema": self.schema, "table": table}, table=table
        )
        qualified = '"{}"."{}"'.format(
            self.schema.replace('"', '""'), table.replace('"', '""')
        )
        pk_rows = self._query(PRIMARY_KEYS_SQL, {"qualified": qualified}, table=table)
        primary_keys = {row["attname"] for row in pk_rows}

        columns = tuple(self._to_column(row, primary_keys) for row in rows)
        logger.debug("Described %s.%s: %d column(s)", self.schema, table, len(columns))
        return TableInfo(name=table, columns=columns)

    @staticmethod
    def _to_column(row: dict, primary_keys: set) -> ColumnInfo:
        col_type = row["data_type"]
        if row.get("character_maximum_length"):
            col_type += f"({row['character_maximum_length']})"
        elif row.get("numeric_precision") and row["data_type"] in ARBITRARY_PRECISION_TYPES:
            scale = row.get("numeric_scale")
            col_type += f"({row['numeric_precision']}{',' + str(scale) if scale else ''})"

        default = row.get("column_default")
        name = row["column_name"]
        return ColumnInfo(
            name=name,
            type=col_type,
            nullable=row.get("is_nullable") == "YES",
            key=ColumnKey.PRIMARY if name in primary_keys else ColumnKey.NONE,
            default=None if default is None else str(default),
            extra="auto_increment" if default and "nextval(" in str(default) else "",
        )
