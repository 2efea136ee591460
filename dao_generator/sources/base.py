"""
Schema source interface.

A schema source lists the tables of a database and reports the columns
of one table. One implementation exists per database engine.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..codegen.core.schema import TableInfo
from ..logging_config import get_logger

logger = get_logger(__name__)

SYSTEM_DATABASES = frozenset(
    {"information_schema", "performance_schema", "mysql", "sys"}
)


class SchemaUnavailableError(Exception):
    """Raised when table metadata cannot be fetched."""

    def __init__(self, message: str, table: Optional[str] = None):
        super().__init__(message)
        self.table = table


class SchemaSource(ABC):
    """Supplies table and column metadata for one database engine."""

    @abstractmethod
    def fetch_databases(self) -> List[str]:
        """User databases visible on the server."""
        pass

    @abstractmethod
    def fetch_tables(self, database: Optional[str]) -> List[str]:
        """Table names of ``database``."""
        pass

    @abstractmethod
    def fetch_columns(self, database: Optional[str], table: str) -> TableInfo:
        """
        Column metadata of one table, in declaration order.

        Raises:
            SchemaUnavailableError: If the table cannot be described
        """
        pass

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class SqlSchemaSource(SchemaSource):
    """Schema source querying a live server through a SQLAlchemy engine."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def _query(
        self, sql: str, params: Optional[Dict[str, Any]] = None, table: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Run a query and return its rows as plain dicts."""
        try:
            with self.engine.connect() as conn:
                result = conn.execute(text(sql), params or {})
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            logger.error("Schema query failed: %s", e)
            target = f" for table {table}" if table else ""
            raise SchemaUnavailableError(
                f"Cannot read schema{target}: {e}", table=table
            ) from e

    def close(self) -> None:
        self.engine.dispose()
