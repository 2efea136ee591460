"""MySQL / MariaDB schema source based on SHOW and DESCRIBE statements."""

from typing import Any, List, Optional

from sqlalchemy.engine import Engine

from ..codegen.core.schema import ColumnInfo, ColumnKey, TableInfo
from ..logging_config import get_logger
from .base import SYSTEM_DATABASES, SqlSchemaSource

logger = get_logger(__name__)


def quote_identifier(name: str) -> str:
    return "`" + name.replace("`", "``") + "`"


def _as_text(value: Any) -> Any:
    # Some drivers return DESCRIBE columns as bytes
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return value


class MySqlSchemaSource(SqlSchemaSource):
    """Reads table metadata from MySQL or MariaDB."""

    def __init__(self, engine: Engine):
        super().__init__(engine)

    def fetch_databases(self) -> List[str]:
        rows = self._query("SHOW DATABASES")
        names = [str(_as_text(next(iter(row.values())))) for row in rows]
        return [name for name in names if name.lower() not in SYSTEM_DATABASES]

    def fetch_tables(self, database: Optional[str]) -> List[str]:
        sql = "SHOW TABLES"
        if database:
            sql += f" FROM {quote_identifier(database)}"
        rows = self._query(sql)
        return [str(_as_text(next(iter(row.values())))) for row in rows]

    def fetch_columns(self, database: Optional[str], table: str) -> TableInfo:
        target = quote_identifier(table)
        if database:
            target = f"{quote_identifier(database)}.{target}"

        rows = self._query(f"DESCRIBE {target}", table=table)
        columns = tuple(self._to_column(row) for row in rows)
        logger.debug("Described %s: %d column(s)", table, len(columns))
        return TableInfo(name=table, columns=columns)

    @staticmethod
    def _to_column(row: dict) -> ColumnInfo:
        default = _as_text(row.get("Default"))
        return ColumnInfo(
            name=str(_as_text(row["Field"])),
            type=str(_as_text(row["Type"])),
            nullable=_as_text(row.get("Null")) == "YES",
            key=ColumnKey.parse(_as_text(row.get("Key"))),
            default=None if default is None else str(default),
            extra=str(_as_text(row.get("Extra")) or ""),
        )
