"""
Offline schema source reading a JSON dump.

Expected layout::

    {"database": "shop",
     "tables": [{"name": "rv_users",
                 "columns": [{"name": "id", "type": "int(11)", "nullable": false,
                              "key": "PRI", "default": null,
                              "extra": "auto_increment"}]}]}
"""

from pathlib import Path
from typing import Dict, List, Optional, Union

from ..codegen.core.schema import TableInfo
from ..utils import JSONLoaderError, load_json_from_file
from .base import SchemaSource, SchemaUnavailableError


class JsonFileSchemaSource(SchemaSource):
    """Schema source backed by a JSON file instead of a live server."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._data: Optional[Dict] = None

    def _load(self) -> Dict:
        if self._data is None:
            try:
                data = load_json_from_file(self.path)
            except (FileNotFoundError, JSONLoaderError) as e:
                raise SchemaUnavailableError(str(e)) from e

            if not isinstance(data, dict) or not isinstance(data.get("tables"), list):
                raise SchemaUnavailableError(
                    f"{self.path} must contain an object with a 'tables' list"
                )
            self._data = data
        return self._data

    @property
    def database(self) -> Optional[str]:
        return self._load().get("database")

    def fetch_databases(self) -> List[str]:
        database = self.database
        return [database] if database else []

    def fetch_tables(self, database: Optional[str]) -> List[str]:
        return [str(table.get("name")) for table in self._load()["tables"]]

    def fetch_columns(self, database: Optional[str], table: str) -> TableInfo:
        for entry in self._load()["tables"]:
            if entry.get("name") == table:
                try:
                    return TableInfo.from_dict(entry)
                except (KeyError, TypeError, ValueError) as e:
                    raise SchemaUnavailableError(
                        f"Malformed definition for table {table}: {e}", table=table
                    ) from e

        raise SchemaUnavailableError(
            f"Table {table} not found in {self.path}", table=table
        )
