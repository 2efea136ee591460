"""Shared fixtures: sample tables, a fixed clock and an in-memory filesystem."""

from datetime import datetime
from pathlib import Path

import pytest

from dao_generator.codegen.core.config import GeneratorConfig
from dao_generator.codegen.core.schema import ColumnInfo, ColumnKey, TableInfo
from dao_generator.codegen.core.storage import FileSystem
from dao_generator.codegen.languages.php import PhpGenerator

FIXED_NOW = datetime(2026, 10, 18, 14, 3, 22)


class MemoryFileSystem(FileSystem):
    """FileSystem fake keeping everything in dicts."""

    def __init__(self, dirs=()):
        self.files = {}
        self.dirs = set()
        self.fail_paths = set()
        for directory in dirs:
            self.mkdir(Path(directory))

    def _check(self, path: Path):
        for failing in self.fail_paths:
            if path == failing or failing in path.parents:
                raise PermissionError(f"Permission denied: '{path}'")

    def exists(self, path):
        path = Path(path)
        return path in self.files or path in self.dirs

    def is_dir(self, path):
        return Path(path) in self.dirs

    def read(self, path):
        path = Path(path)
        if path not in self.files:
            raise FileNotFoundError(str(path))
        return self.files[path]

    def write(self, path, text):
        path = Path(path)
        self._check(path)
        if path.parent not in self.dirs:
            raise FileNotFoundError(f"No such directory: '{path.parent}'")
        self.files[path] = text

    def mkdir(self, path):
        path = Path(path)
        self._check(path)
        self.dirs.add(path)
        self.dirs.update(path.parents)


@pytest.fixture
def users_table():
    return TableInfo(
        name="rv_users",
        columns=(
            ColumnInfo("id", "int(11)", nullable=False, key=ColumnKey.PRIMARY, extra="auto_increment"),
            ColumnInfo("user_name", "varchar(255)", nullable=False, key=ColumnKey.UNIQUE),
            ColumnInfo("balance", "decimal(10,2)", default="0.00"),
            ColumnInfo("is_active", "tinyint(1)", nullable=False, default="1"),
            ColumnInfo("created_at", "datetime", key=ColumnKey.MULTI),
        ),
    )


@pytest.fixture
def orders_table():
    return TableInfo(
        name="rv_orders",
        columns=(
            ColumnInfo("order_id", "bigint(20)", nullable=False, key=ColumnKey.PRIMARY),
            ColumnInfo("label", "text"),
        ),
    )


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def config():
    return GeneratorConfig(database_name="shop")


@pytest.fixture
def php_generator(config):
    return PhpGenerator(config)


@pytest.fixture
def memory_fs():
    return MemoryFileSystem(dirs=["/out"])
