"""Tests for the batch driver."""

from datetime import datetime
from pathlib import Path

import pytest

from dao_generator.codegen.core.batch import BatchGenerator
from dao_generator.codegen.core.schema import ColumnInfo, GenerationMode, Outcome, TableInfo
from dao_generator.codegen.core.storage import LocalFileSystem, OutputLocationError
from dao_generator.codegen.core.versioning import current_version
from dao_generator.sources.base import SchemaUnavailableError

from .conftest import MemoryFileSystem

OUT = Path("/out")


class FakeSource:
    """Schema source serving fixed tables, failing for the listed names."""

    def __init__(self, tables, failing=()):
        self.tables = {table.name: table for table in tables}
        self.failing = set(failing)
        self.requested = []

    def fetch_columns(self, database, table):
        self.requested.append((database, table))
        if table in self.failing:
            raise SchemaUnavailableError(f"Lost connection while describing {table}", table)
        return self.tables[table]


def _backups(fs):
    return sorted(p for p in fs.files if p.parent == OUT / "backup")


@pytest.fixture
def batch(php_generator, memory_fs, clock):
    return BatchGenerator(php_generator, OUT, fs=memory_fs, clock=clock)


class TestFreshGeneration:

    def test_writes_initial_version(self, batch, memory_fs, users_table):
        summary = batch.generate([users_table], GenerationMode.SAVE)

        assert summary.generated == 1
        assert summary.backed_up == 0
        assert summary.errors == []
        assert summary.written_paths == [str(OUT / "DAOUsers.php")]
        assert current_version(memory_fs.files[OUT / "DAOUsers.php"]).minor == 0
        assert " * @version 1.00\n" in memory_fs.files[OUT / "DAOUsers.php"]
        assert _backups(memory_fs) == []

    def test_result_details(self, batch, users_table):
        result = batch.generate([users_table], GenerationMode.OVERWRITE).results[0]

        assert result.outcome == Outcome.GENERATED
        assert result.version == "1.00"
        assert result.backup_path is None


class TestRegeneration:

    def test_overwrite_bumps_version_without_backup(self, batch, memory_fs, users_table):
        memory_fs.files[OUT / "DAOUsers.php"] = "<?php\n/**\n * @version 1.00\n */\n"

        summary = batch.generate([users_table], GenerationMode.OVERWRITE)

        assert summary.generated == 1
        assert summary.backed_up == 0
        assert " * @version 1.10\n" in memory_fs.files[OUT / "DAOUsers.php"]
        assert _backups(memory_fs) == []

    def test_save_backs_up_original(self, batch, memory_fs, users_table):
        original = "<?php\n/**\n * @version 1.00\n */\nclass DAOUsers {}\n"
        memory_fs.files[OUT / "DAOUsers.php"] = original

        summary = batch.generate([users_table], GenerationMode.SAVE)

        assert summary.generated == 1
        assert summary.backed_up == 1
        backups = _backups(memory_fs)
        assert backups == [OUT / "backup" / "DAOUsers_backup_18-10-2026-14-03-22.php"]
        saved = memory_fs.files[backups[0]]
        assert saved.endswith(original)
        assert "18/10/2026 14:03:22" in saved
        assert summary.results[0].backup_path == str(backups[0])
        assert " * @version 1.10\n" in memory_fs.files[OUT / "DAOUsers.php"]

    def test_version_sequence(self, batch, memory_fs, users_table):
        versions = []
        for _ in range(4):
            batch.generate([users_table], GenerationMode.OVERWRITE)
            versions.append(str(current_version(memory_fs.files[OUT / "DAOUsers.php"])))

        assert versions == ["1.00", "1.10", "1.20", "1.30"]

    def test_unparseable_tag_restarts_from_initial(self, batch, memory_fs, users_table):
        memory_fs.files[OUT / "DAOUsers.php"] = "<?php // hand written\n"

        batch.generate([users_table], GenerationMode.OVERWRITE)

        assert " * @version 1.10\n" in memory_fs.files[OUT / "DAOUsers.php"]

    def test_same_second_backups_collide(self, batch, memory_fs, users_table):
        # Backup names only carry second resolution; a later backup in the
        # same second replaces the earlier one.
        for _ in range(3):
            batch.generate([users_table], GenerationMode.SAVE)

        backups = _backups(memory_fs)
        assert len(backups) == 1
        assert " * @version 1.10\n" in memory_fs.files[backups[0]]
        assert " * @version 1.20\n" in memory_fs.files[OUT / "DAOUsers.php"]

    def test_distinct_timestamps_keep_every_backup(self, php_generator, memory_fs, users_table):
        stamps = iter([
            datetime(2026, 10, 18, 9, 0, 0),
            datetime(2026, 10, 18, 9, 0, 1),
            datetime(2026, 10, 18, 9, 0, 2),
        ])
        batch = BatchGenerator(php_generator, OUT, fs=memory_fs, clock=lambda: next(stamps))

        for _ in range(3):
            batch.generate([users_table], GenerationMode.SAVE)

        assert len(_backups(memory_fs)) == 2


class TestFailures:

    def test_backup_failure_skips_table(self, batch, memory_fs, users_table, orders_table):
        original = "<?php\n/**\n * @version 1.40\n */\n"
        memory_fs.files[OUT / "DAOUsers.php"] = original
        memory_fs.fail_paths.add(OUT / "backup")

        summary = batch.generate([users_table, orders_table], GenerationMode.SAVE)

        assert memory_fs.files[OUT / "DAOUsers.php"] == original
        assert summary.skipped == 1
        assert summary.generated == 1
        assert summary.backed_up == 0
        assert len(summary.errors) == 1
        assert summary.errors[0].startswith("rv_users: ")
        assert OUT / "DAOOrders.php" in memory_fs.files

    def test_backup_failure_irrelevant_in_overwrite_mode(self, batch, memory_fs, users_table):
        memory_fs.files[OUT / "DAOUsers.php"] = "<?php\n"
        memory_fs.fail_paths.add(OUT / "backup")

        summary = batch.generate([users_table], GenerationMode.OVERWRITE)

        assert summary.generated == 1
        assert summary.errors == []

    def test_fetch_failure_does_not_stop_batch(self, batch, memory_fs, users_table, orders_table):
        middle = TableInfo("rv_items", (ColumnInfo("id", "int"),))
        source = FakeSource([users_table, middle, orders_table], failing=["rv_items"])

        summary = batch.generate_from_source(
            source, "shop", ["rv_users", "rv_items", "rv_orders"], GenerationMode.SAVE
        )

        assert summary.generated == 2
        assert summary.skipped == 0
        assert summary.failed == 1
        assert summary.errors == ["rv_items: Lost connection while describing rv_items"]
        assert OUT / "DAOUsers.php" in memory_fs.files
        assert OUT / "DAOOrders.php" in memory_fs.files
        assert OUT / "DAOItems.php" not in memory_fs.files
        assert source.requested == [("shop", "rv_users"), ("shop", "rv_items"), ("shop", "rv_orders")]

    def test_write_failure_is_recorded(self, batch, memory_fs, users_table, orders_table):
        memory_fs.fail_paths.add(OUT / "DAOUsers.php")

        summary = batch.generate([users_table, orders_table], GenerationMode.SAVE)

        assert summary.generated == 1
        assert summary.failed == 1
        assert summary.skipped == 0
        assert summary.errors[0].startswith("rv_users: Failed to write")
        assert summary.has_errors

    def test_failed_write_keeps_backup_details(self, batch, memory_fs, users_table):
        original = "<?php\n/**\n * @version 1.00\n */\n"
        memory_fs.files[OUT / "DAOUsers.php"] = original
        memory_fs.fail_paths.add(OUT / "DAOUsers.php")

        summary = batch.generate([users_table], GenerationMode.SAVE)

        assert summary.failed == 1
        assert summary.backed_up == 1
        backups = _backups(memory_fs)
        assert len(backups) == 1
        assert summary.results[0].backup_path == str(backups[0])
        assert memory_fs.files[OUT / "DAOUsers.php"] == original

    def test_tables_resolving_to_same_artifact(self, batch, memory_fs, users_table):
        plain = TableInfo("users", (ColumnInfo("id", "int"), ColumnInfo("nickname", "text")))

        summary = batch.generate([users_table, plain], GenerationMode.SAVE)

        assert summary.generated == 1
        assert summary.failed == 1
        assert summary.errors == ["users: artifact DAOUsers.php collides with rv_users"]
        assert "@table rv_users" in memory_fs.files[OUT / "DAOUsers.php"]
        assert _backups(memory_fs) == []

    def test_failed_table_does_not_claim_its_artifact(self, batch, memory_fs, users_table):
        plain = TableInfo("users", (ColumnInfo("id", "int"),))
        source = FakeSource([users_table, plain], failing=["rv_users"])

        summary = batch.generate_from_source(source, "shop", ["rv_users", "users"], GenerationMode.SAVE)

        assert summary.generated == 1
        assert "@table users" in memory_fs.files[OUT / "DAOUsers.php"]

    def test_missing_output_directory(self, php_generator, users_table, clock):
        batch = BatchGenerator(php_generator, Path("/nowhere"), fs=MemoryFileSystem(), clock=clock)

        with pytest.raises(OutputLocationError):
            batch.generate([users_table], GenerationMode.SAVE)

    def test_empty_batch(self, batch):
        summary = batch.generate([], GenerationMode.SAVE)

        assert summary.to_dict() == {
            "generated": 0,
            "skipped": 0,
            "backed_up": 0,
            "failed": 0,
            "errors": [],
            "written_paths": [],
        }


class TestOnDisk:

    def test_regenerate_with_backup(self, php_generator, users_table, clock, tmp_path):
        batch = BatchGenerator(php_generator, tmp_path, fs=LocalFileSystem(), clock=clock)

        batch.generate([users_table], GenerationMode.SAVE)
        first = (tmp_path / "DAOUsers.php").read_text(encoding="utf-8")
        summary = batch.generate([users_table], GenerationMode.SAVE)

        assert summary.backed_up == 1
        backup_files = list((tmp_path / "backup").iterdir())
        assert len(backup_files) == 1
        assert backup_files[0].read_text(encoding="utf-8").endswith(first)
        assert "@version 1.10" in (tmp_path / "DAOUsers.php").read_text(encoding="utf-8")
