"""Tests for the PHP DAO assembler."""

import re

import pytest

from dao_generator.codegen.core.config import GeneratorConfig
from dao_generator.codegen.core.generator import GeneratorError
from dao_generator.codegen.core.schema import ColumnInfo, ColumnKey, TableInfo
from dao_generator.codegen.core.versioning import VersionTag, current_version
from dao_generator.codegen.languages.php import (
    PhpGenerator,
    column_comment,
    create_php_generator,
    sql_identifier,
)

from .conftest import FIXED_NOW


def _generate(generator, table, version=VersionTag(1, 0)):
    return generator.generate(table, version, FIXED_NOW)


def _method(code, name):
    """Body of a generated PHP method, up to the next docblock."""
    start = code.index(f"function {name}(")
    end = code.find("/**", start)
    return code[start:end if end != -1 else len(code)]


class TestHeader:

    def test_header_fields(self, php_generator, users_table):
        code = _generate(php_generator, users_table, VersionTag(1, 30))

        assert code.startswith("<?php\n")
        assert " * @table rv_users\n" in code
        assert " * @database shop\n" in code
        assert " * @version 1.30\n" in code
        assert " * @date 2026-10-18\n" in code
        assert "class DAOUsers\n{" in code

    def test_version_tag_parses_back(self, php_generator, users_table):
        code = _generate(php_generator, users_table, VersionTag(2, 40))
        assert current_version(code) == VersionTag(2, 40)

    def test_single_version_tag(self, php_generator, users_table):
        code = _generate(php_generator, users_table)
        assert code.count("@version") == 1


class TestFieldsAndAccessors:

    def test_fields_in_column_order(self, php_generator, users_table):
        code = _generate(php_generator, users_table)
        fields = re.findall(r"protected \$(\w+);", code)
        assert fields == ["id", "user_name", "balance", "is_active", "created_at"]

    def test_field_types(self, php_generator, users_table):
        code = _generate(php_generator, users_table)

        assert "@var int\n     */\n    protected $id;" in code
        assert "@var float\n     */\n    protected $balance;" in code
        assert "@var int\n     */\n    protected $is_active;" in code
        assert "@var string\n     */\n    protected $created_at;" in code

    def test_mapping_table_in_column_order(self, php_generator, users_table):
        code = _generate(php_generator, users_table)
        pairs = re.findall(r"'(\w+)' => '(\w+)',", code)

        assert pairs == [
            ("id", "setId"),
            ("user_name", "setUserName"),
            ("balance", "setBalance"),
            ("is_active", "setIsActive"),
            ("created_at", "setCreatedAt"),
        ]

    def test_getter_and_setter_per_column(self, php_generator, users_table):
        code = _generate(php_generator, users_table)

        assert "public function getUserName()\n    {\n        return $this->user_name;" in code
        assert "public function setUserName($value)\n    {\n        $this->user_name = $value;" in code

    def test_comments_can_be_disabled(self, users_table):
        generator = PhpGenerator(GeneratorConfig(add_comments=False))
        code = _generate(generator, users_table)
        assert "Column user_name" not in code


class TestColumnComment:

    def test_full_comment(self):
        column = ColumnInfo(
            "id", "int(11)", nullable=False, key=ColumnKey.PRIMARY, default="0", extra="auto_increment"
        )
        assert column_comment(column) == (
            "Column id (int(11)) - Primary key - Not null - Default: 0 - auto_increment"
        )

    def test_minimal_comment(self):
        assert column_comment(ColumnInfo("note", "text")) == "Column note (text)"

    def test_comment_cannot_close_docblock(self):
        comment = column_comment(ColumnInfo("c", "text", default="*/ evil"))
        assert "*/" not in comment


class TestPersistence:

    def test_read_selects_by_primary_key(self, php_generator, users_table):
        body = _method(_generate(php_generator, users_table), "read")

        assert 'SELECT * FROM `shop`.`rv_users` WHERE `id` = ?' in body
        assert "$this->hydrate($row);" in body

    def test_insert_skips_auto_increment(self, php_generator, users_table):
        body = _method(_generate(php_generator, users_table), "insert")

        assert "(`user_name`, `balance`, `is_active`, `created_at`) VALUES (?, ?, ?, ?)" in body
        assert "[$this->user_name, $this->balance, $this->is_active, $this->created_at]" in body
        assert "$this->id = $this->getConnection()->lastInsertId();" in body

    def test_insert_without_auto_increment_pk(self, php_generator, orders_table):
        body = _method(_generate(php_generator, orders_table), "insert")

        assert "(`order_id`, `label`) VALUES (?, ?)" in body
        assert "lastInsertId" not in body

    def test_update_excludes_primary_key(self, php_generator, users_table):
        body = _method(_generate(php_generator, users_table), "update")

        assert "SET `user_name` = ?, `balance` = ?, `is_active` = ?, `created_at` = ? WHERE `id` = ?" in body
        assert "$this->created_at, $this->id]" in body

    def test_delete_filters_by_primary_key(self, php_generator, orders_table):
        body = _method(_generate(php_generator, orders_table), "delete")
        assert "DELETE FROM `shop`.`rv_orders` WHERE `order_id` = ?" in body

    def test_first_primary_column_wins(self, php_generator):
        table = TableInfo("link", (
            ColumnInfo("a_id", "int", key=ColumnKey.PRIMARY),
            ColumnInfo("b_id", "int", key=ColumnKey.PRIMARY),
            ColumnInfo("weight", "float"),
        ))
        code = _generate(php_generator, table)

        assert "WHERE `a_id` = ?" in _method(code, "read")
        # Every PRIMARY column stays out of the SET clause
        assert "SET `weight` = ? WHERE `a_id` = ?" in _method(code, "update")

    def test_unqualified_table_without_database(self, users_table):
        code = _generate(PhpGenerator(GeneratorConfig()), users_table)
        assert "SELECT * FROM `rv_users` WHERE `id` = ?" in code

    def test_sql_identifier_escaping(self):
        assert sql_identifier("we`ird") == "`we``ird`"
        assert sql_identifier("a$b") == "`a\\$b`"


class TestEdgeCases:

    def test_primary_key_fallback_to_id(self, php_generator):
        table = TableInfo("rv_logs", (
            ColumnInfo("message", "text"),
            ColumnInfo("level", "varchar(10)"),
        ))
        code = _generate(php_generator, table)

        assert "WHERE `id` = ?" in _method(code, "read")
        assert "WHERE `id` = ?" in _method(code, "delete")
        assert "$this->level, $this->id]" in _method(code, "update")
        # No field backs the fallback key
        assert "protected $id;" not in code

    def test_fallback_warns(self, php_generator):
        table = TableInfo("rv_logs", (ColumnInfo("message", "text"),))
        warnings = php_generator.validate_table(table)
        assert any("no primary key" in w for w in warnings)

    def test_accessor_collision_warns(self, php_generator):
        table = TableInfo("rv_users", (
            ColumnInfo("id", "int", key=ColumnKey.PRIMARY),
            ColumnInfo("user_name", "varchar(64)"),
            ColumnInfo("userName", "varchar(64)"),
        ))
        warnings = php_generator.validate_table(table)

        assert any("getUserName" in w for w in warnings)
        assert any("setUserName" in w for w in warnings)
        assert all("'user_name' and 'userName'" in w for w in warnings)

    def test_distinct_columns_do_not_warn(self, php_generator, users_table):
        assert php_generator.validate_table(users_table) == []

    def test_zero_columns_still_complete(self, php_generator):
        code = _generate(php_generator, TableInfo("rv_empty", ()))

        assert "class DAOEmpty\n{" in code
        assert "$this->_t = [];" in code
        for name in ("read", "insert", "update", "delete", "deleteThis", "findAll"):
            assert f"function {name}(" in code
        assert "INSERT INTO `shop`.`rv_empty` () VALUES ()" in code
        assert code.count("{") == code.count("}")

    def test_only_key_columns_has_no_update_statement(self, php_generator):
        table = TableInfo("tags", (ColumnInfo("tag", "varchar(20)", key=ColumnKey.PRIMARY),))
        body = _method(_generate(php_generator, table), "update")

        assert "UPDATE" not in body
        assert "return false;" in body

    def test_indent_size(self, users_table):
        code = _generate(PhpGenerator(GeneratorConfig(indent_size=2)), users_table)
        assert "\n  public function getId()\n  {\n    return $this->id;" in code

    def test_output_is_deterministic(self, php_generator, users_table):
        assert _generate(php_generator, users_table) == _generate(php_generator, users_table)

    def test_backup_header(self, php_generator):
        header = php_generator.backup_header("DAOUsers.php", FIXED_NOW, VersionTag(1, 10))

        assert header.startswith("<?php\n/**\n")
        assert "Backup of DAOUsers.php" in header
        assert "18/10/2026 14:03:22" in header
        assert header.endswith("*/\n?>\n")
        assert "@version" not in header


class TestTemplates:

    def test_override_directory_replaces_packaged_template(self, tmp_path, users_table):
        (tmp_path / "dao_class.php.j2").write_text(
            "<?php\n// {{ class_name }} {{ version }} {{ columns | map(attribute='name') | join(',') }}\n",
            encoding="utf-8",
        )
        generator = PhpGenerator(GeneratorConfig(custom={"template_dir": str(tmp_path)}))

        code = _generate(generator, users_table)

        assert code == "<?php\n// DAOUsers 1.00 id,user_name,balance,is_active,created_at\n"

    def test_broken_template_raises_generator_error(self, tmp_path, users_table):
        (tmp_path / "dao_class.php.j2").write_text("{{ no_such_variable }}", encoding="utf-8")
        generator = PhpGenerator(GeneratorConfig(custom={"template_dir": str(tmp_path)}))

        with pytest.raises(GeneratorError, match="rv_users"):
            _generate(generator, users_table)

    def test_create_php_generator_overrides(self):
        generator = create_php_generator(class_prefix="Dao", file_extension=".inc")

        assert generator.config.class_prefix == "Dao"
        assert generator.file_extension == ".inc"
