"""
PHP DAO generator implementation.

Renders one data-access class per table: fields, a column to setter
mapping table, accessors and read/insert/update/delete operations.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ...core.config import GeneratorConfig, load_config
from ...core.generator import CodeGenerator, GeneratorError
from ...core.naming import ResolvedIdentifiers, member_names
from ...core.schema import ColumnInfo, ColumnKey, TableInfo
from ...core.templates import TemplateError
from ...core.versioning import VersionTag
from ....utils import format_display_timestamp, format_doc_date
from .config import php_type_for

TEMPLATE_NAME = "dao_class.php.j2"

_KEY_LABELS = {
    ColumnKey.PRIMARY: "Primary key",
    ColumnKey.UNIQUE: "Unique",
    ColumnKey.MULTI: "Indexed",
}


def _php_string_escape(text: str) -> str:
    """Escape text for use inside a double-quoted PHP string."""
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$")


def sql_identifier(name: str) -> str:
    """Backtick-quote an identifier for a double-quoted PHP SQL string."""
    return _php_string_escape("`" + name.replace("`", "``") + "`")


def column_comment(column: ColumnInfo) -> str:
    """One-line summary of a column for its docblock."""
    parts = [f"Column {column.name} ({column.type})"]

    label = _KEY_LABELS.get(column.key)
    if label:
        parts.append(label)
    if not column.nullable:
        parts.append("Not null")
    if column.default is not None:
        parts.append(f"Default: {column.default}")
    if column.extra:
        parts.append(column.extra)

    # A stray "*/" would close the docblock early
    return " - ".join(parts).replace("*/", "*\\/").replace("\n", " ")


class PhpGenerator(CodeGenerator):
    """Code generator for PHP DAO classes."""

    @property
    def language_name(self) -> str:
        return "php"

    @property
    def file_extension(self) -> str:
        return self.config.custom.get("file_extension", ".php")

    def get_template_directory(self) -> Path:
        """Return the PHP templates directory."""
        return Path(__file__).parent / "templates"

    def assemble(
        self,
        table: TableInfo,
        identifiers: ResolvedIdentifiers,
        version: VersionTag,
        timestamp: datetime,
    ) -> str:
        """Render the DAO class for ``table``."""
        context = self._build_context(table, identifiers, version, timestamp)

        try:
            code = self.render_template(TEMPLATE_NAME, context)
        except TemplateError as e:
            raise GeneratorError(f"Cannot assemble DAO for {table.name}: {e}") from e

        return self._reindent(code)

    def backup_header(
        self, file_name: str, timestamp: datetime, version: VersionTag
    ) -> str:
        return (
            "<?php\n"
            "/**\n"
            f" * Backup of {file_name}\n"
            f" * Saved on {format_display_timestamp(timestamp)} before it was "
            f"regenerated as version {version}\n"
            " */\n"
            "?>\n"
        )

    def _build_context(
        self,
        table: TableInfo,
        identifiers: ResolvedIdentifiers,
        version: VersionTag,
        timestamp: datetime,
    ) -> Dict[str, Any]:
        columns = self._column_data(table, identifiers)

        pk_name = self.primary_key_name(table)
        pk_column = table.primary_key
        pk_member = member_names(pk_name)

        excluded = {c.name for c in table.columns if c.is_primary} | {pk_name}
        insert_columns = [c for c in columns if not c["auto_increment"]]
        update_columns = [c for c in columns if c["name"] not in excluded]

        database = self.config.database_name
        table_ref = sql_identifier(table.name)
        if database:
            table_ref = f"{sql_identifier(database)}.{table_ref}"

        return {
            "table_name": table.name,
            "class_name": identifiers.class_name,
            "database": database,
            "version": str(version),
            "date": format_doc_date(timestamp),
            "generated_at": format_display_timestamp(timestamp),
            "backup_dir": self.config.backup_dir_name,
            "add_comments": self.config.add_comments,
            "columns": columns,
            "insert_columns": insert_columns,
            "update_columns": update_columns,
            "table_ref": table_ref,
            "pk": {
                "name": pk_name,
                "property": pk_member.property,
                "sql": sql_identifier(pk_name),
                "auto_increment": bool(pk_column and pk_column.is_auto_increment),
            },
        }

    def _column_data(
        self, table: TableInfo, identifiers: ResolvedIdentifiers
    ) -> List[Dict[str, Any]]:
        columns = []
        for column, member in zip(table.columns, identifiers.members):
            columns.append(
                {
                    "name": column.name,
                    "property": member.property,
                    "getter": member.getter,
                    "setter": member.setter,
                    "php_type": php_type_for(column.type),
                    "comment": column_comment(column),
                    "auto_increment": column.is_auto_increment,
                    "sql": sql_identifier(column.name),
                    "placeholder": "?",
                    "assignment": f"{sql_identifier(column.name)} = ?",
                    "value": f"$this->{member.property}",
                }
            )
        return columns

    def _reindent(self, code: str) -> str:
        """Template indentation is four spaces; rescale to indent_size."""
        size = self.config.indent_size
        if size == 4:
            return code

        lines = []
        for line in code.split("\n"):
            stripped = line.lstrip(" ")
            width = len(line) - len(stripped)
            levels, rest = divmod(width, 4)
            lines.append(" " * (levels * size + rest) + stripped)
        return "\n".join(lines)


def create_php_generator(config: Optional[GeneratorConfig] = None, **overrides) -> PhpGenerator:
    """Create a PHP generator, applying keyword overrides to the default config."""
    if config is None:
        config = load_config("php", custom_config=overrides)

    return PhpGenerator(config)
