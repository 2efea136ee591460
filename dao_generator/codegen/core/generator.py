"""
Language-neutral half of DAO generation.

A concrete generator turns one table into the text of one artifact. The
base class owns naming, template lookup, table checks and whitespace
cleanup; subclasses supply the language template and the backup header.
"""

import re
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import GeneratorConfig
from .naming import ResolvedIdentifiers, resolve_identifiers
from .schema import TableInfo
from .templates import TemplateEngine, create_template_engine
from .versioning import VersionTag

# Used when a table has no PRIMARY column. The generated code then refers
# to an ``id`` member even if the table has no such column.
FALLBACK_PRIMARY_KEY = "id"

_BLANK_RUN = re.compile(r"\n{3,}")


class GeneratorError(Exception):
    """Raised when an artifact cannot be assembled."""

    pass


class CodeGenerator(ABC):
    """Base class of the per-language DAO generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self._template_engine: Optional[TemplateEngine] = None

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Registry name of the target language, e.g. ``php``."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Suffix of generated files, e.g. ``.php``."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """Packaged templates of this generator; None for in-memory only."""
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        # Built on first use so config changes made after construction apply
        if self._template_engine is None:
            self._template_engine = create_template_engine(
                self.get_template_directory(),
                override_dir=self.config.custom.get("template_dir"),
            )
        return self._template_engine

    def resolve(self, table: TableInfo) -> ResolvedIdentifiers:
        """Class and member names for ``table`` under the current config."""
        return resolve_identifiers(
            table,
            class_prefix=self.config.class_prefix,
            strip_prefix=self.config.strip_table_prefix,
        )

    def artifact_file_name(self, identifiers: ResolvedIdentifiers) -> str:
        return identifiers.class_name + self.file_extension

    @abstractmethod
    def assemble(
        self,
        table: TableInfo,
        identifiers: ResolvedIdentifiers,
        version: VersionTag,
        timestamp: datetime,
    ) -> str:
        """
        Build the complete artifact text for one table.

        Must not perform any I/O.
        """
        pass

    @abstractmethod
    def backup_header(
        self, file_name: str, timestamp: datetime, version: VersionTag
    ) -> str:
        """Comment block prepended to the original content of a backup."""
        pass

    def generate(
        self, table: TableInfo, version: VersionTag, timestamp: datetime
    ) -> str:
        """Resolve names, assemble and format the artifact for ``table``."""
        identifiers = self.resolve(table)
        return self.format_code(self.assemble(table, identifiers, version, timestamp))

    def validate_table(self, table: TableInfo) -> List[str]:
        """
        Check a table for structural issues.

        Nothing here stops generation; the batch driver logs the warnings.
        """
        warnings = []

        if not table.columns:
            warnings.append(f"Table '{table.name}' has no columns")

        if table.primary_key is None and FALLBACK_PRIMARY_KEY not in table.column_names:
            warnings.append(
                f"Table '{table.name}' has no primary key and no "
                f"'{FALLBACK_PRIMARY_KEY}' column"
            )

        # user_name and userName differ as fields but share accessors
        seen: Dict[tuple, str] = {}
        for member in self.resolve(table).members:
            for kind, name in (
                ("field", member.property),
                ("method", member.getter),
                ("method", member.setter),
            ):
                if (kind, name) in seen:
                    warnings.append(
                        f"Columns '{seen[kind, name]}' and '{member.column}' of "
                        f"'{table.name}' collide on member name '{name}'"
                    )
                else:
                    seen[kind, name] = member.column

        return warnings

    @staticmethod
    def primary_key_name(table: TableInfo) -> str:
        primary = table.primary_key
        return primary.name if primary else FALLBACK_PRIMARY_KEY

    def format_code(self, code: str) -> str:
        """Strip trailing whitespace and collapse runs of blank lines to one."""
        lines = "\n".join(line.rstrip() for line in code.split("\n"))
        return _BLANK_RUN.sub("\n\n", lines)

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        return self.template_engine.render_template(template_name, context)
