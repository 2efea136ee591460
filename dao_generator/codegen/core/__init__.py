"""
Core code generation components.

Provides the data model, the language-agnostic pipeline steps and the
base classes used by all language generators.
"""

from .schema import (
    ColumnInfo,
    ColumnKey,
    TableInfo,
    GenerationMode,
    Outcome,
    GenerationResult,
    BatchSummary,
)
from .types import TypeCategory, classify
from .naming import (
    ResolvedIdentifiers,
    MemberNames,
    to_pascal_case,
    remove_table_prefix,
    resolve_identifiers,
)
from .versioning import VersionTag, INITIAL_VERSION, current_version, next_version
from .backup import BackupAction, BackupDecision, BackupPolicy, BackupCreationError, decide
from .storage import (
    FileSystem,
    LocalFileSystem,
    ArtifactWriteError,
    OutputLocationError,
    resolve_output_directory,
)
from .generator import CodeGenerator, GeneratorError
from .batch import BatchGenerator
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Data model
    "ColumnInfo",
    "ColumnKey",
    "TableInfo",
    "GenerationMode",
    "Outcome",
    "GenerationResult",
    "BatchSummary",
    # Type mapping
    "TypeCategory",
    "classify",
    # Naming
    "ResolvedIdentifiers",
    "MemberNames",
    "to_pascal_case",
    "remove_table_prefix",
    "resolve_identifiers",
    # Versioning
    "VersionTag",
    "INITIAL_VERSION",
    "current_version",
    "next_version",
    # Backup policy
    "BackupAction",
    "BackupDecision",
    "BackupPolicy",
    "BackupCreationError",
    "decide",
    # Storage
    "FileSystem",
    "LocalFileSystem",
    "ArtifactWriteError",
    "OutputLocationError",
    "resolve_output_directory",
    # Generation
    "CodeGenerator",
    "GeneratorError",
    "BatchGenerator",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
