"""
DAO Generator Code Generation Module

Generates data-access classes from relational table metadata.
"""

from pathlib import Path
from typing import Iterable, Optional

from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    list_supported_languages,
    get_language_info,
)
from .core.generator import CodeGenerator, GeneratorError
from .core.batch import BatchGenerator
from .core.schema import (
    ColumnInfo,
    ColumnKey,
    TableInfo,
    GenerationMode,
    GenerationResult,
    BatchSummary,
)
from .core.storage import FileSystem, resolve_output_directory
from .core.config import GeneratorConfig, ConfigManager, load_config


def generate_daos(
    tables: Iterable[TableInfo],
    output_dir,
    mode: GenerationMode = GenerationMode.SAVE,
    language: str = "php",
    config=None,
    fs: Optional[FileSystem] = None,
) -> BatchSummary:
    """
    Generate artifacts for a list of tables.

    Args:
        tables: Table metadata, in the order to process
        output_dir: Directory artifacts are written to
        mode: What to do with existing artifacts
        language: Target language name
        config: Generator configuration (GeneratorConfig, dict or JSON path)
        fs: Filesystem adapter, local disk by default

    Returns:
        BatchSummary for the run

    Raises:
        OutputLocationError: If ``output_dir`` cannot be used
    """
    generator = get_generator(language, config)
    directory = resolve_output_directory(output_dir, fs=fs)
    return BatchGenerator(generator, Path(directory), fs=fs).generate(tables, mode)


__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "GeneratorError",
    "BatchGenerator",
    "ColumnInfo",
    "ColumnKey",
    "TableInfo",
    "GenerationMode",
    "GenerationResult",
    "BatchSummary",
    "GeneratorConfig",
    "ConfigManager",
    "load_config",
    "generate_daos",
    "get_generator",
    "get_language_info",
    "list_supported_languages",
]
