"""
DAO Generator

Turns relational table metadata into versioned data-access classes.
"""

from .codegen import (
    ColumnInfo,
    ColumnKey,
    TableInfo,
    GenerationMode,
    BatchSummary,
    generate_daos,
)

__version__ = "0.1.0"

__all__ = [
    "ColumnInfo",
    "ColumnKey",
    "TableInfo",
    "GenerationMode",
    "BatchSummary",
    "generate_daos",
    "__version__",
]
