"""
PHP code generator module.

Generates PHP data-access classes from table metadata.
"""

from .generator import PhpGenerator, create_php_generator, column_comment, sql_identifier
from .config import PHP_TYPE_MAP, php_type_for

__all__ = [
    "PhpGenerator",
    "create_php_generator",
    "column_comment",
    "sql_identifier",
    "PHP_TYPE_MAP",
    "php_type_for",
]
