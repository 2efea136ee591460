"""
PHP-specific type mapping.

Translates the language-agnostic type categories into the names used in
PHPDoc annotations of the generated classes.
"""

from typing import Dict

from ...core.types import TypeCategory, classify

PHP_TYPE_MAP: Dict[TypeCategory, str] = {
    TypeCategory.INTEGER: "int",
    TypeCategory.DECIMAL: "float",
    TypeCategory.BOOLEAN: "bool",
    TypeCategory.TEXT: "string",
}


def php_type_for(raw_type: str) -> str:
    """PHPDoc type for a raw SQL column type."""
    return PHP_TYPE_MAP[classify(raw_type)]
