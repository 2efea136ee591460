"""
Language-specific code generators.

This module contains generators for different target languages.
"""

from .php import PhpGenerator, create_php_generator

__all__ = ["PhpGenerator", "create_php_generator"]
