"""
SQL column type classification.

Reduces a raw database type string to one of a few primitive categories
that language generators translate into their own type names.
"""

from enum import Enum
from typing import Tuple


class TypeCategory(Enum):
    """Primitive categories a column type can map to."""

    INTEGER = "integer"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    TEXT = "text"


INTEGER_TOKENS = ("int", "tinyint", "smallint", "mediumint", "bigint")
DECIMAL_TOKENS = ("decimal", "float", "double", "real", "numeric")
BOOLEAN_TOKENS = ("bool", "boolean")
TEMPORAL_TOKENS = ("date", "time", "year")

# Checked in order, first hit wins. Integer comes before boolean, so
# tinyint(1) stays an integer even though it is often used as a flag.
_PRECEDENCE: Tuple[Tuple[Tuple[str, ...], TypeCategory], ...] = (
    (INTEGER_TOKENS, TypeCategory.INTEGER),
    (DECIMAL_TOKENS, TypeCategory.DECIMAL),
    (BOOLEAN_TOKENS, TypeCategory.BOOLEAN),
    (TEMPORAL_TOKENS, TypeCategory.TEXT),
)


def classify(raw_type: str) -> TypeCategory:
    """
    Classify a raw SQL type string.

    Matching is a case-insensitive substring test, so ``"INT(11) UNSIGNED"``
    and ``"point"`` both classify as INTEGER. Anything unrecognized is TEXT.

    Args:
        raw_type: Type as reported by the database (e.g. ``"varchar(255)"``)

    Returns:
        The matching TypeCategory
    """
    lowered = (raw_type or "").lower()

    for tokens, category in _PRECEDENCE:
        if any(token in lowered for token in tokens):
            return category

    return TypeCategory.TEXT
