"""
Naming utilities for safe code generation.

Turns raw database identifiers into class and member names. Everything
here is a pure function of its input; names are recomputed on every
generation.
"""

import re
from dataclasses import dataclass
from typing import Tuple

from .schema import TableInfo

_TABLE_PREFIX = re.compile(r"^[^_]+_")
_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9_]")


def to_pascal_case(identifier: str) -> str:
    """
    Convert an underscore separated identifier to PascalCase.

    Only the first character of each segment is uppercased, the rest is
    kept as is: ``user_name`` -> ``UserName``, ``userId`` -> ``UserId``.
    """
    return "".join(
        segment[:1].upper() + segment[1:] for segment in identifier.split("_")
    )


def remove_table_prefix(table_name: str) -> str:
    """
    Strip a single leading ``prefix_`` segment from a table name.

    ``rv_users`` -> ``users``. Only one segment goes, so ``app_rv_users``
    becomes ``rv_users``. Names without an underscore are returned unchanged.
    """
    return _TABLE_PREFIX.sub("", table_name, count=1)


def sanitize_identifier(name: str) -> str:
    """Replace characters that cannot appear in a member name."""
    cleaned = _INVALID_CHARS.sub("_", name)
    if cleaned and cleaned[0].isdigit():
        cleaned = f"_{cleaned}"
    return cleaned


@dataclass(frozen=True)
class MemberNames:
    """Names derived from one column."""

    column: str
    property: str
    getter: str
    setter: str


@dataclass(frozen=True)
class ResolvedIdentifiers:
    """All names derived from a table, in column order."""

    table_name: str
    clean_name: str
    class_name: str
    members: Tuple[MemberNames, ...]

    def member(self, column: str) -> MemberNames:
        for member in self.members:
            if member.column == column:
                return member
        raise KeyError(column)

    @property
    def setter_map(self) -> Tuple[Tuple[str, str], ...]:
        """Column name -> setter name pairs in column order."""
        return tuple((member.column, member.setter) for member in self.members)


def member_names(column: str) -> MemberNames:
    prop = sanitize_identifier(column)
    suffix = to_pascal_case(prop)
    return MemberNames(
        column=column, property=prop, getter=f"get{suffix}", setter=f"set{suffix}"
    )


def resolve_identifiers(
    table: TableInfo, class_prefix: str = "DAO", strip_prefix: bool = True
) -> ResolvedIdentifiers:
    """
    Derive class and member names for a table.

    Args:
        table: Table metadata
        class_prefix: Prefix prepended to the class name
        strip_prefix: Whether to drop a leading ``prefix_`` from the table name

    Returns:
        ResolvedIdentifiers for the table
    """
    clean_name = remove_table_prefix(table.name) if strip_prefix else table.name
    class_name = class_prefix + to_pascal_case(sanitize_identifier(clean_name))

    return ResolvedIdentifiers(
        table_name=table.name,
        clean_name=clean_name,
        class_name=class_name,
        members=tuple(member_names(column.name) for column in table.columns),
    )
