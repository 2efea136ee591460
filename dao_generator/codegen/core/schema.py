"""
Core schema representation for code generation.

Normalizes column metadata coming from any schema source into immutable
structures, and defines the per-table and per-batch result containers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from enum import Enum


class ColumnKey(Enum):
    """Index role of a column."""

    PRIMARY = "PRI"
    UNIQUE = "UNI"
    MULTI = "MUL"
    NONE = ""

    @classmethod
    def parse(cls, value: Optional[str]) -> "ColumnKey":
        """Map a raw key marker (``PRI``, ``UNI``, ``MUL`` or empty) to a ColumnKey."""
        if value is None:
            return cls.NONE
        if isinstance(value, ColumnKey):
            return value

        raw = str(value).strip().upper()
        for member in cls:
            if raw in (member.value, member.name):
                return member
        return cls.NONE


class GenerationMode(Enum):
    """What to do when an artifact already exists."""

    SAVE = "save"  # archive the existing artifact, then overwrite
    OVERWRITE = "overwrite"


class Outcome(Enum):
    """Terminal state of one table in a batch."""

    GENERATED = "generated"
    SKIPPED = "skipped"
    FAILED = "failed"


def _parse_nullable(value: Any) -> bool:
    """Accept booleans as well as the ``YES``/``NO`` strings DESCRIBE reports."""
    if isinstance(value, str):
        return value.strip().upper() not in ("NO", "N", "FALSE", "0", "")
    return bool(value)


@dataclass(frozen=True)
class ColumnInfo:
    """A single column as reported by the schema source."""

    name: str
    type: str
    nullable: bool = True
    key: ColumnKey = ColumnKey.NONE
    default: Optional[str] = None
    extra: str = ""

    @property
    def is_primary(self) -> bool:
        return self.key == ColumnKey.PRIMARY

    @property
    def is_auto_increment(self) -> bool:
        return "auto_increment" in self.extra.lower()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ColumnInfo":
        """Build a column from a plain mapping (JSON dumps, driver rows)."""
        default = data.get("default")
        return cls(
            name=str(data["name"]),
            type=str(data.get("type", "")),
            nullable=_parse_nullable(data.get("nullable", True)),
            key=ColumnKey.parse(data.get("key")),
            default=None if default is None else str(default),
            extra=str(data.get("extra") or ""),
        )


@dataclass(frozen=True)
class TableInfo:
    """A table and its columns in declaration order."""

    name: str
    columns: Tuple[ColumnInfo, ...] = ()

    def __post_init__(self):
        # Accept any sequence but store an immutable tuple.
        object.__setattr__(self, "columns", tuple(self.columns))

    @property
    def primary_key(self) -> Optional[ColumnInfo]:
        """First PRIMARY column in declared order, if any."""
        for column in self.columns:
            if column.is_primary:
                return column
        return None

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableInfo":
        columns = data.get("columns") or []
        if not isinstance(columns, list):
            raise ValueError(f"Table '{data.get('name')}' columns must be a list")
        return cls(
            name=str(data["name"]),
            columns=tuple(ColumnInfo.from_dict(column) for column in columns),
        )


@dataclass
class GenerationResult:
    """Outcome of generating one table."""

    table: str
    outcome: Outcome
    path: Optional[str] = None
    backup_path: Optional[str] = None
    version: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome == Outcome.GENERATED

    @classmethod
    def generated(
        cls, table: str, path: str, version: str, backup_path: Optional[str] = None
    ) -> "GenerationResult":
        return cls(
            table=table,
            outcome=Outcome.GENERATED,
            path=path,
            backup_path=backup_path,
            version=version,
        )

    @classmethod
    def skipped(cls, table: str, message: str) -> "GenerationResult":
        return cls(table=table, outcome=Outcome.SKIPPED, error_message=message)

    @classmethod
    def failed(
        cls, table: str, message: str, backup_path: Optional[str] = None
    ) -> "GenerationResult":
        return cls(
            table=table,
            outcome=Outcome.FAILED,
            backup_path=backup_path,
            error_message=message,
        )


@dataclass
class BatchSummary:
    """Aggregated result of one batch invocation."""

    generated: int = 0
    skipped: int = 0
    backed_up: int = 0
    errors: List[str] = field(default_factory=list)
    written_paths: List[str] = field(default_factory=list)
    results: List[GenerationResult] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if result.outcome == Outcome.FAILED)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def record(self, result: GenerationResult) -> None:
        """Fold one table result into the counters."""
        self.results.append(result)

        if result.backup_path:
            self.backed_up += 1
        if result.outcome == Outcome.GENERATED:
            self.generated += 1
            if result.path:
                self.written_paths.append(result.path)
        else:
            if result.outcome == Outcome.SKIPPED:
                self.skipped += 1
            self.errors.append(f"{result.table}: {result.error_message}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated": self.generated,
            "skipped": self.skipped,
            "backed_up": self.backed_up,
            "failed": self.failed,
            "errors": list(self.errors),
            "written_paths": list(self.written_paths),
        }
