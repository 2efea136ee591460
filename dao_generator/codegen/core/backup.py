"""
Backup policy for regenerated artifacts.

Decides, per table, whether an artifact is written fresh, overwritten in
place, or archived into a sibling ``backup`` directory first.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from .schema import GenerationMode
from .storage import FileSystem
from .versioning import INITIAL_VERSION, VersionTag, current_version, next_version
from ...utils import format_backup_timestamp
from ...logging_config import get_logger

logger = get_logger(__name__)


class BackupCreationError(Exception):
    """Raised when the backup copy of an existing artifact cannot be written."""

    pass


class BackupAction(Enum):
    """What the driver must do before writing new content."""

    WRITE_FRESH = "write_fresh"
    OVERWRITE = "overwrite"
    BACKUP_THEN_OVERWRITE = "backup_then_overwrite"


@dataclass(frozen=True)
class BackupDecision:
    """Action plus the version the new artifact will carry."""

    action: BackupAction
    version: VersionTag
    previous_version: Optional[VersionTag] = None

    @property
    def needs_backup(self) -> bool:
        return self.action == BackupAction.BACKUP_THEN_OVERWRITE


def decide(
    existing_text: Optional[str], mode: GenerationMode, step: int = 10
) -> BackupDecision:
    """
    Decide how to treat a table's artifact.

    Args:
        existing_text: Content of the current artifact, None if there is none
        mode: Requested generation mode
        step: Minor version increment

    Returns:
        BackupDecision for the table
    """
    if existing_text is None:
        return BackupDecision(BackupAction.WRITE_FRESH, INITIAL_VERSION)

    previous = current_version(existing_text)
    version = next_version(previous, step)

    if mode == GenerationMode.OVERWRITE:
        return BackupDecision(BackupAction.OVERWRITE, version, previous)
    return BackupDecision(BackupAction.BACKUP_THEN_OVERWRITE, version, previous)


def backup_path_for(
    artifact_path: Path,
    timestamp: datetime,
    dir_name: str = "backup",
    marker: str = "_backup_",
) -> Path:
    """``/out/DAOUsers.php`` -> ``/out/backup/DAOUsers_backup_18-10-2026-14-03-22.php``"""
    artifact_path = Path(artifact_path)
    stamp = format_backup_timestamp(timestamp)
    name = f"{artifact_path.stem}{marker}{stamp}{artifact_path.suffix}"
    return artifact_path.parent / dir_name / name


class BackupPolicy:
    """Writes backup copies of existing artifacts."""

    def __init__(self, fs: FileSystem, dir_name: str = "backup", marker: str = "_backup_"):
        self.fs = fs
        self.dir_name = dir_name
        self.marker = marker

    def create_backup(
        self, artifact_path: Path, original_text: str, header: str, timestamp: datetime
    ) -> Path:
        """
        Write ``header`` followed by the original content into the backup
        directory next to ``artifact_path``.

        Returns:
            Path of the backup file

        Raises:
            BackupCreationError: If the directory or file cannot be written
        """
        path = backup_path_for(artifact_path, timestamp, self.dir_name, self.marker)

        try:
            self.fs.mkdir(path.parent)
            self.fs.write(path, header + original_text)
        except OSError as e:
            raise BackupCreationError(f"Failed to create backup {path}: {e}") from e

        logger.info("Backed up %s to %s", artifact_path, path)
        return path
