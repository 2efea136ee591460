"""
Filesystem adapter used by the batch driver and backup policy.

The pipeline only needs four operations; keeping them behind a small
interface lets the driver run against an in-memory store.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from ...logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_OUTPUT_FOLDER = "DAO"


class ArtifactWriteError(Exception):
    """Raised when a generated artifact cannot be written."""

    pass


class OutputLocationError(Exception):
    """Raised when no usable output directory can be resolved."""

    pass


class FileSystem(ABC):
    """Minimal file operations needed by the generation pipeline."""

    @abstractmethod
    def exists(self, path: Path) -> bool:
        pass

    @abstractmethod
    def is_dir(self, path: Path) -> bool:
        pass

    @abstractmethod
    def read(self, path: Path) -> str:
        pass

    @abstractmethod
    def write(self, path: Path, text: str) -> None:
        pass

    @abstractmethod
    def mkdir(self, path: Path) -> None:
        """Create a directory and its parents; no error if it exists."""
        pass


class LocalFileSystem(FileSystem):
    """FileSystem backed by the real disk, UTF-8 throughout."""

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def is_dir(self, path: Path) -> bool:
        return Path(path).is_dir()

    def read(self, path: Path) -> str:
        with Path(path).open("r", encoding="utf-8") as f:
            return f.read()

    def write(self, path: Path, text: str) -> None:
        # newline="" keeps the artifact's line endings byte for byte
        with Path(path).open("w", encoding="utf-8", newline="") as f:
            f.write(text)

    def mkdir(self, path: Path) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)


def write_artifact(fs: FileSystem, path: Path, text: str) -> None:
    """Write an artifact, wrapping I/O failures in ArtifactWriteError."""
    try:
        fs.write(path, text)
    except OSError as e:
        raise ArtifactWriteError(f"Failed to write {path}: {e}") from e


def resolve_output_directory(
    suggested: Optional[Union[str, Path]] = None,
    workspace_root: Optional[Union[str, Path]] = None,
    fs: Optional[FileSystem] = None,
) -> Path:
    """
    Pick the directory generated artifacts are written to.

    An existing ``suggested`` directory wins. Otherwise a ``DAO`` folder is
    created under ``workspace_root``.

    Raises:
        OutputLocationError: If neither location is usable
    """
    fs = fs or LocalFileSystem()

    if suggested:
        path = Path(suggested)
        if fs.is_dir(path):
            return path
        if fs.exists(path):
            raise OutputLocationError(f"Output path is not a directory: {path}")
        logger.info("Output directory %s does not exist, creating it", path)
        try:
            fs.mkdir(path)
        except OSError as e:
            raise OutputLocationError(f"Cannot create output directory {path}: {e}") from e
        return path

    if workspace_root:
        path = Path(workspace_root) / DEFAULT_OUTPUT_FOLDER
        try:
            fs.mkdir(path)
        except OSError as e:
            raise OutputLocationError(f"Cannot create output directory {path}: {e}") from e
        return path

    raise OutputLocationError("No output directory given and no workspace to default to")
