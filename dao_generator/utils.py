"""Utility functions for loading JSON input and formatting dates.

Date helpers produce the layouts used in artifact headers and backup
file names.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from .logging_config import get_logger

logger = get_logger(__name__)


class JSONLoaderError(Exception):
    """Custom exception for JSON loading errors."""

    pass


def load_json_from_file(file_path: str | Path) -> Any:
    """Load JSON data from a local file.

    Args:
        file_path: Path to the JSON file.

    Returns:
        Parsed JSON data.

    Raises:
        FileNotFoundError: If file doesn't exist.
        JSONLoaderError: If file cannot be read or JSON is invalid.
    """
    file_path = Path(file_path)
    logger.debug("Attempting to load JSON from file: %s", file_path)

    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        logger.warning("File does not have .json extension: %s", file_path)

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        logger.info("Loaded JSON from %s", file_path)
        return data
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in file %s: %s", file_path, e)
        raise JSONLoaderError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise JSONLoaderError(f"Error reading file {file_path}: {e}") from e


def format_backup_timestamp(moment: datetime) -> str:
    """French day-first date and time, safe for file names: ``18-10-2026-14-03-22``."""
    return moment.strftime("%d-%m-%Y-%H-%M-%S")


def format_display_timestamp(moment: datetime) -> str:
    """French day-first date and time for comments: ``18/10/2026 14:03:22``."""
    return moment.strftime("%d/%m/%Y %H:%M:%S")


def format_doc_date(moment: datetime) -> str:
    """ISO date used in generated ``@date`` annotations."""
    return moment.strftime("%Y-%m-%d")
