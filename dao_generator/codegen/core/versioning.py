"""
Version tags embedded in generated artifact headers.

An artifact header carries ``@version <major>.<minor>``; regenerating an
artifact bumps the minor part by a fixed step.
"""

import re
from dataclasses import dataclass

from ...logging_config import get_logger

logger = get_logger(__name__)

VERSION_PATTERN = re.compile(r"@version\s+(\d+)\.(\d{1,2})\b")
DEFAULT_STEP = 10
MAX_MINOR = 99


@dataclass(frozen=True, order=True)
class VersionTag:
    """A major.minor version; minor is always rendered with two digits."""

    major: int = 1
    minor: int = 0

    def __post_init__(self):
        if self.major < 0 or not 0 <= self.minor <= MAX_MINOR:
            raise ValueError(f"Invalid version {self.major}.{self.minor}")

    def __str__(self) -> str:
        return f"{self.major}.{self.minor:02d}"

    @classmethod
    def parse(cls, text: str) -> "VersionTag":
        """Parse ``"1.20"``; raises ValueError on anything else."""
        match = re.fullmatch(r"(\d+)\.(\d{1,2})", text.strip())
        if not match:
            raise ValueError(f"Invalid version string: {text!r}")
        return cls(int(match.group(1)), int(match.group(2)))


INITIAL_VERSION = VersionTag(1, 0)


def current_version(artifact_text: str) -> VersionTag:
    """
    Read the version tag from an artifact.

    Falls back to the initial version when the text has no tag or the tag
    cannot be parsed.
    """
    match = VERSION_PATTERN.search(artifact_text or "")
    if not match:
        logger.debug("No @version tag found, assuming %s", INITIAL_VERSION)
        return INITIAL_VERSION

    return VersionTag(int(match.group(1)), int(match.group(2)))


def next_version(tag: VersionTag, step: int = DEFAULT_STEP) -> VersionTag:
    """
    Compute the version following ``tag``.

    When the minor part would exceed 99 the major part rolls forward and
    the minor part restarts at 0 (``1.90`` -> ``2.00``).
    """
    if step <= 0:
        raise ValueError(f"Version step must be positive, got {step}")

    minor = tag.minor + step
    if minor > MAX_MINOR:
        return VersionTag(tag.major + 1, 0)
    return VersionTag(tag.major, minor)
