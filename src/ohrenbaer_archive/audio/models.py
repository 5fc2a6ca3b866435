"""Status values shared by the transfer and transcode agents."""

from enum import Enum


class TaskStatus(str, Enum):
    """Status label reported for a finished task."""

    DOWNLOADED = "downloaded"
    SKIPPED = "skipped"
    CONVERTED = "converted"
    FAILED = "failed"
