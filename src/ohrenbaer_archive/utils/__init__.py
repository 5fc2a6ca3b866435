"""Utility functions and helpers for the Ohrenbär archive."""

from ohrenbaer_archive.utils.errors import (
    ArchiveError,
    CatalogError,
    EncodeError,
    EncoderNotFoundError,
    FatalStartupError,
    FetchError,
    InvalidFilterError,
    ScrapeError,
    StreamError,
    TaskError,
)
from ohrenbaer_archive.utils.naming import episode_filename, sanitize_filename

__all__ = [
    # Errors
    "ArchiveError",
    "FatalStartupError",
    "CatalogError",
    "EncoderNotFoundError",
    "InvalidFilterError",
    "ScrapeError",
    "TaskError",
    "FetchError",
    "StreamError",
    "EncodeError",
    # Naming
    "sanitize_filename",
    "episode_filename",
]
