"""Filesystem-safe names for downloaded episodes."""

import re

# Characters that are unsafe in file names on at least one common platform
UNSAFE_CHARS_PATTERN = re.compile(r'[/\\?%*:|"<>]')
WHITESPACE_PATTERN = re.compile(r"\s+")

MEDIA_EXTENSION = ".mp3"


def sanitize_filename(title: str) -> str:
    """Turn an episode title into a filesystem-safe name.

    Unsafe characters become dashes and every run of whitespace becomes a
    single underscore. The result contains neither, so sanitizing twice is
    the same as sanitizing once.

    Args:
        title: Episode title (may be empty)

    Returns:
        Sanitized name without extension

    Example:
        >>> sanitize_filename('Märchen: "Der Bär"  / Teil 1')
        'Märchen-_-Der_Bär-_-_Teil_1'
    """
    name = UNSAFE_CHARS_PATTERN.sub("-", title)
    return WHITESPACE_PATTERN.sub("_", name)


def episode_filename(title: str) -> str:
    """Build the download file name for an episode title."""
    return f"{sanitize_filename(title)}{MEDIA_EXTENSION}"
