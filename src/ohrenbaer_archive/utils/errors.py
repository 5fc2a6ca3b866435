"""Custom exceptions for the Ohrenbär archive."""


class ArchiveError(Exception):
    """Base exception for all archive errors."""

    pass


class FatalStartupError(ArchiveError):
    """Errors that abort a run before any task is scheduled."""

    pass


class CatalogError(FatalStartupError):
    """Catalog file could not be read, parsed or validated."""

    pass


class EncoderNotFoundError(FatalStartupError):
    """External audio encoder is not available on PATH."""

    pass


class InvalidFilterError(FatalStartupError):
    """Title filter is not a valid regular expression."""

    pass


class ScrapeError(ArchiveError):
    """Scraping the podcast page failed as a whole."""

    pass


class TaskError(ArchiveError):
    """Failure of a single download task.

    Task errors are caught at the task boundary and never abort a run.
    """

    kind = "task"


class FetchError(TaskError):
    """Request failed or the server answered with a non-success status."""

    kind = "fetch"


class StreamError(TaskError):
    """Streaming the response body to disk failed."""

    kind = "stream"


class EncodeError(TaskError):
    """External encoder exited with a non-zero status."""

    kind = "encode"

    def __init__(self, message: str, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
