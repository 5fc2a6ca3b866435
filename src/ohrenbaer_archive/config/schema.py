"""Run configuration models using Pydantic."""

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from ohrenbaer_archive.utils.errors import InvalidFilterError

DEFAULT_CATALOG_FILE = Path("podcasts.json")
DEFAULT_DOWNLOAD_DIR = Path("downloads")
DEFAULT_PARALLELISM = 8
PODCAST_PAGE_URL = "https://www.ohrenbaer.de/podcast/podcast.html"


class DownloadOptions(BaseModel):
    """Options for a download run.

    Built once by the CLI and passed to the scheduler.
    """

    model_config = ConfigDict(frozen=True)

    download_dir: Path = DEFAULT_DOWNLOAD_DIR
    filter_pattern: str | None = None
    parallelism: int = Field(default=DEFAULT_PARALLELISM, ge=1)
    force: bool = False  # Overwrite existing files
    dry_run: bool = False  # Only report what would happen
    convert: bool = False  # Re-encode downloads to M4A (AAC)

    def compiled_filter(self) -> re.Pattern[str] | None:
        """Compile the title filter (case-insensitive).

        Raises:
            InvalidFilterError: If the pattern is not a valid regex
        """
        if not self.filter_pattern:
            return None
        try:
            return re.compile(self.filter_pattern, re.IGNORECASE)
        except re.error as e:
            raise InvalidFilterError(
                f"Invalid filter pattern {self.filter_pattern!r}: {e}"
            ) from e


class ScrapeOptions(BaseModel):
    """Options for scraping the podcast page."""

    model_config = ConfigDict(frozen=True)

    output: Path = DEFAULT_CATALOG_FILE
    headless: bool = True
    url: str = PODCAST_PAGE_URL
