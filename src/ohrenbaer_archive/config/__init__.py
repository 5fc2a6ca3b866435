"""Configuration for the Ohrenbär archive."""

from ohrenbaer_archive.config.schema import DownloadOptions, ScrapeOptions

__all__ = ["DownloadOptions", "ScrapeOptions"]
