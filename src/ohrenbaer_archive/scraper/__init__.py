"""Scraper for the Ohrenbär podcast page."""

from ohrenbaer_archive.scraper.ohrenbaer import OhrenbaerScraper, build_record, to_iso_timestamp

__all__ = ["OhrenbaerScraper", "build_record", "to_iso_timestamp"]
