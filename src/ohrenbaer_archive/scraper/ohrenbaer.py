"""Scrape the Ohrenbär podcast page with Playwright.

The page lists one ``article.doctypeaudio`` per episode. Each article holds a
category label (roofline), a title, a short description, a ``<time>`` element
and a download link.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import ElementHandle, async_playwright

from ohrenbaer_archive.catalog.models import EpisodeRecord
from ohrenbaer_archive.config.schema import ScrapeOptions
from ohrenbaer_archive.utils.errors import ScrapeError

logger = logging.getLogger(__name__)

ARTICLE_SELECTOR = "article.doctypeaudio"
ROOFLINE_SELECTOR = ".manualteaserroofline"
TITLE_SELECTOR = ".manualteasertitle"
DESCRIPTION_SELECTOR = ".manualteasershorttext"
TIME_SELECTOR = "time"
DOWNLOAD_SELECTOR = "a.ico_download"

_TEXT_CONTENT = "el => el.textContent || ''"


def _attribute_js(name: str) -> str:
    return f"el => el.getAttribute('{name}') || ''"


def to_iso_timestamp(value: str) -> str:
    """Normalize a datetime attribute to UTC ISO-8601 with milliseconds.

    Naive values are taken as UTC.

    Example:
        >>> to_iso_timestamp("2024-03-01T18:30:00+01:00")
        '2024-03-01T17:30:00.000Z'

    Raises:
        ValueError: If the value is not an ISO-8601 date or datetime
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime("%Y-%m-%dT%H:%M:%S.") + f"{parsed.microsecond // 1000:03d}Z"


def build_record(
    roofline: str,
    title: str,
    description: str,
    datetime_attr: str,
    download_link: str,
) -> EpisodeRecord | None:
    """Build a catalog record from the raw text of one article.

    Returns:
        The record, or None when title, date or link is missing

    Raises:
        ValueError: If the date attribute cannot be parsed
    """
    title = title.strip()
    link = download_link.strip()
    if not title or not datetime_attr.strip() or not link:
        return None

    full_title = f"{roofline.strip()} - {title}".strip()

    return EpisodeRecord(
        title=full_title,
        release_date=to_iso_timestamp(datetime_attr),
        download_link=link,
        description=description.strip(),
    )


async def _extract_article(article: ElementHandle) -> EpisodeRecord | None:
    roofline = await article.eval_on_selector(ROOFLINE_SELECTOR, _TEXT_CONTENT)
    title = await article.eval_on_selector(TITLE_SELECTOR, _TEXT_CONTENT)
    description = await article.eval_on_selector(DESCRIPTION_SELECTOR, _TEXT_CONTENT)
    datetime_attr = await article.eval_on_selector(TIME_SELECTOR, _attribute_js("datetime"))
    download_link = await article.eval_on_selector(DOWNLOAD_SELECTOR, _attribute_js("href"))
    return build_record(roofline, title, description, datetime_attr, download_link)


class OhrenbaerScraper:
    """Collect episode records from the podcast page."""

    def __init__(
        self,
        options: ScrapeOptions | None = None,
        on_article: Callable[[int, int], None] | None = None,
    ):
        """Initialize the scraper.

        Args:
            options: Scrape options (page URL, headless mode)
            on_article: Called after each article with (current, total)
        """
        self.options = options or ScrapeOptions()
        self.on_article = on_article

    async def scrape(self) -> list[EpisodeRecord]:
        """Scrape all episodes listed on the page.

        Articles that cannot be read are logged and skipped.

        Raises:
            ScrapeError: If the browser or page cannot be loaded
        """
        try:
            async with async_playwright() as playwright:
                logger.info("Launching browser...")
                browser = await playwright.chromium.launch(headless=self.options.headless)
                try:
                    context = await browser.new_context()
                    page = await context.new_page()
                    await page.goto(self.options.url)
                    await page.wait_for_selector(ARTICLE_SELECTOR)
                    articles = await page.query_selector_all(ARTICLE_SELECTOR)
                    logger.info("Found %d podcasts", len(articles))
                    return await self._collect(articles)
                finally:
                    await browser.close()
        except PlaywrightError as e:
            raise ScrapeError(f"Failed to scrape {self.options.url}: {e}") from e

    async def _collect(self, articles: list[ElementHandle]) -> list[EpisodeRecord]:
        records: list[EpisodeRecord] = []
        total = len(articles)

        for index, article in enumerate(articles, start=1):
            try:
                record = await _extract_article(article)
            except (PlaywrightError, ValueError) as e:
                logger.warning("Error processing podcast %d/%d: %s", index, total, e)
                record = None

            if record is not None:
                records.append(record)
            else:
                logger.debug("Dropped article %d/%d", index, total)

            if self.on_article:
                self.on_article(index, total)

        return records
