"""Concurrent download-and-convert scheduler.

Runs one task per catalog record on a single event loop. At most
``parallelism`` tasks are active at any time; a finished task frees its slot
for the next one immediately. Failures are isolated per task and collected
into the run result.
"""

import asyncio
import logging
import re
from collections import defaultdict
from collections.abc import Sequence
from pathlib import Path

from ohrenbaer_archive.audio.downloader import FileTransferAgent
from ohrenbaer_archive.audio.transcoder import TranscodeAgent
from ohrenbaer_archive.catalog.models import EpisodeRecord
from ohrenbaer_archive.config.schema import DownloadOptions
from ohrenbaer_archive.pipeline.models import RunResult, TaskOutcome
from ohrenbaer_archive.pipeline.progress import ProgressReporter
from ohrenbaer_archive.utils.errors import TaskError
from ohrenbaer_archive.utils.naming import episode_filename

logger = logging.getLogger(__name__)


def filter_records(
    records: Sequence[EpisodeRecord], pattern: re.Pattern[str] | None
) -> list[EpisodeRecord]:
    """Keep records whose title matches ``pattern`` anywhere (all if None)."""
    if pattern is None:
        return list(records)
    return [record for record in records if pattern.search(record.title)]


class DownloadScheduler:
    """Fan out one download task per catalog record.

    Example:
        >>> scheduler = DownloadScheduler(DownloadOptions(parallelism=4))
        >>> result = await scheduler.run(catalog)
        >>> print(result.failed_count)
    """

    def __init__(
        self,
        options: DownloadOptions,
        transfer_agent: FileTransferAgent | None = None,
        transcode_agent: TranscodeAgent | None = None,
        reporter: ProgressReporter | None = None,
    ):
        """Initialize the scheduler.

        Args:
            options: Run configuration
            transfer_agent: Agent used for downloads (default: new FileTransferAgent)
            transcode_agent: Agent used when ``options.convert`` is set
            reporter: Receives one event per finished task
        """
        self.options = options
        self.transfer_agent = transfer_agent or FileTransferAgent()
        self.transcode_agent = transcode_agent or TranscodeAgent()
        self.reporter = reporter

    def prepare(self, catalog: Sequence[EpisodeRecord]) -> list[EpisodeRecord]:
        """Run startup checks and select the records to process.

        Raises:
            EncoderNotFoundError: If converting and the encoder is missing
            InvalidFilterError: If the filter pattern is not a valid regex
        """
        if self.options.convert:
            self.transcode_agent.ensure_available()

        pattern = self.options.compiled_filter()
        records = filter_records(catalog, pattern)
        if pattern is not None:
            logger.info(
                "Filtered to %d podcasts matching %r", len(records), self.options.filter_pattern
            )
        return records

    async def run(self, catalog: Sequence[EpisodeRecord]) -> RunResult:
        """Download (and optionally convert) every selected record.

        Returns after every task has settled.

        Args:
            catalog: Catalog records

        Returns:
            RunResult with one outcome per processed record

        Raises:
            FatalStartupError: If a startup check fails; no task is started
        """
        records = self.prepare(catalog)
        return await self.run_records(records)

    async def run_records(self, records: Sequence[EpisodeRecord]) -> RunResult:
        """Process already selected records (startup checks not repeated)."""
        result = RunResult()
        if not records:
            logger.info("No podcasts to download")
            return result

        download_dir = self.options.download_dir.resolve()
        if not self.options.dry_run:
            download_dir.mkdir(parents=True, exist_ok=True)

        semaphore = asyncio.Semaphore(self.options.parallelism)
        # Records sharing a title share a destination; one task per file at a time
        destination_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

        async def run_with_limit(record: EpisodeRecord) -> None:
            async with destination_locks[episode_filename(record.title)], semaphore:
                outcome = await self._run_task(record, download_dir)
                result.outcomes.append(outcome)
                if self.reporter is not None:
                    self.reporter.report(outcome)

        try:
            await asyncio.gather(*(run_with_limit(record) for record in records))
        finally:
            await self.transfer_agent.aclose()

        return result

    async def _run_task(self, record: EpisodeRecord, download_dir: Path) -> TaskOutcome:
        """Transfer and optionally convert one record; never raises TaskError."""
        filename = episode_filename(record.title)
        dest_path = download_dir / filename
        options = self.options

        try:
            status = await self.transfer_agent.transfer(
                record.download_link,
                dest_path,
                force=options.force,
                dry_run=options.dry_run,
            )
            if options.convert:
                status = await self.transcode_agent.transcode(
                    dest_path,
                    force=options.force,
                    dry_run=options.dry_run,
                )
        except TaskError as e:
            logger.error("Failed to download %s: %s", record.title, e)
            return TaskOutcome.failure(record.title, filename, e.kind, str(e))
        except Exception as e:
            logger.exception("Unexpected error while processing %s", record.title)
            return TaskOutcome.failure(record.title, filename, "unexpected", str(e))

        return TaskOutcome.success(record.title, filename, status)
