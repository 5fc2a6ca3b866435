"""Download pipeline: scheduling, results and progress reporting."""

from ohrenbaer_archive.pipeline.models import RunResult, TaskOutcome, TaskStatus
from ohrenbaer_archive.pipeline.progress import ProgressReporter
from ohrenbaer_archive.pipeline.scheduler import DownloadScheduler, filter_records

__all__ = [
    "DownloadScheduler",
    "ProgressReporter",
    "RunResult",
    "TaskOutcome",
    "TaskStatus",
    "filter_records",
]
