"""Progress reporting for download runs."""

from types import TracebackType

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from ohrenbaer_archive.pipeline.models import TaskOutcome, TaskStatus

STATUS_STYLES = {
    TaskStatus.DOWNLOADED: "green",
    TaskStatus.CONVERTED: "cyan",
    TaskStatus.SKIPPED: "dim",
    TaskStatus.FAILED: "red",
}


class ProgressReporter:
    """Receives one event per finished task and renders a progress bar.

    Events arrive in completion order. The reporter keeps every outcome it
    has seen so callers can inspect them after the run.

    Example:
        >>> with ProgressReporter(total=3) as reporter:
        ...     reporter.report(outcome)
    """

    def __init__(self, total: int, console: Console | None = None, enabled: bool = True):
        """Initialize the reporter.

        Args:
            total: Number of tasks expected
            console: Rich console to render on (default: new stdout console)
            enabled: Render a progress bar; when False only counts events
        """
        self.total = total
        self.completed = 0
        self.events: list[TaskOutcome] = []
        self.console = console or Console()
        self.enabled = enabled
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None

    def start(self) -> None:
        if not self.enabled or self._progress is not None:
            return
        self._progress = Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=30),
            MofNCompleteColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            TextColumn("{task.fields[status]} {task.fields[file]}"),
            console=self.console,
        )
        self._progress.start()
        self._task_id = self._progress.add_task(
            "Downloading", total=self.total, status="", file=""
        )

    def stop(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task_id = None

    def __enter__(self) -> "ProgressReporter":
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()

    def report(self, outcome: TaskOutcome) -> None:
        """Record a finished task and advance the bar by one."""
        self.completed += 1
        self.events.append(outcome)

        if self._progress is not None and self._task_id is not None:
            style = STATUS_STYLES.get(outcome.status, "")
            self._progress.update(
                self._task_id,
                advance=1,
                status=f"[{style}]{outcome.status.value}[/{style}]",
                file=escape(outcome.filename),
            )
