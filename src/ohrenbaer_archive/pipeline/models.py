"""Result models for download runs."""

from collections import Counter
from dataclasses import dataclass, field

from ohrenbaer_archive.audio.models import TaskStatus


@dataclass(frozen=True)
class TaskOutcome:
    """Result of a single download task.

    A success carries its status; a failure carries the error kind
    (``fetch``, ``stream``, ``encode`` or ``unexpected``) and a detail message.
    """

    title: str
    filename: str
    status: TaskStatus
    error_kind: str | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != TaskStatus.FAILED

    @classmethod
    def success(cls, title: str, filename: str, status: TaskStatus) -> "TaskOutcome":
        return cls(title=title, filename=filename, status=status)

    @classmethod
    def failure(cls, title: str, filename: str, kind: str, detail: str) -> "TaskOutcome":
        return cls(
            title=title,
            filename=filename,
            status=TaskStatus.FAILED,
            error_kind=kind,
            detail=detail,
        )


@dataclass
class RunResult:
    """All task outcomes of a run, in completion order."""

    outcomes: list[TaskOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def failures(self) -> list[TaskOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    def count(self, status: TaskStatus) -> int:
        """Number of tasks that finished with ``status``."""
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    def status_counts(self) -> dict[str, int]:
        """Counts keyed by status label."""
        return dict(Counter(outcome.status.value for outcome in self.outcomes))
