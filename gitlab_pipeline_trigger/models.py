"""Data models for the pipeline trigger workflow."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum


@dataclass(frozen=True)
class Commit:
    """Most recent commit on the tracked branch."""

    id: str
    committed_date: datetime

    @classmethod
    def from_api(cls, data: dict) -> "Commit":
        """Build from a GitLab commit object.

        ``committed_date`` is ISO-8601; it is normalized to UTC, and a
        timestamp without an offset is taken to already be UTC.
        """
        committed = datetime.fromisoformat(data["committed_date"])
        if committed.tzinfo is None:
            committed = committed.replace(tzinfo=timezone.utc)
        return cls(id=str(data["id"]), committed_date=committed.astimezone(timezone.utc))

    def is_recent(self, window: timedelta, now: datetime | None = None) -> bool:
        return is_recent(self, window, now)


def is_recent(commit: Commit, window: timedelta, now: datetime | None = None) -> bool:
    """True iff the commit is strictly younger than ``window``."""
    now = now or datetime.now(timezone.utc)
    return now - commit.committed_date < window


class Outcome(Enum):
    NO_COMMITS = "no_commits"
    STALE_COMMIT = "stale_commit"
    NO_JOBS = "no_jobs"
    JOB_STARTED = "job_started"
    FAILED = "failed"


@dataclass(frozen=True)
class RunResult:
    """Terminal state of one run.

    Every outcome except FAILED is a successful stop; ``error`` is only set
    for FAILED.
    """

    outcome: Outcome
    commit: Commit | None = None
    pipeline_id: int | None = None
    job_id: int | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is not Outcome.FAILED

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1
