"""Trigger a GitLab pipeline when the tracked branch has a recent commit.

Fetches the latest commit on the branch, and if it is younger than the
freshness window, creates a pipeline and plays its first job.
"""

from .cli import main
from .gitlab import GitLabClient, GitLabError
from .models import Commit, Outcome, RunResult, is_recent
from .settings import ConfigError, Settings, load_settings
from .trigger import PipelineTrigger

__all__ = [
    "main",
    "GitLabClient",
    "GitLabError",
    "Commit",
    "Outcome",
    "RunResult",
    "is_recent",
    "ConfigError",
    "Settings",
    "load_settings",
    "PipelineTrigger",
]

if __name__ == "__main__":
    raise SystemExit(main())
