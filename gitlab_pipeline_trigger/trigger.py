"""Trigger a pipeline when the tracked branch has a recent commit."""

import sys
from datetime import datetime

from .gitlab import GitLabClient, GitLabError
from .models import Outcome, RunResult


def _log(msg: str):
    sys.stderr.write(f"[trigger] {msg}\n")
    sys.stderr.flush()


class PipelineTrigger:
    """Runs fetch commit -> age check -> trigger pipeline -> play first job.

    Each step only runs if the previous one succeeded. The soft stops
    (no commits, stale commit, no jobs) and the happy path all return a
    RunResult with ``ok`` set; any API error returns Outcome.FAILED and
    skips every later request.
    """

    def __init__(self, client: GitLabClient, now: datetime | None = None):
        self.client = client
        self.settings = client.settings
        self._now = now

    def run(self) -> RunResult:
        commit = None
        pipeline_id = None
        job_id = None
        try:
            print("Fetching latest commit...", flush=True)
            commit = self.client.latest_commit()
            if commit is None:
                print("No commits found.", flush=True)
                return RunResult(Outcome.NO_COMMITS)

            print(f"Latest commit: {commit.id} at {commit.committed_date.isoformat()}", flush=True)
            if not commit.is_recent(self.settings.freshness_window, now=self._now):
                print("Commit is too old.", flush=True)
                return RunResult(Outcome.STALE_COMMIT, commit=commit)

            print("Triggering pipeline...", flush=True)
            pipeline_id = self.client.trigger_pipeline()
            print(f"Pipeline {pipeline_id} created.", flush=True)

            print("Fetching first job...", flush=True)
            job_id = self.client.first_job(pipeline_id)
            if job_id is None:
                print("No jobs found in the pipeline.", flush=True)
                return RunResult(Outcome.NO_JOBS, commit=commit, pipeline_id=pipeline_id)

            print(f"Starting job {job_id}...", flush=True)
            self.client.play_job(job_id)
            print("Job started successfully.", flush=True)
            return RunResult(Outcome.JOB_STARTED, commit=commit, pipeline_id=pipeline_id, job_id=job_id)
        except GitLabError as e:
            _log(f"Error: {e}")
            return RunResult(
                Outcome.FAILED,
                commit=commit,
                pipeline_id=pipeline_id,
                job_id=job_id,
                error=e,
            )
