"""GitLab REST API client using httpx."""

from urllib.parse import quote

import httpx

from .models import Commit
from .settings import Settings


class GitLabError(Exception):
    """Transport failure, non-2xx response, or unexpected response body."""

    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status


def build_http_client(settings: Settings, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    """Create the HTTP client shared by every request of a run."""
    return httpx.Client(
        base_url=settings.api_url,
        headers=settings.headers,
        timeout=settings.timeout,
        verify=settings.verify_ssl,
        transport=transport,
    )


class GitLabClient:
    """Thin client for the four project endpoints the trigger needs.

    No retries: every failure surfaces as GitLabError on the first attempt.
    """

    def __init__(self, settings: Settings, http: httpx.Client):
        self.settings = settings
        self._http = http
        # Path-style ids ("group/project") must be URL-encoded
        self._project = quote(settings.project_id, safe="")

    def _request(self, method, endpoint, params=None, json=None, parse=True):
        try:
            resp = self._http.request(method, endpoint, params=params, json=json)
        except httpx.HTTPError as e:
            raise GitLabError(f"{method} {endpoint} failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise GitLabError(
                f"GitLab API error {resp.status_code}: {method} {endpoint}: {resp.text[:200]}",
                status=resp.status_code,
            )
        if not parse or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise GitLabError(f"Invalid JSON response from {method} {endpoint}", status=resp.status_code) from e

    def latest_commit(self) -> Commit | None:
        """Most recent commit on the configured branch, or None if it has none."""
        commits = self._request(
            "GET",
            f"/projects/{self._project}/repository/commits",
            params={"ref_name": self.settings.branch, "per_page": 1},
        )
        if not isinstance(commits, list):
            raise GitLabError("Expected a list of commits")
        if not commits:
            return None
        try:
            return Commit.from_api(commits[0])
        except (KeyError, TypeError, ValueError) as e:
            raise GitLabError(f"Malformed commit object: {e}") from e

    def trigger_pipeline(self) -> int:
        """Create a pipeline on the configured branch and return its id."""
        body = self._request(
            "POST",
            f"/projects/{self._project}/pipeline",
            json={"ref": self.settings.branch},
        )
        return _id_of(body, "pipeline")

    def first_job(self, pipeline_id: int) -> int | None:
        """Id of the first job of the pipeline, in API order."""
        jobs = self._request("GET", f"/projects/{self._project}/pipelines/{pipeline_id}/jobs")
        if not isinstance(jobs, list):
            raise GitLabError("Expected a list of jobs")
        if not jobs:
            return None
        return _id_of(jobs[0], "job")

    def play_job(self, job_id: int) -> None:
        """Start a manual job. Any 2xx is success; the body is not read."""
        self._request("POST", f"/projects/{self._project}/jobs/{job_id}/play", parse=False)

    def close(self):
        self._http.close()


def _id_of(obj, kind: str) -> int:
    try:
        value = obj["id"]
    except (KeyError, TypeError) as e:
        raise GitLabError(f"Malformed {kind} object: missing id") from e
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise GitLabError(f"Malformed {kind} object: id {value!r}")
    return value
