"""Application settings loaded from environment variables and .env file."""

import os
from datetime import timedelta
from pathlib import Path

import httpx
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://gitlab.com/api/v4"
DEFAULT_BRANCH = "master"
DEFAULT_COMMIT_AGE_WEEKS = 2
DOCKER_MARKER = Path("/.dockerenv")


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


class Settings(BaseSettings):
    """Settings for a single pipeline trigger run."""

    model_config = SettingsConfigDict(
        env_prefix="GITLAB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    private_token: str
    project_id: str
    branch: str = DEFAULT_BRANCH
    api_url: str = DEFAULT_API_URL
    verify_ssl: bool = True
    timeout: float = Field(default=30.0, gt=0)
    commit_age_weeks: int = Field(default=DEFAULT_COMMIT_AGE_WEEKS, gt=0)

    @field_validator("api_url")
    @classmethod
    def check_api_url(cls, value: str) -> str:
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as e:
            raise ValueError(str(e)) from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError("must be an absolute http(s) URL")
        return value

    @property
    def freshness_window(self) -> timedelta:
        return timedelta(weeks=self.commit_age_weeks)

    @property
    def headers(self) -> dict[str, str]:
        """Headers sent with every API request."""
        return {
            "PRIVATE-TOKEN": self.private_token,
            "Content-Type": "application/json",
        }


def is_running_in_docker() -> bool:
    return "DOCKER" in os.environ or DOCKER_MARKER.exists()


def load_settings(**overrides) -> Settings:
    """Build settings from the environment, reading .env outside containers.

    Keyword overrides (e.g. from CLI flags) win over environment values;
    ``None`` overrides are ignored.

    Raises:
        ConfigError: if GITLAB_PRIVATE_TOKEN or GITLAB_PROJECT_ID is missing,
            or a value cannot be parsed.
    """
    overrides = {k: v for k, v in overrides.items() if v is not None}
    env_file = None if is_running_in_docker() else ".env"
    try:
        return Settings(_env_file=env_file, **overrides)
    except ValidationError as e:
        raise ConfigError(_describe(e)) from e


def _describe(e: ValidationError) -> str:
    missing = []
    invalid = []
    for err in e.errors():
        name = f"GITLAB_{str(err['loc'][0]).upper()}" if err["loc"] else "GITLAB_*"
        if err["type"] == "missing":
            missing.append(name)
        else:
            invalid.append(f"{name} ({err['msg']})")
    parts = []
    if missing:
        parts.append(f"Missing {', '.join(missing)}")
    if invalid:
        parts.append(f"Invalid {', '.join(invalid)}")
    return "; ".join(parts)
