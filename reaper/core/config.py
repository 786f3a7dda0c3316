"""
Application configuration using pydantic-settings.
All environment variables are validated and typed.
"""

import os
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from reaper.models.repository import Repository


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Required tokens
    travis_token: str
    appveyor_token: str

    # Merge-bot integration branch watched on every repository
    tracked_branch: str

    # Repositories as "owner/name" (comma/space separated)
    tracked_repos: str

    # AppVeyor account; falls back to each repository owner
    appveyor_account: str | None = None

    # Scheduling (seconds)
    poll_interval: float = Field(default=60.0, gt=0)
    cycle_deadline: float = Field(default=30.0, gt=0)
    http_timeout: float = Field(default=10.0, gt=0)

    # Provider endpoints
    travis_api_url: str = "https://api.travis-ci.org"
    appveyor_api_url: str = "https://ci.appveyor.com/api"

    log_level: str = "INFO"

    # Parsed values (set by model_validator)
    _parsed_repos: list[Repository] = []

    @property
    def repositories(self) -> list[Repository]:
        """Get parsed tracked repositories."""
        return list(self._parsed_repos)

    @field_validator("tracked_repos", mode="before")
    @classmethod
    def _join_repo_list(cls, value):
        if isinstance(value, (list, tuple)):
            return " ".join(str(v) for v in value)
        return value

    @field_validator("tracked_branch", "travis_token", "appveyor_token")
    @classmethod
    def _require_non_blank(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("must not be empty")
        return cleaned

    @field_validator("appveyor_account", mode="before")
    @classmethod
    def _normalize_account(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = str(value).strip()
        return cleaned or None

    @field_validator("travis_api_url", "appveyor_api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @staticmethod
    def _parse_repos(raw: str) -> list[Repository]:
        tokens = raw.replace(",", " ").split()
        repos: list[Repository] = []
        for token in tokens:
            repo = Repository.parse(token)
            if repo not in repos:
                repos.append(repo)
        return repos

    @model_validator(mode="after")
    def parse_tracked_repos(self):
        """Parse TRACKED_REPOS into Repository objects."""
        repos = self._parse_repos(self.tracked_repos)
        if not repos:
            raise ValueError("TRACKED_REPOS must name at least one owner/name repository")
        self._parsed_repos = repos
        return self

    model_config = {
        "env_file": os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), ".env"),
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
