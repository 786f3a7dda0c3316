"""
Travis CI API v2 payloads.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from reaper.core.exceptions import PayloadError


class TravisState(str, Enum):
    """Build and job states reported by Travis."""

    CREATED = "created"
    RECEIVED = "received"
    QUEUED = "queued"
    STARTED = "started"
    PASSED = "passed"
    FAILED = "failed"
    ERRORED = "errored"
    CANCELED = "canceled"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> "TravisState":
        return cls.UNKNOWN

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL

    @property
    def is_running(self) -> bool:
        return not self.is_terminal

    @property
    def is_failure(self) -> bool:
        """A job in this state dooms its whole build."""
        return self in _FAILURE


_TERMINAL = frozenset({TravisState.PASSED, TravisState.FAILED, TravisState.CANCELED, TravisState.ERRORED})
_FAILURE = frozenset({TravisState.FAILED, TravisState.ERRORED, TravisState.CANCELED})


@dataclass(frozen=True)
class TravisCommit:
    id: int
    branch: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TravisCommit":
        return cls(id=data["id"], branch=data["branch"])


@dataclass(frozen=True)
class TravisBuild:
    """A build as listed by ``/repos/{owner}/{name}/builds``."""

    id: int
    number: int
    state: TravisState
    commit_id: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TravisBuild":
        return cls(
            id=data["id"],
            number=int(data["number"]),
            state=TravisState(data.get("state")),
            commit_id=data.get("commit_id"),
        )


@dataclass(frozen=True)
class TravisJob:
    id: int
    state: TravisState

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TravisJob":
        return cls(id=data["id"], state=TravisState(data.get("state")))


@dataclass(frozen=True)
class TravisBuildList:
    """Builds and the commits they point at, as two parallel lists."""

    builds: list[TravisBuild] = field(default_factory=list)
    commits: list[TravisCommit] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "TravisBuildList":
        try:
            builds = [TravisBuild.from_dict(b) for b in payload["builds"]]
            commits = [TravisCommit.from_dict(c) for c in payload.get("commits", [])]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise PayloadError(f"Malformed Travis build list: {exc!r}", raw_body=json.dumps(payload, default=str)) from exc
        return cls(builds=builds, commits=commits)

    def commits_by_id(self) -> dict[int, TravisCommit]:
        return {commit.id: commit for commit in self.commits}


@dataclass(frozen=True)
class TravisBuildDetail:
    """A single build with its jobs, as returned by ``/builds/{id}``."""

    build: TravisBuild
    jobs: list[TravisJob] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "TravisBuildDetail":
        try:
            build = TravisBuild.from_dict(payload["build"])
            jobs = [TravisJob.from_dict(j) for j in payload.get("jobs", [])]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise PayloadError(f"Malformed Travis build: {exc!r}", raw_body=json.dumps(payload, default=str)) from exc
        return cls(build=build, jobs=jobs)

    @property
    def failed_jobs(self) -> list[TravisJob]:
        return [job for job in self.jobs if job.state.is_failure]
