"""
AppVeyor REST API payloads.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from reaper.core.exceptions import PayloadError


class AppVeyorStatus(str, Enum):
    """Build and job statuses reported by AppVeyor."""

    QUEUED = "queued"
    STARTING = "starting"
    RUNNING = "running"
    CANCELLING = "cancelling"
    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> "AppVeyorStatus":
        return cls.UNKNOWN

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL

    @property
    def is_running(self) -> bool:
        return not self.is_terminal

    @property
    def is_healthy(self) -> bool:
        """A job in this status does not (yet) doom its build."""
        return self in _HEALTHY


_TERMINAL = frozenset({AppVeyorStatus.FAILED, AppVeyorStatus.CANCELLED, AppVeyorStatus.SUCCESS})
_HEALTHY = frozenset({AppVeyorStatus.SUCCESS, AppVeyorStatus.QUEUED, AppVeyorStatus.RUNNING})


@dataclass(frozen=True)
class AppVeyorJob:
    job_id: str
    status: AppVeyorStatus
    name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppVeyorJob":
        return cls(
            job_id=str(data.get("jobId", "")),
            status=AppVeyorStatus(data.get("status")),
            name=data.get("name") or "",
        )


@dataclass(frozen=True)
class AppVeyorBuild:
    """A project build; ``version`` is what the cancel endpoint addresses."""

    build_id: int
    build_number: int
    version: str
    status: AppVeyorStatus
    branch: str = ""
    jobs: list[AppVeyorJob] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppVeyorBuild":
        return cls(
            build_id=data.get("buildId", 0),
            build_number=int(data["buildNumber"]),
            version=str(data["version"]),
            status=AppVeyorStatus(data.get("status")),
            branch=data.get("branch") or "",
            jobs=[AppVeyorJob.from_dict(j) for j in data.get("jobs") or []],
        )

    def first_unhealthy_job(self) -> AppVeyorJob | None:
        """Scan jobs in order and stop at the first one that is not healthy."""
        for job in self.jobs:
            if not job.status.is_healthy:
                return job
        return None


@dataclass(frozen=True)
class AppVeyorHistory:
    """Recent builds of a project, from ``/projects/{account}/{name}/history``."""

    builds: list[AppVeyorBuild] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "AppVeyorHistory":
        try:
            builds = [AppVeyorBuild.from_dict(b) for b in payload["builds"]]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise PayloadError(f"Malformed AppVeyor history: {exc!r}", raw_body=json.dumps(payload, default=str)) from exc
        return cls(builds=builds)

    @property
    def max_build_number(self) -> int | None:
        return max((b.build_number for b in self.builds), default=None)


@dataclass(frozen=True)
class AppVeyorLastBuild:
    """Latest build of a branch, from ``/projects/{account}/{name}/branch/{branch}``."""

    build: AppVeyorBuild

    @classmethod
    def from_payload(cls, payload: Any) -> "AppVeyorLastBuild":
        try:
            build = AppVeyorBuild.from_dict(payload["build"])
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise PayloadError(f"Malformed AppVeyor branch build: {exc!r}", raw_body=json.dumps(payload, default=str)) from exc
        return cls(build=build)
