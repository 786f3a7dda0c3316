"""
Per-cycle results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from reaper.models.repository import Repository


@dataclass(frozen=True)
class Cancellation:
    """A cancel request that the provider accepted."""

    provider: str
    repository: Repository
    build: str
    reason: str

    def __str__(self) -> str:
        return f"{self.provider} {self.repository} build {self.build} ({self.reason})"


@dataclass
class ProbeResult:
    """Outcome of checking one repository on one provider."""

    provider: str
    repository: Repository
    cancellations: list[Cancellation] = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class CycleOutcome:
    """Everything a single cycle did, logged by the scheduler and then dropped."""

    started_at: datetime
    results: list[ProbeResult] = field(default_factory=list)
    abandoned: list[tuple[str, Repository]] = field(default_factory=list)
    finished_at: datetime | None = None

    @property
    def timed_out(self) -> bool:
        return bool(self.abandoned)

    @property
    def failures(self) -> list[ProbeResult]:
        return [r for r in self.results if not r.ok]

    @property
    def cancellations(self) -> list[Cancellation]:
        return [c for r in self.results for c in r.cancellations]

    @property
    def status(self) -> str:
        if self.timed_out:
            return "timed out"
        if self.failures:
            return "failed"
        return "ok"
