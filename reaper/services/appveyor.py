"""
AppVeyor prober.

Two independent checks run for each repository:

* history: every running build on the branch older than the newest one is
  cancelled;
* latest build: the newest branch build is cancelled as soon as one of its
  jobs is neither queued, running nor successful.
"""

from __future__ import annotations

from urllib.parse import quote

from reaper.core.logging import get_logger
from reaper.models.appveyor import AppVeyorBuild, AppVeyorHistory, AppVeyorLastBuild
from reaper.models.outcome import Cancellation
from reaper.models.repository import Repository
from reaper.services.base import flatten, gather_all
from reaper.services.transport import ProviderTransport

logger = get_logger(__name__)

HISTORY_RECORDS = 10


def stale_builds(history: AppVeyorHistory) -> list[AppVeyorBuild]:
    """Running builds strictly older than the newest build in ``history``."""
    max_number = history.max_build_number
    if max_number is None:
        return []
    return [b for b in history.builds if b.status.is_running and b.build_number < max_number]


class AppVeyorProber:
    """Applies the AppVeyor cancellation policy to one repository at a time."""

    provider = "appveyor"

    def __init__(self, transport: ProviderTransport, branch: str, account: str | None = None):
        self._transport = transport
        self._branch = branch
        self._account = account

    def account_for(self, repo: Repository) -> str:
        return self._account or repo.owner

    async def probe(self, repo: Repository) -> list[Cancellation]:
        # Versions already cancelled by either check during this probe
        claimed: set[str] = set()
        results = await gather_all([
            self.check_history(repo, claimed),
            self.check_latest(repo, claimed),
        ])
        return flatten(results)

    async def check_history(self, repo: Repository, claimed: set[str] | None = None) -> list[Cancellation]:
        claimed = claimed if claimed is not None else set()
        payload = await self._transport.get_json(
            f"/projects/{self.account_for(repo)}/{repo.name}/history",
            params={"recordsNumber": HISTORY_RECORDS, "branch": self._branch},
        )
        history = AppVeyorHistory.from_payload(payload)

        pending = []
        for build in stale_builds(history):
            if not self._claim(build, claimed):
                continue
            logger.info("appveyor cancelling %s in %s as it's not the latest", build.build_number, repo)
            pending.append(self._cancel(repo, build, "superseded by a newer build"))
        return flatten(await gather_all(pending))

    async def check_latest(self, repo: Repository, claimed: set[str] | None = None) -> Cancellation | None:
        claimed = claimed if claimed is not None else set()
        branch = quote(self._branch, safe="")
        payload = await self._transport.get_json(f"/projects/{self.account_for(repo)}/{repo.name}/branch/{branch}")
        build = AppVeyorLastBuild.from_payload(payload).build

        if not build.status.is_running:
            return None

        job = build.first_unhealthy_job()
        if job is None:
            return None
        if not self._claim(build, claimed):
            return None

        logger.info(
            "appveyor cancelling %s in %s as a job is %s",
            build.build_number,
            repo,
            job.status.value,
        )
        return await self._cancel(repo, build, f"job {job.status.value}")

    @staticmethod
    def _claim(build: AppVeyorBuild, claimed: set[str]) -> bool:
        if build.version in claimed:
            logger.debug("appveyor build %s already being cancelled", build.version)
            return False
        claimed.add(build.version)
        return True

    async def _cancel(self, repo: Repository, build: AppVeyorBuild, reason: str) -> Cancellation:
        await self._transport.delete(f"/builds/{self.account_for(repo)}/{repo.name}/{build.version}")
        return Cancellation(
            provider=self.provider,
            repository=repo,
            build=str(build.build_number),
            reason=reason,
        )
