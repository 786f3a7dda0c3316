"""
Travis CI prober: cancels superseded and doomed builds on the tracked branch.
"""

from __future__ import annotations

from reaper.core.logging import get_logger
from reaper.models.outcome import Cancellation
from reaper.models.repository import Repository
from reaper.models.travis import TravisBuild, TravisBuildDetail, TravisBuildList
from reaper.services.base import flatten, gather_all
from reaper.services.transport import ProviderTransport

logger = get_logger(__name__)


def select_branch_builds(build_list: TravisBuildList, branch: str) -> list[TravisBuild]:
    """Builds whose commit is known and on ``branch``; unknown commits are dropped."""
    commits = build_list.commits_by_id()
    selected = []
    for build in build_list.builds:
        commit = commits.get(build.commit_id)
        if commit is None or commit.branch != branch:
            continue
        selected.append(build)
    return selected


def plan_cancellations(
    build_list: TravisBuildList,
    branch: str,
) -> tuple[list[TravisBuild], list[TravisBuild]]:
    """
    Split the running branch builds into the ones to cancel outright and the
    latest one, which is only cancelled if a job has already failed.

    Returns:
        Tuple of (superseded, latest)
    """
    builds = select_branch_builds(build_list, branch)
    max_number = max((b.number for b in builds), default=None)

    superseded: list[TravisBuild] = []
    latest: list[TravisBuild] = []
    for build in builds:
        if not build.state.is_running:
            continue
        if build.number == max_number:
            latest.append(build)
        else:
            superseded.append(build)
    return superseded, latest


class TravisProber:
    """Applies the Travis cancellation policy to one repository at a time."""

    provider = "travis"

    def __init__(self, transport: ProviderTransport, branch: str):
        self._transport = transport
        self._branch = branch

    async def probe(self, repo: Repository) -> list[Cancellation]:
        payload = await self._transport.get_json(f"/repos/{repo.owner}/{repo.name}/builds")
        build_list = TravisBuildList.from_payload(payload)

        superseded, latest = plan_cancellations(build_list, self._branch)

        pending = []
        for build in superseded:
            logger.info(
                "travis cancelling %s in %s (%s) as it's not the latest",
                build.number,
                repo,
                build.state.value,
            )
            pending.append(self._cancel(repo, build, "superseded by a newer build"))
        for build in latest:
            pending.append(self._cancel_if_jobs_failed(repo, build))

        return flatten(await gather_all(pending))

    async def _cancel_if_jobs_failed(self, repo: Repository, build: TravisBuild) -> Cancellation | None:
        payload = await self._transport.get_json(f"/builds/{build.id}")
        detail = TravisBuildDetail.from_payload(payload)

        failed = detail.failed_jobs
        if not failed:
            return None

        logger.info(
            "travis cancelling top build %s in %s as job %s is %s",
            detail.build.number,
            repo,
            failed[0].id,
            failed[0].state.value,
        )
        return await self._cancel(repo, detail.build, f"job {failed[0].state.value}")

    async def _cancel(self, repo: Repository, build: TravisBuild, reason: str) -> Cancellation:
        await self._transport.post(f"/builds/{build.id}/cancel")
        return Cancellation(
            provider=self.provider,
            repository=repo,
            build=str(build.number),
            reason=reason,
        )
