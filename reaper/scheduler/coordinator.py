"""
One reaping cycle: every prober against every repository, under one deadline.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from reaper.core.exceptions import ProbeError
from reaper.core.logging import get_logger
from reaper.models.outcome import CycleOutcome, ProbeResult
from reaper.models.repository import Repository
from reaper.services.base import Prober

logger = get_logger(__name__)

BANNER = "-" * 56

# Seconds abandoned probes get to unwind after being cancelled
CANCEL_GRACE = 1.0


class CycleCoordinator:
    """Fans a cycle out over (prober, repository) pairs and joins the results.

    Pairs still running when the deadline passes are cancelled, which aborts
    their in-flight HTTP requests, and reported as abandoned.
    """

    def __init__(self, probers: list[Prober], repositories: list[Repository], deadline: float = 30.0):
        self._probers = list(probers)
        self._repositories = list(repositories)
        self._deadline = deadline

    @property
    def deadline(self) -> float:
        return self._deadline

    async def run_cycle(self) -> CycleOutcome:
        outcome = CycleOutcome(started_at=datetime.now(timezone.utc))
        logger.info("%s", BANNER)
        logger.info("%s - starting check", outcome.started_at.strftime("%a, %d %b %Y %H:%M:%S %z"))

        tasks: dict[asyncio.Task, tuple[str, Repository]] = {}
        for prober in self._probers:
            for repo in self._repositories:
                task = asyncio.create_task(
                    prober.probe(repo),
                    name=f"{prober.provider}:{repo.slug}",
                )
                tasks[task] = (prober.provider, repo)

        if not tasks:
            done, pending = set(), set()
        else:
            try:
                done, pending = await asyncio.wait(list(tasks), timeout=self._deadline)
            except asyncio.CancelledError:
                for task in tasks:
                    task.cancel()
                raise

        for task in tasks:
            if task not in done:
                continue
            provider, repo = tasks[task]
            outcome.results.append(self._collect(task, provider, repo))

        if pending:
            for task in pending:
                task.cancel()
            # Give cancelled requests a moment to release their connections
            _, stuck = await asyncio.wait(pending, timeout=CANCEL_GRACE)
            if stuck:
                logger.debug("%d abandoned checks still unwinding", len(stuck))
            outcome.abandoned = [tasks[task] for task in tasks if task in pending]
            logger.warning(
                "timeout after %ss, cancelled requests for %s",
                self._deadline,
                ", ".join(f"{provider} {repo}" for provider, repo in outcome.abandoned),
            )

        outcome.finished_at = datetime.now(timezone.utc)
        logger.info(
            "cycle %s: %d checks finished, %d failed, %d abandoned, %d builds cancelled",
            outcome.status,
            len(outcome.results),
            len(outcome.failures),
            len(outcome.abandoned),
            len(outcome.cancellations),
        )
        return outcome

    @staticmethod
    def _collect(task: asyncio.Task, provider: str, repo: Repository) -> ProbeResult:
        error = task.exception()
        if error is None:
            cancellations = task.result()
            logger.info("%s result for %s: ok, %d cancelled", provider, repo, len(cancellations))
            return ProbeResult(provider=provider, repository=repo, cancellations=list(cancellations))

        if not isinstance(error, Exception):
            # only ordinary exceptions count as a failed check
            raise error

        errors, cancellations = [error], []
        if isinstance(error, ProbeError):
            errors, cancellations = error.errors, error.cancellations
            logger.info("%s result for %s: %d cancelled before failing", provider, repo, len(cancellations))
        for err in errors:
            logger.error("%s result for %s: %s: %s", provider, repo, type(err).__name__, err)
        return ProbeResult(provider=provider, repository=repo, cancellations=list(cancellations), error=error)
