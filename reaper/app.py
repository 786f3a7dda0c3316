"""
Application wiring and main entry point.
"""

import asyncio
import signal

import httpx

from reaper.core.config import Settings
from reaper.core.logging import get_logger
from reaper.models.outcome import CycleOutcome
from reaper.scheduler.coordinator import CycleCoordinator
from reaper.scheduler.loop import Scheduler
from reaper.services.appveyor import AppVeyorProber
from reaper.services.transport import appveyor_transport, travis_transport
from reaper.services.travis import TravisProber

logger = get_logger(__name__)


def build_coordinator(settings: Settings, client: httpx.AsyncClient) -> CycleCoordinator:
    """Create both probers on the shared client and the coordinator over them."""
    travis = TravisProber(
        travis_transport(client, settings.travis_token, settings.travis_api_url),
        settings.tracked_branch,
    )
    appveyor = AppVeyorProber(
        appveyor_transport(client, settings.appveyor_token, settings.appveyor_api_url),
        settings.tracked_branch,
        account=settings.appveyor_account,
    )
    return CycleCoordinator(
        [travis, appveyor],
        settings.repositories,
        deadline=settings.cycle_deadline,
    )


def _install_signal_handlers(scheduler: Scheduler) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, scheduler.stop)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no signal handler support
            pass


async def main(settings: Settings, once: bool = False) -> CycleOutcome | None:
    """Main application entry point."""
    logger.info(
        "Reaping %d repositories on branch %s",
        len(settings.repositories),
        settings.tracked_branch,
    )

    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        coordinator = build_coordinator(settings, client)

        if once:
            return await coordinator.run_cycle()

        scheduler = Scheduler(coordinator, interval=settings.poll_interval)
        _install_signal_handlers(scheduler)
        await scheduler.run_forever()
        return scheduler.last_outcome
