"""
Fixed-interval scheduler driving the cycle coordinator forever.
"""

from __future__ import annotations

import asyncio
import contextlib
from enum import Enum

from reaper.core.logging import get_logger
from reaper.models.outcome import CycleOutcome
from reaper.scheduler.coordinator import CycleCoordinator

logger = get_logger(__name__)


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class Scheduler:
    """
    Runs a cycle immediately, then one every ``interval`` seconds measured
    from the start of the previous cycle.

    A cycle that fails, times out or raises never stops the loop; only
    ``stop()`` does.
    """

    def __init__(self, coordinator: CycleCoordinator, interval: float = 60.0):
        self._coordinator = coordinator
        self._interval = interval
        self._stop_event = asyncio.Event()
        self.state = SchedulerState.IDLE
        self.cycles = 0
        self.last_outcome: CycleOutcome | None = None

    @property
    def interval(self) -> float:
        return self._interval

    def stop(self) -> None:
        """Ask the loop to exit at the next opportunity."""
        logger.info("Stopping scheduler")
        self._stop_event.set()

    async def run_once(self) -> CycleOutcome | None:
        """Run one cycle, absorbing anything it raises."""
        self.state = SchedulerState.RUNNING
        try:
            outcome = await self._coordinator.run_cycle()
        except Exception:
            logger.exception("Cycle crashed, continuing with the next one")
            outcome = None
        finally:
            self.state = SchedulerState.IDLE
            self.cycles += 1

        self.last_outcome = outcome
        return outcome

    async def run_forever(self) -> None:
        loop = asyncio.get_running_loop()
        next_start = loop.time()
        logger.info("Scheduler started, interval %ss", self._interval)

        while not self._stop_event.is_set():
            next_start += self._interval
            await self._run_until_stopped()
            if self._stop_event.is_set():
                break

            delay = next_start - loop.time()
            if delay <= 0:
                logger.warning("Cycle overran the %ss interval by %.1fs", self._interval, -delay)
                next_start = loop.time()
                continue

            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(self._stop_event.wait(), timeout=delay)

        logger.info("Scheduler stopped after %d cycles", self.cycles)

    async def _run_until_stopped(self) -> None:
        """Run one cycle, abandoning it if ``stop()`` is called meanwhile."""
        cycle = asyncio.ensure_future(self.run_once())
        stopper = asyncio.ensure_future(self._stop_event.wait())
        try:
            await asyncio.wait({cycle, stopper}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stopper.cancel()
            if not cycle.done():
                cycle.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await cycle
