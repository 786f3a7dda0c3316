# Scheduler module - cycle fan-out and the polling loop
from .coordinator import CycleCoordinator
from .loop import Scheduler, SchedulerState

__all__ = ["CycleCoordinator", "Scheduler", "SchedulerState"]
