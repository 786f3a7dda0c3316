# Models module - provider payloads and cycle results
from .repository import Repository
from .outcome import Cancellation, CycleOutcome, ProbeResult

__all__ = ["Repository", "Cancellation", "CycleOutcome", "ProbeResult"]
