"""
# Error Types
"""

from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from .driver.results import JobFailure


class PreconditionError(ValueError):
    """Invalid argument or configuration, detected before any simulation is dispatched."""


class SimError(RuntimeError):
    """A single simulation job failed."""


class DataIntegrityError(RuntimeError):
    """Simulation results which should agree across jobs do not."""


class CharacterizationError(RuntimeError):
    """A characterization run failed, on account of one or more failed jobs."""

    def __init__(self, failures: List["JobFailure"]):
        self.failures = failures
        names = ", ".join(f.name for f in failures)
        super().__init__(f"{len(failures)} driver sim(s) failed: {names}")
