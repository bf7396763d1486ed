"""
Error types raised by the estimation pipeline.
"""
from typing import Optional


class EstimationError(Exception):
    """Base class for estimation failures."""


class ConfigurationError(EstimationError):
    """Inputs are missing or invalid; raised before any computation starts."""


class SimulationOverrunError(EstimationError):
    """The simulation did not finish every job within the day cap."""

    def __init__(self, max_days: int, completed: int, total: int):
        self.max_days = max_days
        self.completed = completed
        self.total = total
        super().__init__(
            f"Simulation exceeded {max_days} days with {completed}/{total} jobs completed "
            f"(insufficient capacity or stalled pipeline)"
        )


class PerRecordWriteError(EstimationError):
    """Persisting the estimate for a single job failed."""

    def __init__(self, record_id: str, cause: Optional[BaseException] = None):
        self.record_id = record_id
        self.cause = cause
        message = f"Failed to write estimate for record {record_id}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
