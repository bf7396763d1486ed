"""Abstract base class and shared input checks for estimation strategies."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from pipeline_estimation.estimation.models import EstimationResult, Job, Workstation
from pipeline_estimation.exceptions import ConfigurationError


def validate_inputs(
    hours_per_day: float,
    workstations: Optional[Sequence[Workstation]],
    jobs: Optional[Sequence[Job]]
) -> None:
    """
    Fail fast on inputs no strategy can work with.

    Raises:
        ConfigurationError: listing every problem found
    """
    problems = []
    if hours_per_day is None or hours_per_day <= 0:
        problems.append(f"hours_per_day must be positive (got {hours_per_day})")
    if not workstations:
        problems.append("workstations list is missing or empty")
    else:
        for ws in workstations:
            if ws.hours_required < 0 or ws.setup_time < 0:
                problems.append(f"workstation {ws.id} has negative hours")
    if not jobs:
        problems.append("jobs list is missing or empty")

    if problems:
        raise ConfigurationError("Invalid estimation input: " + "; ".join(problems))


def order_jobs(jobs: Sequence[Job]) -> List[Job]:
    """Sort jobs by priority, lowest first. Ties keep their input order."""
    return sorted(jobs, key=lambda j: j.sort_priority)


class Estimator(ABC):
    """
    Abstract base class for estimation strategies.
    Every strategy turns the same inputs into a day-offset schedule.
    """

    name: str = ''

    def __init__(self, tracked_category: Optional[str] = None):
        self.tracked_category = tracked_category

    @abstractmethod
    def estimate(
        self,
        hours_per_day: float,
        workstations: Sequence[Workstation],
        jobs: Sequence[Job]
    ) -> EstimationResult:
        """
        Compute the day-offset schedule for the given jobs.

        Args:
            hours_per_day: Working hours available per station per day
            workstations: Stations in pipeline order
            jobs: Jobs to schedule (sorted by priority before use)

        Returns:
            EstimationResult with one JobSchedule per job, in priority order
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(tracked_category={self.tracked_category!r})"
