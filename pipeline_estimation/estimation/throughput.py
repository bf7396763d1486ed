"""
Aggregate throughput estimation.

Treats the pipeline as one pool of hours (hours_per_day x station count) and
lays jobs end to end in priority order. Leftover hours from one job carry into
the next instead of rounding every job up to a whole day.
"""

import math
from typing import Optional, Sequence

from pipeline_estimation.estimation.base import Estimator, order_jobs, validate_inputs
from pipeline_estimation.estimation.models import EstimationResult, Job, JobSchedule, Workstation
from pipeline_estimation.logging_config import get_logger

logger = get_logger(__name__)


def calculate_job_hours(
    job: Job,
    workstations: Sequence[Workstation],
    tracked_category: Optional[str] = None
) -> float:
    """
    Calculate total hours a job needs across the whole pipeline.

    Formula:
    - manual override hours, if work has begun and an override is entered
    - quantity x sum(hours_required) + sum(setup_time), for tracked jobs
    - 0 otherwise

    Args:
        job: The job
        workstations: All stations in the pipeline
        tracked_category: Category that consumes hours (None tracks every job)

    Returns:
        float: Total hours (never negative)
    """
    if job.uses_manual_hours():
        return float(job.manual_override_hours)

    if not job.is_tracked(tracked_category):
        return 0.0

    hours_per_unit = sum(ws.hours_required or 0 for ws in workstations)
    total_setup = sum(ws.setup_time or 0 for ws in workstations)

    return max(0.0, (job.quantity or 0) * hours_per_unit + total_setup)


class ThroughputEstimator(Estimator):
    """
    Estimation strategy using combined pipeline capacity.

    A job starts on the current day offset and lasts
    ceil(job_hours / combined_capacity) days. After each job the day offset
    advances by the whole days consumed and the hours accumulator keeps the
    remainder.
    """

    name = 'throughput'

    def estimate(
        self,
        hours_per_day: float,
        workstations: Sequence[Workstation],
        jobs: Sequence[Job]
    ) -> EstimationResult:
        validate_inputs(hours_per_day, workstations, jobs)

        capacity = hours_per_day * len(workstations)
        day_offset = 0
        running_hours = 0.0
        schedules = []

        for job in order_jobs(jobs):
            job_hours = calculate_job_hours(job, workstations, self.tracked_category)
            working_days = math.ceil(job_hours / capacity) if job_hours > 0 else 0

            schedules.append(JobSchedule(
                job_id=job.id,
                job_name=job.name,
                tracked=job.is_tracked(self.tracked_category),
                total_hours=job_hours,
                start_offset=day_offset,
                end_offset=day_offset + max(working_days, 1) - 1,
                working_days=working_days
            ))

            running_hours += job_hours
            day_offset += int(running_hours // capacity)
            running_hours = running_hours % capacity

        total_days = max((s.end_offset + 1 for s in schedules if s.working_days > 0), default=0)
        logger.info(
            "Throughput estimate computed",
            jobs=len(schedules),
            combined_capacity=capacity,
            total_days=total_days
        )
        return EstimationResult(
            strategy=self.name,
            hours_per_day=hours_per_day,
            schedules=schedules,
            total_days=total_days
        )
