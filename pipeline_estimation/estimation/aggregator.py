"""
Turns day-offset schedules into calendar dates.

Every date is resolved from the same epoch through the business-day calendar,
so weekend and holiday days skipped before one job are counted for every job
after it.
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from pipeline_estimation.estimation.calendar import normalize_dates, offset, roll_forward
from pipeline_estimation.estimation.config import EstimationConfig
from pipeline_estimation.estimation.models import EstimationResult, JobEstimate


def resolve_epoch(epoch: Optional[date] = None, holidays: Optional[Iterable] = None) -> date:
    """
    Pick the business day work is counted from.

    Defaults to today; a weekend or holiday epoch rolls forward to the next
    business day.
    """
    if epoch is None:
        epoch = date.today()
    return roll_forward(epoch, holidays)


def materialize_estimates(
    result: EstimationResult,
    epoch: Optional[date] = None,
    holidays: Optional[Iterable] = None
) -> List[JobEstimate]:
    """
    Resolve every job's offsets to calendar dates.

    Args:
        result: Output of an estimation strategy
        epoch: Reference date (defaults to today)
        holidays: Holiday dates to skip

    Returns:
        One JobEstimate per schedule, same order. Untracked jobs get None
        dates and duration so stale values are cleared downstream.
    """
    excluded = normalize_dates(holidays)
    start_epoch = resolve_epoch(epoch, excluded)

    estimates = []
    for schedule in result.schedules:
        if not schedule.tracked:
            estimates.append(JobEstimate(job_id=schedule.job_id, job_name=schedule.job_name))
            continue

        start = offset(start_epoch, schedule.start_offset, excluded)
        end = offset(start_epoch, schedule.end_offset, excluded)

        estimates.append(JobEstimate(
            job_id=schedule.job_id,
            job_name=schedule.job_name,
            start_date=start.date,
            end_date=end.date,
            total_working_days=schedule.working_days,
            skipped_days=end.skipped_count
        ))

    return estimates


def to_store_fields(estimate: JobEstimate) -> Dict[str, Any]:
    """Map an estimate onto the job table's field names."""
    return {
        EstimationConfig.START_DATE_FIELD: estimate.start_date.isoformat() if estimate.start_date else None,
        EstimationConfig.END_DATE_FIELD: estimate.end_date.isoformat() if estimate.end_date else None,
        EstimationConfig.WORKING_DAYS_FIELD: estimate.total_working_days,
    }
