"""
Preview of estimation changes.

Calculates what the new start/complete dates would be and shows a diff against
the values currently stored, without writing anything.
"""

from datetime import date, datetime
from typing import Any, Dict, Optional

from pipeline_estimation.config import get_config
from pipeline_estimation.estimation.aggregator import resolve_epoch
from pipeline_estimation.estimation.base import Estimator
from pipeline_estimation.estimation.config import EstimationConfig
from pipeline_estimation.estimation.estimator import create_estimator, estimator_from_config
from pipeline_estimation.estimation.flow_shop import format_schedule
from pipeline_estimation.estimation.service import compute_estimates, load_inputs
from pipeline_estimation.logging_config import get_logger
from pipeline_estimation.store.base import TabularStore

logger = get_logger(__name__)


def format_date(d: Optional[date]) -> str:
    """Format a date for display, or 'None' if None."""
    if d is None:
        return 'None'
    return d.isoformat()


def _stored_date(value) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def preview_estimation_changes(
    store: TabularStore,
    config=None,
    reference_date: Optional[date] = None,
    show_all: bool = False,
    estimator: Optional[Estimator] = None
) -> Dict[str, Any]:
    """
    Preview estimation changes without updating the store.

    Args:
        store: Store to read jobs, stations and current values from
        config: Config class (defaults to get_config())
        reference_date: Reference date for calculations (defaults to today)
        show_all: If True, show all jobs. If False, only show jobs with changes.
        estimator: Overrides the configured strategy

    Returns:
        dict: Preview results with jobs list, summary and (flow-shop) daily schedule
    """
    config = config or get_config()
    estimator = estimator or estimator_from_config(config)
    if reference_date is None:
        reference_date = date.today()

    logger.info("Previewing estimation changes", reference_date=reference_date.isoformat(), strategy=estimator.name)

    inputs = load_inputs(store, config, reference_date)
    result, estimates = compute_estimates(estimator, config.HOURS_PER_DAY, inputs, reference_date)

    current = {
        record['id']: record.get('fields', {})
        for record in store.select_records(config.JOBS_TABLE)
    }

    preview_results = []
    jobs_with_changes = 0
    start_changes = 0
    end_changes = 0

    for schedule, estimate in zip(result.schedules, estimates):
        fields = current.get(estimate.job_id, {})
        current_start = _stored_date(fields.get(EstimationConfig.START_DATE_FIELD))
        current_end = _stored_date(fields.get(EstimationConfig.END_DATE_FIELD))

        start_changed = current_start != estimate.start_date
        end_changed = current_end != estimate.end_date
        has_changes = start_changed or end_changed

        if has_changes:
            jobs_with_changes += 1
            if start_changed:
                start_changes += 1
            if end_changed:
                end_changes += 1

        if show_all or has_changes:
            preview_results.append({
                'job_id': estimate.job_id,
                'job_name': estimate.job_name,
                'tracked': schedule.tracked,
                'total_hours': schedule.total_hours,
                'start_offset': schedule.start_offset,
                'end_offset': schedule.end_offset,
                'total_working_days': estimate.total_working_days,
                'current_start_date': current_start,
                'computed_start_date': estimate.start_date,
                'start_date_changed': start_changed,
                'current_end_date': current_end,
                'computed_end_date': estimate.end_date,
                'end_date_changed': end_changed,
            })

    summary = {
        'strategy': estimator.name,
        'total_jobs': len(estimates),
        'jobs_with_changes': jobs_with_changes,
        'jobs_without_changes': len(estimates) - jobs_with_changes,
        'start_date_changes': start_changes,
        'end_date_changes': end_changes,
        'total_days': result.total_days,
        'reference_date': resolve_epoch(reference_date, inputs.holidays).isoformat(),
    }

    return {
        'total_jobs': len(estimates),
        'jobs_with_changes': jobs_with_changes,
        'jobs': preview_results,
        'summary': summary,
        'daily_schedule': format_schedule(result.simulation)['daily_schedule'] if result.simulation else [],
    }


def _date_diff(current: Optional[date], computed: Optional[date]) -> str:
    if current and computed:
        days_diff = (computed - current).days
        return f" ({days_diff:+d} days)" if days_diff != 0 else ""
    return ""


def print_preview(preview_results: Dict[str, Any], detailed: bool = True):
    """
    Print a formatted preview of estimation changes.

    Args:
        preview_results: Results from preview_estimation_changes()
        detailed: If True, show detailed diff for each job. If False, only show summary.
    """
    summary = preview_results.get('summary', {})
    jobs = preview_results.get('jobs', [])

    print("\n" + "=" * 80)
    print("ESTIMATION PREVIEW - Changes Summary")
    print("=" * 80)

    if summary:
        print(f"\nStrategy: {summary.get('strategy', 'N/A')}")
        print(f"Total Jobs: {summary.get('total_jobs', 0)}")
        print(f"Jobs with Changes: {summary.get('jobs_with_changes', 0)}")
        print(f"Jobs without Changes: {summary.get('jobs_without_changes', 0)}")
        print(f"Start Date Changes: {summary.get('start_date_changes', 0)}")
        print(f"Complete Date Changes: {summary.get('end_date_changes', 0)}")
        print(f"Total Days: {summary.get('total_days', 0)}")
        print(f"Reference Date: {summary.get('reference_date', 'N/A')}")

    if not detailed or not jobs:
        print("\n" + "=" * 80)
        return

    print("\n" + "=" * 80)
    print("DETAILED CHANGES")
    print("=" * 80)

    for job_data in jobs:
        print(f"\nJob: {job_data['job_id']} - {job_data.get('job_name', 'N/A')}")
        print(f"  Tracked: {job_data.get('tracked')}")
        print(f"  Total Hrs: {job_data.get('total_hours', 0.0):.2f}")
        print(f"  Working Days: {job_data.get('total_working_days')}")

        current_start = job_data.get('current_start_date')
        computed_start = job_data.get('computed_start_date')
        if job_data.get('start_date_changed'):
            print(f"  ⚠️  Est. Start: {format_date(current_start)} → {format_date(computed_start)}"
                  f"{_date_diff(current_start, computed_start)}")
        else:
            print(f"  ✓  Est. Start: {format_date(current_start)} (no change)")

        current_end = job_data.get('current_end_date')
        computed_end = job_data.get('computed_end_date')
        if job_data.get('end_date_changed'):
            print(f"  ⚠️  Est. Complete: {format_date(current_end)} → {format_date(computed_end)}"
                  f"{_date_diff(current_end, computed_end)}")
        else:
            print(f"  ✓  Est. Complete: {format_date(current_end)} (no change)")

    print("\n" + "=" * 80)


def run_preview_script(
    store: TabularStore,
    reference_date_str: Optional[str] = None,
    show_all: bool = False,
    detailed: bool = True,
    strategy: Optional[str] = None
):
    """
    Run the preview from the command line.

    Args:
        store: Store to read from
        reference_date_str: Optional ISO date string (YYYY-MM-DD)
        show_all: Show all jobs, not just those with changes
        detailed: Show detailed diff for each job
        strategy: Overrides ESTIMATION_STRATEGY
    """
    reference_date = None
    if reference_date_str:
        try:
            reference_date = datetime.fromisoformat(reference_date_str).date()
        except (ValueError, TypeError):
            print(f"Warning: Invalid reference_date '{reference_date_str}', using today")
            reference_date = None

    config = get_config()
    estimator = None
    if strategy:
        estimator = create_estimator(
            strategy,
            tracked_category=config.TRACKED_CATEGORY or None,
            scale_by_quantity=config.SCALE_BY_QUANTITY
        )

    try:
        preview_results = preview_estimation_changes(
            store,
            config=config,
            reference_date=reference_date,
            show_all=show_all,
            estimator=estimator
        )

        print_preview(preview_results, detailed=detailed)

        return preview_results

    except Exception as e:
        logger.error("Error in preview script", error=str(e), exc_info=True)
        print(f"\nError: {e}")
        raise
