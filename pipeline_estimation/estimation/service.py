"""
Estimation service: reads jobs and stations from the store, computes estimates
and writes the dates back.

This is the only part of the estimation package that does I/O. The
computation in between is pure.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from pipeline_estimation.config import get_config
from pipeline_estimation.estimation.aggregator import materialize_estimates, resolve_epoch, to_store_fields
from pipeline_estimation.estimation.base import Estimator
from pipeline_estimation.estimation.estimator import estimator_from_config
from pipeline_estimation.estimation.models import EstimationResult, Job, JobEstimate, Workstation
from pipeline_estimation.exceptions import PerRecordWriteError
from pipeline_estimation.logging_config import EstimationContext, get_logger
from pipeline_estimation.store.base import TabularStore
from pipeline_estimation.store.records import JOB_PRIORITY_FIELD, parse_holiday_config, parse_jobs, parse_workstations

logger = get_logger(__name__)


@dataclass
class EstimationInputs:
    """Everything read from the store for one run."""
    workstations: List[Workstation]
    jobs: List[Job]
    holidays: FrozenSet[date]


def load_inputs(store: TabularStore, config=None, reference_date: Optional[date] = None) -> EstimationInputs:
    """
    Fetch and parse workstations, jobs and holidays.

    Jobs are read sorted by "Needs By" through the configured view.
    """
    config = config or get_config()
    if reference_date is None:
        reference_date = date.today()

    workstation_records = store.select_records(config.WORKSTATIONS_TABLE)
    job_records = store.select_records(
        config.JOBS_TABLE,
        sort=[{'field': JOB_PRIORITY_FIELD, 'direction': 'asc'}],
        view=config.JOBS_VIEW
    )
    config_records = store.select_records(config.CONFIGURATION_TABLE)

    inputs = EstimationInputs(
        workstations=parse_workstations(workstation_records),
        jobs=parse_jobs(job_records),
        holidays=parse_holiday_config(config_records, reference_date)
    )
    logger.info(
        "Loaded estimation inputs",
        workstations=len(inputs.workstations),
        jobs=len(inputs.jobs),
        holidays=len(inputs.holidays)
    )
    return inputs


def compute_estimates(
    estimator: Estimator,
    hours_per_day: float,
    inputs: EstimationInputs,
    reference_date: Optional[date] = None
) -> Tuple[EstimationResult, List[JobEstimate]]:
    """
    Run the estimator and resolve its offsets to dates. Pure.

    Raises:
        ConfigurationError: On empty or invalid inputs
        SimulationOverrunError: If the flow-shop run exceeds its day cap
    """
    result = estimator.estimate(hours_per_day, inputs.workstations, inputs.jobs)
    estimates = materialize_estimates(result, reference_date, inputs.holidays)
    return result, estimates


def write_estimate(store: TabularStore, table: str, estimate: JobEstimate) -> Dict[str, Any]:
    """
    Persist one job's estimate.

    Raises:
        PerRecordWriteError: Wrapping whatever the store raised
    """
    try:
        return store.update_record(table, estimate.job_id, to_store_fields(estimate))
    except Exception as e:
        raise PerRecordWriteError(estimate.job_id, e) from e


def write_estimates(
    store: TabularStore,
    table: str,
    estimates: List[JobEstimate],
    workers: int = 1
) -> Dict[str, Any]:
    """
    Persist every estimate. A failed write is logged and recorded, and the
    remaining writes still run; earlier successful writes are not rolled back.

    Args:
        store: Target store
        table: Jobs table name
        estimates: Estimates to write
        workers: Number of concurrent writes (1 = sequential)

    Returns:
        dict: {'updated': count, 'errors': [{'job_id', 'job_name', 'error'}]}
    """
    def attempt(estimate: JobEstimate) -> Optional[Dict[str, Any]]:
        try:
            write_estimate(store, table, estimate)
            return None
        except PerRecordWriteError as e:
            logger.error(
                "Error writing job estimate",
                job_id=estimate.job_id,
                job_name=estimate.job_name,
                error=str(e.cause),
                exc_info=True
            )
            return {'job_id': estimate.job_id, 'job_name': estimate.job_name, 'error': str(e.cause)}

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            outcomes = list(executor.map(attempt, estimates))
    else:
        outcomes = [attempt(estimate) for estimate in estimates]

    errors = [outcome for outcome in outcomes if outcome is not None]
    return {
        'updated': len(estimates) - len(errors),
        'errors': errors
    }


def run_estimation(
    store: TabularStore,
    config=None,
    reference_date: Optional[date] = None,
    estimator: Optional[Estimator] = None
) -> Dict[str, Any]:
    """
    Recalculate and persist estimated dates for all open jobs.

    This function:
    1. Fetches workstations, jobs and holidays from the store
    2. Runs the configured estimation strategy
    3. Resolves day offsets to calendar dates
    4. Writes start date, complete date and working days for every job

    Args:
        store: Source and target of the records
        config: Config class (defaults to get_config())
        reference_date: Epoch for date resolution (defaults to today)
        estimator: Overrides the configured strategy

    Returns:
        dict: Summary with counts and any per-record errors

    Raises:
        ConfigurationError: On missing inputs; nothing is written
        SimulationOverrunError: If the flow-shop run exceeds its day cap; nothing is written
    """
    config = config or get_config()
    estimator = estimator or estimator_from_config(config)
    if reference_date is None:
        reference_date = date.today()

    with EstimationContext(estimator.name):
        inputs = load_inputs(store, config, reference_date)
        result, estimates = compute_estimates(estimator, config.HOURS_PER_DAY, inputs, reference_date)
        outcome = write_estimates(store, config.JOBS_TABLE, estimates, workers=config.WRITE_WORKERS)

    logger.info(
        "Estimation complete",
        strategy=estimator.name,
        total_jobs=len(estimates),
        updated=outcome['updated'],
        errors=len(outcome['errors']),
        total_days=result.total_days
    )

    return {
        'strategy': estimator.name,
        'reference_date': resolve_epoch(reference_date, inputs.holidays).isoformat(),
        'total_jobs': len(estimates),
        'tracked_jobs': sum(1 for e in estimates if e.start_date is not None),
        'total_days': result.total_days,
        'updated': outcome['updated'],
        'errors': outcome['errors']
    }
