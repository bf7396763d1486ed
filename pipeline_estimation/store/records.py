"""
Boundary parsing from raw table records to core estimation types.

Linked and lookup fields arrive wrapped (a single-element list, or a dict with
a "value" or "name" key). Everything here unwraps those shapes and turns absent
or malformed values into zero/empty defaults, so the estimators never see the
table schema.
"""
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from pipeline_estimation.estimation.calendar import parse_holidays
from pipeline_estimation.estimation.config import EstimationConfig
from pipeline_estimation.estimation.models import Job, Workstation
from pipeline_estimation.logging_config import get_logger

logger = get_logger(__name__)

# Workstations table
WORKSTATION_NAME_FIELD = 'Workstation Name'
WORKSTATION_HOURS_FIELD = 'Time per Cabinet'
WORKSTATION_SETUP_FIELD = 'Setup Time'

# Jobs table
JOB_NAME_FIELD = 'Job Name'
JOB_CATEGORY_FIELD = 'Cabinet Line'
JOB_STATUS_FIELD = 'MO Status'
JOB_MANUAL_HOURS_FIELD = 'MO Time'
JOB_QUANTITY_FIELD = 'Unit Count'
JOB_PRIORITY_FIELD = 'Needs By'
JOB_INSTALL_STATUS_FIELD = 'Install Status'

# Configuration table
CONFIG_NAME_FIELD = 'Name'
CONFIG_VALUE_FIELD = 'Value'


def unwrap(value: Any) -> Any:
    """
    Reduce a wrapped field value to its scalar.

    [x] -> x, {"value": x} -> x, {"name": x} -> x. Empty lists become None.
    """
    while True:
        if isinstance(value, (list, tuple)):
            if not value:
                return None
            value = value[0]
        elif isinstance(value, dict):
            if 'value' in value:
                value = value['value']
            elif 'name' in value:
                value = value['name']
            else:
                return None
        else:
            return value


def safe_float(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Convert a field value to float, returning default for None or garbage."""
    value = unwrap(value)
    if value is None or value == '':
        return default
    try:
        return float(value)
    except (ValueError, TypeError):
        return default


def safe_str(value: Any) -> Optional[str]:
    """Unwrap and strip a text field. Blank becomes None."""
    value = unwrap(value)
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned if cleaned else None


def parse_priority(value: Any) -> Optional[float]:
    """
    Parse the job sort key.

    Numbers are used as-is. Dates ("Needs By") sort by their ordinal, so an
    earlier due date means a higher priority.
    """
    value = unwrap(value)
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return float(value.date().toordinal())
    if isinstance(value, date):
        return float(value.toordinal())
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    try:
        return float(value)
    except (ValueError, TypeError):
        pass
    try:
        return float(date.fromisoformat(str(value)[:10]).toordinal())
    except (ValueError, TypeError):
        logger.warning("Unparseable priority value, sorting last", value=str(value))
        return None


def parse_workstation(record: Dict[str, Any]) -> Workstation:
    """Build a Workstation from a raw record."""
    fields = record.get('fields', {})
    return Workstation(
        id=record['id'],
        name=safe_str(fields.get(WORKSTATION_NAME_FIELD)) or record['id'],
        hours_required=max(0.0, safe_float(fields.get(WORKSTATION_HOURS_FIELD))),
        setup_time=max(0.0, safe_float(fields.get(WORKSTATION_SETUP_FIELD))),
    )


def parse_workstations(records: Iterable[Dict[str, Any]]) -> List[Workstation]:
    """Build Workstations in the order the store returned them."""
    return [parse_workstation(r) for r in records]


def is_complete(fields: Dict[str, Any]) -> bool:
    """True when install or manufacturing status marks the job as done."""
    install_status = safe_str(fields.get(JOB_INSTALL_STATUS_FIELD))
    status = safe_str(fields.get(JOB_STATUS_FIELD))
    return EstimationConfig.COMPLETE_STATUS in (install_status, status)


def parse_job(record: Dict[str, Any]) -> Optional[Job]:
    """
    Build a Job from a raw record.

    Returns:
        Job, or None when the job is already complete and must not be scheduled
    """
    fields = record.get('fields', {})
    if is_complete(fields):
        return None

    return Job(
        id=record['id'],
        name=safe_str(fields.get(JOB_NAME_FIELD)) or record['id'],
        category=safe_str(fields.get(JOB_CATEGORY_FIELD)),
        status=safe_str(fields.get(JOB_STATUS_FIELD)),
        manual_override_hours=safe_float(fields.get(JOB_MANUAL_HOURS_FIELD), default=None),
        quantity=max(0.0, safe_float(fields.get(JOB_QUANTITY_FIELD))),
        priority=parse_priority(fields.get(JOB_PRIORITY_FIELD)),
    )


def parse_jobs(records: Iterable[Dict[str, Any]]) -> List[Job]:
    """Build Jobs, dropping completed ones."""
    jobs = []
    skipped = 0
    for record in records:
        job = parse_job(record)
        if job is None:
            skipped += 1
            continue
        jobs.append(job)
    if skipped:
        logger.info("Skipped completed jobs", count=skipped)
    return jobs


def find_config_value(records: Iterable[Dict[str, Any]], name: str) -> Optional[str]:
    """Return the Value of the configuration row with the given Name."""
    for record in records:
        fields = record.get('fields', {})
        if safe_str(fields.get(CONFIG_NAME_FIELD)) == name:
            return safe_str(fields.get(CONFIG_VALUE_FIELD))
    return None


def parse_holiday_config(records: Iterable[Dict[str, Any]], epoch: date) -> frozenset:
    """
    Read the holiday list from the configuration table.

    Recurring MM/DD entries are expanded for the epoch year and the two
    following years, enough to cover the longest schedule.
    """
    raw = find_config_value(records, EstimationConfig.HOLIDAYS_CONFIG_NAME)
    return parse_holidays(raw, range(epoch.year, epoch.year + 3))
