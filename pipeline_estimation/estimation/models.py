"""
Core data types for estimation.

Contains no datastore dependencies - the record parsing layer builds these
from raw table records before they reach the estimators.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from pipeline_estimation.estimation.config import EstimationConfig


@dataclass(frozen=True)
class Workstation:
    """
    A fixed-capacity processing station in the pipeline.

    Attributes:
        id: Unique record identifier
        name: Display name
        hours_required: Hours consumed per unit passed through this station
        setup_time: Fixed one-time hours per job
    """
    id: str
    name: str
    hours_required: float = 0.0
    setup_time: float = 0.0


@dataclass(frozen=True)
class Job:
    """
    A unit of manufacturing work to schedule.

    Attributes:
        id: Unique record identifier
        name: Job name
        category: Product line; only the tracked category consumes hours
        status: Manufacturing status ("Not Started", "In Progress", ...)
        manual_override_hours: Hours entered by hand once work has begun
        quantity: Units to build
        priority: Sort key, ascending; None sorts last
    """
    id: str
    name: str
    category: Optional[str] = None
    status: Optional[str] = None
    manual_override_hours: Optional[float] = None
    quantity: float = 0
    priority: Optional[float] = None

    @property
    def sort_priority(self) -> float:
        if self.priority is None:
            return EstimationConfig.DEFAULT_PRIORITY
        return self.priority

    def is_tracked(self, tracked_category: Optional[str]) -> bool:
        """A job is tracked when no category filter is set or its category matches."""
        if tracked_category is None:
            return True
        return self.category == tracked_category

    def uses_manual_hours(self) -> bool:
        """True when work has begun and an override value is present."""
        return (
            not EstimationConfig.is_not_started(self.status)
            and self.manual_override_hours is not None
            and self.manual_override_hours > 0
        )


@dataclass
class JobRuntimeState:
    """Progress of one job through the pipeline during a simulation run."""
    job: Job
    current_station_index: int = 0
    completed: bool = False
    start_day: Optional[int] = None
    end_day: Optional[int] = None
    last_hop_day: Optional[int] = None
    awaiting_hop: bool = False


@dataclass
class StationRuntimeState:
    """The job a station is working on and the hours left for it."""
    station: Workstation
    current_job: Optional[JobRuntimeState] = None
    remaining_hours: float = 0.0

    @property
    def is_idle(self) -> bool:
        return self.current_job is None


@dataclass
class StationActivity:
    """One block of work (or idle time) at a station on a given day."""
    hours: float
    job_id: Optional[str] = None
    job_name: Optional[str] = None
    idle: bool = False


@dataclass
class StationDayRecord:
    """Everything a station did on one simulated day."""
    station_id: str
    station_name: str
    activity: List[StationActivity] = field(default_factory=list)
    current_job_id: Optional[str] = None
    current_job_name: Optional[str] = None

    @property
    def hours_worked(self) -> float:
        return sum(a.hours for a in self.activity if not a.idle)


@dataclass
class SimulationDayRecord:
    """Diagnostic record for one simulated day."""
    day: int
    stations: List[StationDayRecord] = field(default_factory=list)
    jobs_started: List[str] = field(default_factory=list)
    jobs_completed: List[str] = field(default_factory=list)


@dataclass
class SimulationResult:
    """Output of a flow-shop simulation."""
    schedule: List[SimulationDayRecord]
    completed_jobs: List[JobRuntimeState]
    total_days: int


@dataclass
class JobSchedule:
    """
    Strategy-neutral schedule for one job.

    Offsets count business days from the epoch, starting at 0. The end
    offset is the last business day the job is worked on.
    """
    job_id: str
    job_name: str
    tracked: bool
    total_hours: float
    start_offset: int
    end_offset: int
    working_days: int


@dataclass
class EstimationResult:
    """Day-offset schedule produced by an estimation strategy."""
    strategy: str
    hours_per_day: float
    schedules: List[JobSchedule]
    total_days: int
    simulation: Optional[SimulationResult] = None


@dataclass
class JobEstimate:
    """Calendar dates for one job, ready for persistence."""
    job_id: str
    job_name: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_working_days: Optional[int] = None
    skipped_days: int = 0
