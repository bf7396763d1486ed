"""
Flow-shop simulation.

Moves priority-ordered jobs through an ordered list of stations one day at a
time. Each station has hours_per_day of capacity per day and works on one job
at a time; the first station admits new jobs in strict priority order.

Job lifecycle: NOT_STARTED -> IN_PROGRESS(station 0..n-1) -> COMPLETED.
A job hops at most one station per day. A job that clears a second station on
the day it already hopped waits at that station until the next day starts.
"""

from typing import Any, Dict, List, Optional, Sequence

from pipeline_estimation.estimation.base import Estimator, order_jobs, validate_inputs
from pipeline_estimation.estimation.config import EstimationConfig
from pipeline_estimation.estimation.models import (
    EstimationResult,
    Job,
    JobRuntimeState,
    JobSchedule,
    SimulationDayRecord,
    SimulationResult,
    StationActivity,
    StationDayRecord,
    StationRuntimeState,
    Workstation,
)
from pipeline_estimation.exceptions import SimulationOverrunError
from pipeline_estimation.logging_config import get_logger

logger = get_logger(__name__)

# Float tolerance for hour bookkeeping
EPSILON = 1e-9


class FlowShopSimulator:
    """
    Day-granularity flow-shop engine.

    Attributes:
        scale_by_quantity: Charge quantity x hours_required + setup_time at each
            station instead of the station's flat hours_required
        max_days: Day cap; exceeding it raises SimulationOverrunError
    """

    def __init__(
        self,
        scale_by_quantity: bool = False,
        max_days: int = EstimationConfig.MAX_SIMULATION_DAYS
    ):
        self.scale_by_quantity = scale_by_quantity
        self.max_days = max_days

    def station_hours(self, job: Job, station: Workstation) -> float:
        """Hours a job needs at one station."""
        if self.scale_by_quantity:
            return max(0.0, (job.quantity or 0) * station.hours_required + station.setup_time)
        return station.hours_required

    def simulate(
        self,
        hours_per_day: float,
        stations: Sequence[Workstation],
        jobs: Sequence[Job]
    ) -> SimulationResult:
        """
        Run the simulation until every job is complete.

        Args:
            hours_per_day: Capacity of each station per day
            stations: Stations in pipeline order
            jobs: Jobs to schedule; sorted by priority once before the run

        Returns:
            SimulationResult with the day-by-day log and completed jobs

        Raises:
            ConfigurationError: On empty or invalid inputs
            SimulationOverrunError: If the day cap is exceeded
        """
        validate_inputs(hours_per_day, stations, jobs)
        run = _SimulationRun(self, hours_per_day, list(stations), order_jobs(jobs))
        return run.execute()

    def __repr__(self) -> str:
        return f"FlowShopSimulator(scale_by_quantity={self.scale_by_quantity}, max_days={self.max_days})"


class _SimulationRun:
    """All mutable state for one simulate() call."""

    def __init__(
        self,
        simulator: FlowShopSimulator,
        hours_per_day: float,
        stations: List[Workstation],
        jobs: List[Job]
    ):
        self.simulator = simulator
        self.hours_per_day = float(hours_per_day)
        self.stations = [StationRuntimeState(station=s) for s in stations]
        self.jobs = [JobRuntimeState(job=j) for j in jobs]
        self.in_progress: List[JobRuntimeState] = []
        self.completed: List[JobRuntimeState] = []
        self.next_to_start = 0
        self.schedule: List[SimulationDayRecord] = []

    def execute(self) -> SimulationResult:
        day = 1
        while len(self.completed) < len(self.jobs):
            if day > self.simulator.max_days:
                logger.error(
                    "Flow-shop simulation overran day cap",
                    max_days=self.simulator.max_days,
                    completed=len(self.completed),
                    total=len(self.jobs)
                )
                raise SimulationOverrunError(self.simulator.max_days, len(self.completed), len(self.jobs))
            self.schedule.append(self._simulate_day(day))
            day += 1

        logger.debug("Flow-shop simulation finished", total_days=len(self.schedule), jobs=len(self.jobs))
        return SimulationResult(
            schedule=self.schedule,
            completed_jobs=list(self.completed),
            total_days=len(self.schedule)
        )

    def _simulate_day(self, day: int) -> SimulationDayRecord:
        record = SimulationDayRecord(day=day)
        self._release_waiting_hops(day)

        for index, station in enumerate(self.stations):
            record.stations.append(self._work_station(day, index, station, record))

        return record

    def _release_waiting_hops(self, day: int) -> None:
        for job in self.in_progress:
            if job.awaiting_hop:
                job.current_station_index += 1
                job.last_hop_day = day
                job.awaiting_hop = False

    def _next_ready_job(self, index: int) -> Optional[JobRuntimeState]:
        # in_progress keeps admission order, so this is FIFO by priority
        for job in self.in_progress:
            if not job.completed and not job.awaiting_hop and job.current_station_index == index:
                return job
        return None

    def _admit_next_job(self, day: int, station: StationRuntimeState, record: SimulationDayRecord) -> None:
        job = self.jobs[self.next_to_start]
        self.next_to_start += 1
        job.current_station_index = 0
        job.start_day = day
        self.in_progress.append(job)
        record.jobs_started.append(job.job.id)
        self._assign(station, job)

    def _assign(self, station: StationRuntimeState, job: JobRuntimeState) -> None:
        station.current_job = job
        station.remaining_hours = self.simulator.station_hours(job.job, station.station)

    def _work_station(
        self,
        day: int,
        index: int,
        station: StationRuntimeState,
        record: SimulationDayRecord
    ) -> StationDayRecord:
        hours_worked = 0.0
        activity: List[StationActivity] = []

        while self.hours_per_day - hours_worked > EPSILON:
            if station.is_idle:
                ready = self._next_ready_job(index)
                if ready is not None:
                    self._assign(station, ready)
                elif index == 0 and self.next_to_start < len(self.jobs):
                    self._admit_next_job(day, station, record)

            if station.is_idle:
                break

            hours_to_work = min(self.hours_per_day - hours_worked, station.remaining_hours)
            activity.append(StationActivity(
                hours=hours_to_work,
                job_id=station.current_job.job.id,
                job_name=station.current_job.job.name
            ))
            station.remaining_hours -= hours_to_work
            hours_worked += hours_to_work

            if station.remaining_hours <= EPSILON:
                self._finish_station(day, index, station, record)

        idle_hours = self.hours_per_day - hours_worked
        if idle_hours > EPSILON:
            activity.append(StationActivity(hours=idle_hours, idle=True))

        current = station.current_job
        return StationDayRecord(
            station_id=station.station.id,
            station_name=station.station.name,
            activity=activity,
            current_job_id=current.job.id if current else None,
            current_job_name=current.job.name if current else None
        )

    def _finish_station(
        self,
        day: int,
        index: int,
        station: StationRuntimeState,
        record: SimulationDayRecord
    ) -> None:
        job = station.current_job
        station.current_job = None
        station.remaining_hours = 0.0

        if index == len(self.stations) - 1:
            job.completed = True
            job.end_day = day
            self.completed.append(job)
            self.in_progress.remove(job)
            record.jobs_completed.append(job.job.id)
        elif job.last_hop_day == day:
            job.awaiting_hop = True
        else:
            job.current_station_index = index + 1
            job.last_hop_day = day


def format_schedule(result: SimulationResult, max_days: int = EstimationConfig.FORMATTED_SCHEDULE_DAYS) -> Dict[str, Any]:
    """
    Shape a simulation result for the datastore and for diagnostics.

    Args:
        result: Output of FlowShopSimulator.simulate()
        max_days: Number of leading days of activity to include

    Returns:
        dict with totals, per-job completions and the first max_days of activity
    """
    names = {state.job.id: state.job.name for state in result.completed_jobs}

    return {
        'total_days': result.total_days,
        'total_jobs': len(result.completed_jobs),
        'job_completions': [
            {
                'job_id': state.job.id,
                'job_name': state.job.name,
                'start_day': state.start_day,
                'end_day': state.end_day,
                'total_days': state.end_day - state.start_day + 1,
            }
            for state in result.completed_jobs
        ],
        'daily_schedule': [
            {
                'day': day.day,
                'jobs_started': [names.get(job_id, job_id) for job_id in day.jobs_started],
                'jobs_completed': [names.get(job_id, job_id) for job_id in day.jobs_completed],
                'station_activities': [
                    {
                        'station_name': station.station_name,
                        'current_job': station.current_job_name,
                        'hours_worked': station.hours_worked,
                        'is_idle': station.current_job_name is None,
                    }
                    for station in day.stations
                ],
            }
            for day in result.schedule[:max_days]
        ],
    }


class FlowShopEstimator(Estimator):
    """
    Estimation strategy backed by the flow-shop simulator.

    Only tracked jobs enter the simulation. Untracked jobs need no hours,
    so they get a zero-length schedule without occupying any station.
    """

    name = 'flow_shop'

    def __init__(
        self,
        tracked_category: Optional[str] = None,
        scale_by_quantity: bool = False,
        max_days: int = EstimationConfig.MAX_SIMULATION_DAYS
    ):
        super().__init__(tracked_category)
        self.simulator = FlowShopSimulator(scale_by_quantity=scale_by_quantity, max_days=max_days)

    def estimate(
        self,
        hours_per_day: float,
        workstations: Sequence[Workstation],
        jobs: Sequence[Job]
    ) -> EstimationResult:
        validate_inputs(hours_per_day, workstations, jobs)
        ordered = order_jobs(jobs)
        tracked = [job for job in ordered if job.is_tracked(self.tracked_category)]

        simulation = None
        states: Dict[str, JobRuntimeState] = {}
        if tracked:
            simulation = self.simulator.simulate(hours_per_day, workstations, tracked)
            states = {state.job.id: state for state in simulation.completed_jobs}

        schedules = []
        for job in ordered:
            state = states.get(job.id)
            if state is None:
                schedules.append(JobSchedule(
                    job_id=job.id,
                    job_name=job.name,
                    tracked=False,
                    total_hours=0.0,
                    start_offset=0,
                    end_offset=0,
                    working_days=0
                ))
                continue
            schedules.append(JobSchedule(
                job_id=job.id,
                job_name=job.name,
                tracked=True,
                total_hours=sum(self.simulator.station_hours(job, ws) for ws in workstations),
                start_offset=state.start_day - 1,
                end_offset=state.end_day - 1,
                working_days=state.end_day - state.start_day + 1
            ))

        total_days = simulation.total_days if simulation else 0
        logger.info(
            "Flow-shop estimate computed",
            jobs=len(ordered),
            tracked_jobs=len(tracked),
            total_days=total_days
        )
        return EstimationResult(
            strategy=self.name,
            hours_per_day=hours_per_day,
            schedules=schedules,
            total_days=total_days,
            simulation=simulation
        )
