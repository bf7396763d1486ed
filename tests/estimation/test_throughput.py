"""
Tests for the aggregate throughput estimator.
"""
import pytest

from pipeline_estimation.estimation.models import Job, Workstation
from pipeline_estimation.estimation.throughput import ThroughputEstimator, calculate_job_hours
from pipeline_estimation.exceptions import ConfigurationError
from pipeline_estimation.store.records import parse_jobs

TRACKED = 'JG Customs'


def make_job(job_id, quantity=1, priority=None, category=TRACKED, status='Not Started', manual_hours=None):
    return Job(
        id=job_id,
        name=f"Job {job_id}",
        category=category,
        status=status,
        manual_override_hours=manual_hours,
        quantity=quantity,
        priority=priority,
    )


@pytest.fixture
def stations():
    """Two stations, 8 hours per unit in total, no setup."""
    return [
        Workstation(id='S1', name='Cut', hours_required=4),
        Workstation(id='S2', name='Assemble', hours_required=4),
    ]


# ==============================================================================
# JOB HOURS TESTS
# ==============================================================================

class TestCalculateJobHours:
    """Tests for calculate_job_hours()."""

    def test_quantity_times_unit_hours_plus_setup(self):
        """Test the computed formula for a tracked job."""
        stations = [
            Workstation(id='S1', name='Cut', hours_required=2, setup_time=1),
            Workstation(id='S2', name='Assemble', hours_required=3),
        ]
        assert calculate_job_hours(make_job('J1', quantity=2), stations, TRACKED) == 11

    def test_manual_hours_override_once_started(self):
        """Test that an in-progress job uses its entered hours regardless of quantity or category."""
        job = make_job('J1', quantity=5, category='Other', status='In Progress', manual_hours=40)
        assert calculate_job_hours(job, [Workstation(id='S1', name='Cut', hours_required=9)], TRACKED) == 40

    def test_manual_hours_ignored_when_not_started(self):
        """Test that entered hours are ignored until work has begun."""
        job = make_job('J1', quantity=1, status='Not Started', manual_hours=40)
        stations = [Workstation(id='S1', name='Cut', hours_required=9)]
        assert calculate_job_hours(job, stations, TRACKED) == 9

    def test_untracked_job_needs_no_hours(self):
        """Test that jobs outside the tracked category need zero hours."""
        job = make_job('J1', quantity=10, category='Stock')
        assert calculate_job_hours(job, [Workstation(id='S1', name='Cut', hours_required=9)], TRACKED) == 0

    def test_no_category_filter_tracks_everything(self):
        """Test that a None tracked category counts every job."""
        job = make_job('J1', quantity=2, category=None)
        assert calculate_job_hours(job, [Workstation(id='S1', name='Cut', hours_required=3)], None) == 6


# ==============================================================================
# ESTIMATOR TESTS
# ==============================================================================

class TestThroughputEstimator:
    """Tests for ThroughputEstimator.estimate()."""

    def test_remainder_hours_carry_between_jobs(self, stations):
        """Test start offsets with combined capacity 16 hours per day."""
        jobs = [
            make_job('J1', quantity=1, priority=1),   # 8h
            make_job('J2', quantity=3, priority=2),   # 24h
            make_job('J3', quantity=2, priority=3),   # 16h
            make_job('J4', quantity=2, priority=4),   # 16h
        ]
        result = ThroughputEstimator(tracked_category=TRACKED).estimate(8, stations, jobs)

        offsets = [(s.job_id, s.start_offset, s.end_offset, s.working_days) for s in result.schedules]
        assert offsets == [
            ('J1', 0, 0, 1),
            ('J2', 0, 1, 2),
            ('J3', 2, 2, 1),
            ('J4', 3, 3, 1),
        ]
        assert result.total_days == 4

    def test_exact_multiple_does_not_double_count(self, stations):
        """Test that a job filling whole days leaves nothing in the accumulator."""
        jobs = [make_job('J1', quantity=2, priority=1), make_job('J2', quantity=2, priority=2)]
        result = ThroughputEstimator(tracked_category=TRACKED).estimate(8, stations, jobs)

        assert [s.start_offset for s in result.schedules] == [0, 1]

    def test_jobs_sorted_by_priority(self, stations):
        """Test that input order does not matter, priority does."""
        jobs = [make_job('LATE', priority=5), make_job('EARLY', priority=1), make_job('NONE')]
        result = ThroughputEstimator(tracked_category=TRACKED).estimate(8, stations, jobs)

        assert [s.job_id for s in result.schedules] == ['EARLY', 'LATE', 'NONE']

    def test_zero_hour_job_does_not_advance(self, stations):
        """Test that an untracked job takes no days."""
        jobs = [
            make_job('STOCK', priority=1, category='Stock'),
            make_job('J1', quantity=2, priority=2),
        ]
        result = ThroughputEstimator(tracked_category=TRACKED).estimate(8, stations, jobs)

        stock, tracked = result.schedules
        assert stock.tracked is False
        assert stock.working_days == 0
        assert stock.start_offset == stock.end_offset == 0
        assert tracked.start_offset == 0
        assert tracked.working_days == 1

    def test_manual_hours_job_counts_toward_capacity(self, stations):
        """Test that an in-progress job's entered hours push later jobs back."""
        jobs = [
            make_job('WIP', priority=1, status='In Progress', manual_hours=40),
            make_job('J1', quantity=1, priority=2),
        ]
        result = ThroughputEstimator(tracked_category=TRACKED).estimate(8, stations, jobs)

        wip, nxt = result.schedules
        assert wip.total_hours == 40
        assert wip.working_days == 3
        assert nxt.start_offset == 2

    def test_empty_jobs_rejected(self, stations):
        """Test that no jobs is a configuration error."""
        with pytest.raises(ConfigurationError):
            ThroughputEstimator().estimate(8, stations, [])

    def test_missing_hours_per_day_rejected(self, stations):
        """Test that missing capacity is a configuration error."""
        with pytest.raises(ConfigurationError):
            ThroughputEstimator().estimate(None, stations, [make_job('J1')])

    def test_repeat_runs_start_fresh(self, stations):
        """Test that accumulators do not survive between calls."""
        estimator = ThroughputEstimator(tracked_category=TRACKED)
        jobs = [make_job('J1', quantity=3, priority=1), make_job('J2', quantity=1, priority=2)]

        first = estimator.estimate(8, stations, jobs)
        second = estimator.estimate(8, stations, jobs)
        assert first == second

    def test_job_without_due_date_scheduled_last(self):
        """Test that a parsed job with no Needs By starts after a dated one."""
        jobs = parse_jobs([
            {'id': 'undated', 'fields': {'Unit Count': [1]}},
            {'id': 'dated', 'fields': {'Unit Count': [1], 'Needs By': '2026-11-02'}},
        ])
        stations = [Workstation(id='S1', name='Cut', hours_required=8)]

        result = ThroughputEstimator().estimate(8, stations, jobs)

        assert [s.job_id for s in result.schedules] == ['dated', 'undated']
        assert [s.start_offset for s in result.schedules] == [0, 1]
