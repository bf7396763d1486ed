"""
Estimation module for production schedule calculations.

Two interchangeable strategies (flow-shop simulation and aggregate throughput)
compute day-offset schedules; the aggregator resolves them to business-day
calendar dates.
"""

from pipeline_estimation.estimation.config import EstimationConfig
from pipeline_estimation.estimation.calendar import (
    CalendarOffset,
    offset,
    add_business_days,
    is_business_day,
    roll_forward,
    business_days_between,
    parse_holidays,
)
from pipeline_estimation.estimation.models import Job, Workstation, JobSchedule, JobEstimate, EstimationResult
from pipeline_estimation.estimation.base import Estimator
from pipeline_estimation.estimation.flow_shop import FlowShopSimulator, FlowShopEstimator, format_schedule
from pipeline_estimation.estimation.throughput import ThroughputEstimator, calculate_job_hours
from pipeline_estimation.estimation.estimator import create_estimator, estimator_from_config
from pipeline_estimation.estimation.aggregator import materialize_estimates, to_store_fields

__all__ = [
    'EstimationConfig',
    'CalendarOffset',
    'offset',
    'add_business_days',
    'is_business_day',
    'roll_forward',
    'business_days_between',
    'parse_holidays',
    'Job',
    'Workstation',
    'JobSchedule',
    'JobEstimate',
    'EstimationResult',
    'Estimator',
    'FlowShopSimulator',
    'FlowShopEstimator',
    'format_schedule',
    'ThroughputEstimator',
    'calculate_job_hours',
    'create_estimator',
    'estimator_from_config',
    'materialize_estimates',
    'to_store_fields',
]
