"""
Estimation configuration module.

Fixed engine constants shared by both estimation strategies and the record
parsing layer. Deployment settings (hours per day, strategy, tracked category)
live in pipeline_estimation.config.
"""

from typing import Dict, Optional


class EstimationConfig:
    """
    Constants for estimation calculations.

    These values mirror the behavior of the production base the estimator
    reads from. Change them only together with that base's conventions.
    """

    # Hard cap on simulated days; a run that needs more is a failure
    MAX_SIMULATION_DAYS: int = 365

    # Priority for jobs without a "Needs By" value; sorts after any date ordinal
    DEFAULT_PRIORITY: float = float('inf')

    # Number of days of activity included in the formatted schedule
    FORMATTED_SCHEDULE_DAYS: int = 30

    # Manufacturing status meaning no work has been recorded yet
    NOT_STARTED_STATUS: str = 'Not Started'

    # Status that removes a job from estimation entirely
    COMPLETE_STATUS: str = 'Complete'

    # Field names written back to the jobs table
    START_DATE_FIELD: str = 'Est. Start Date'
    END_DATE_FIELD: str = 'Est. Complete Date'
    WORKING_DAYS_FIELD: str = 'Days to Complete'

    # Configuration row that holds the holiday list
    HOLIDAYS_CONFIG_NAME: str = 'Holidays'

    # Strategy aliases accepted from configuration
    STRATEGY_ALIASES: Dict[str, str] = {
        'flow_shop': 'flow_shop',
        'flowshop': 'flow_shop',
        'flow-shop': 'flow_shop',
        'pipeline': 'flow_shop',
        'throughput': 'throughput',
        'aggregate': 'throughput',
    }

    @classmethod
    def normalize_strategy(cls, name: Optional[str]) -> Optional[str]:
        """
        Resolve a configured strategy name to its canonical form.

        Returns:
            Canonical strategy name, or None if the name is unknown
        """
        if not name:
            return None
        return cls.STRATEGY_ALIASES.get(name.strip().lower())

    @classmethod
    def is_not_started(cls, status: Optional[str]) -> bool:
        """
        True when the manufacturing status says no work has begun.

        Empty statuses count as not started.
        """
        if not status:
            return True
        return status.strip().lower() == cls.NOT_STARTED_STATUS.lower()
