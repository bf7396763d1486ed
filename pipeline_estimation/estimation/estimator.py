"""
Strategy selection for estimation.

Both estimators implement the Estimator interface; which one runs is an
explicit configuration choice (ESTIMATION_STRATEGY).
"""

from typing import Optional

from pipeline_estimation.estimation.base import Estimator
from pipeline_estimation.estimation.config import EstimationConfig
from pipeline_estimation.estimation.flow_shop import FlowShopEstimator
from pipeline_estimation.estimation.throughput import ThroughputEstimator
from pipeline_estimation.exceptions import ConfigurationError


def create_estimator(
    strategy: str,
    tracked_category: Optional[str] = None,
    scale_by_quantity: bool = False
) -> Estimator:
    """
    Build the estimator for a configured strategy name.

    Args:
        strategy: 'flow_shop' or 'throughput' (aliases in EstimationConfig)
        tracked_category: Category that consumes hours (None tracks every job)
        scale_by_quantity: Flow-shop only; charge quantity-scaled hours per station

    Returns:
        Estimator instance

    Raises:
        ConfigurationError: If the strategy name is unknown
    """
    canonical = EstimationConfig.normalize_strategy(strategy)

    if canonical == 'flow_shop':
        return FlowShopEstimator(tracked_category=tracked_category, scale_by_quantity=scale_by_quantity)
    elif canonical == 'throughput':
        return ThroughputEstimator(tracked_category=tracked_category)

    valid = ', '.join(sorted(set(EstimationConfig.STRATEGY_ALIASES.values())))
    raise ConfigurationError(f"Unknown estimation strategy '{strategy}'. Expected one of: {valid}")


def estimator_from_config(config) -> Estimator:
    """Build the estimator described by a Config class."""
    return create_estimator(
        config.ESTIMATION_STRATEGY,
        tracked_category=config.TRACKED_CATEGORY or None,
        scale_by_quantity=config.SCALE_BY_QUANTITY
    )
