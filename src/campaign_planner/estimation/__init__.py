"""Benchmark-driven performance estimation.

Re-exports key functions and types for convenient access:
    from campaign_planner.estimation import estimate, EstimationConfig
"""

from campaign_planner.estimation.config import (
    DEFAULT_ESTIMATION_CONFIG,
    DEFAULT_ESTIMATION_CONFIG_PATH,
    EstimationConfig,
    load_estimation_config,
)
from campaign_planner.estimation.engine import (
    BlendedRates,
    PairAllocation,
    allocate_pairs,
    blend_rates,
    estimate,
    score_confidence,
)
from campaign_planner.estimation.insights import (
    DEFAULT_PAIR_RULES,
    DEFAULT_RULES,
    InsightRule,
    PairRule,
    evaluate_rules,
)

__all__ = [
    "DEFAULT_ESTIMATION_CONFIG",
    "DEFAULT_ESTIMATION_CONFIG_PATH",
    "DEFAULT_PAIR_RULES",
    "DEFAULT_RULES",
    "BlendedRates",
    "EstimationConfig",
    "InsightRule",
    "PairAllocation",
    "PairRule",
    "allocate_pairs",
    "blend_rates",
    "estimate",
    "evaluate_rules",
    "load_estimation_config",
    "score_confidence",
]
