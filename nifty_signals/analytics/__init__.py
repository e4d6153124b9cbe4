"""Option-chain analytics: ranks, max pain, composite scores and assembly."""

from .engine import AnalyticsAssembler, compute_analytics
from .max_pain import calculate_max_pain
from .ranking import percentile_ranks
from .scores import ScoreAggregator

__all__ = [
    "AnalyticsAssembler",
    "ScoreAggregator",
    "calculate_max_pain",
    "compute_analytics",
    "percentile_ranks",
]
