"""Option-chain analytics and conviction signals for index options."""

from .analytics.engine import compute_analytics

__all__ = ["compute_analytics"]
