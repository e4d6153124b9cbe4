from .analytics import AnalyticsResult, ConvictionResult, SignalType, Strength
from .chain import MalformedSnapshotError, OptionRow, ScoredOptionRow, Snapshot
from .serialization import (
    serialize_analytics,
    serialize_analytics_response,
    serialize_conviction,
)

__all__ = [
    "AnalyticsResult",
    "ConvictionResult",
    "MalformedSnapshotError",
    "OptionRow",
    "ScoredOptionRow",
    "SignalType",
    "Snapshot",
    "Strength",
    "serialize_analytics",
    "serialize_analytics_response",
    "serialize_conviction",
]
