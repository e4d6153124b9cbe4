"""Serialization helpers shared between the API and the CLI."""

from __future__ import annotations

from typing import Any, Dict

from .analytics import AnalyticsResult, ConvictionResult


def serialize_conviction(conviction: ConvictionResult) -> Dict[str, Any]:
    """Return a JSON-compatible representation of a conviction result."""

    return conviction.model_dump(mode="json", by_alias=True)


def serialize_analytics(result: AnalyticsResult) -> Dict[str, Any]:
    """Return the aggregate analytics without the per-strike chain."""

    return result.model_dump(mode="json", by_alias=True, exclude={"chain"})


def serialize_analytics_response(result: AnalyticsResult) -> Dict[str, Any]:
    """Return the ``{"analytics", "fullData"}`` payload served to clients."""

    return {
        "analytics": serialize_analytics(result),
        "fullData": [row.model_dump(mode="json", by_alias=True) for row in result.chain],
    }


__all__ = [
    "serialize_analytics",
    "serialize_analytics_response",
    "serialize_conviction",
]
