"""Flattened signal records shared with external logging sinks."""

from __future__ import annotations

from typing import Any, Dict, Optional

from nifty_signals.models.analytics import AnalyticsResult, SignalType, Strength


class LoggingSinkError(Exception):
    """Raised by a sink when a record could not be delivered."""


SIGNAL_LABELS = {
    SignalType.CALL: "Strong Call",
    SignalType.PUT: "Strong Put",
}


def build_signal_log_record(result: AnalyticsResult) -> Optional[Dict[str, Any]]:
    """Flatten the first strong signal (call before put) for a logging sink.

    Returns ``None`` when neither signal is strong.
    """

    for signal_type, level in (
        (SignalType.CALL, result.buy_call_level_scored),
        (SignalType.PUT, result.buy_put_level_scored),
    ):
        conviction = result.conviction_for(signal_type)
        if conviction.strength is not Strength.STRONG:
            continue
        return {
            "spot": result.spot,
            "signal_type": SIGNAL_LABELS[signal_type],
            "signal_level": level,
            "strength": conviction.strength.value,
            "score": conviction.score,
            "supporting": ", ".join(conviction.supporting_reasons),
            "contradicting": ", ".join(conviction.contradicting_reasons),
        }
    return None


__all__ = ["LoggingSinkError", "SIGNAL_LABELS", "build_signal_log_record"]
