"""Rule-based conviction scoring for directional option trades.

Each rule that fires adds a human-readable reason to either the supporting or
the contradicting list and moves the score by a fixed amount:

Call signal
    +1 PCR above 1.1
    +2 put/call OI change ratio above 1.5, otherwise +1 above 1.0
    +2 call writers covering at or below spot
    -1 PCR below 0.8
    -1 OI change ratio between 0 and 0.8
    -2 put writers covering at or above spot

Put signal
    +1 PCR below 0.8
    +2 OI change ratio between 0 and 0.7, otherwise +1 between 0 and 1.0
    +2 put writers covering at or above spot
    -1 PCR above 1.1
    -1 OI change ratio above 1.2
    -2 call writers covering at or below spot

The call and put thresholds are deliberately not mirror images.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import pandas as pd

from nifty_signals.models.analytics import ConvictionResult, SignalType, Strength

from .base import ConvictionInputs, WritingFlow, measure_writing_flow


def format_indian(value: float) -> str:
    """Format a number with Indian digit grouping, e.g. ``12,34,567``."""

    rounded = int(abs(value) + 0.5)
    sign = "-" if value < 0 and rounded else ""
    digits = str(rounded)
    if len(digits) <= 3:
        return sign + digits

    head, tail = digits[:-3], digits[-3:]
    groups: List[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return sign + ",".join(groups + [tail])


def format_ratio(value: float) -> str:
    """Render a two-decimal ratio without trailing zeros, e.g. ``3`` or ``1.5``."""

    return f"{value:.2f}".rstrip("0").rstrip(".")


@dataclass
class _Evidence:
    score: int = 0
    supporting: List[str] = field(default_factory=list)
    contradicting: List[str] = field(default_factory=list)

    def support(self, reason: str, delta: int) -> None:
        self.supporting.append(reason)
        self.score += delta

    def contradict(self, reason: str, delta: int) -> None:
        self.contradicting.append(reason)
        self.score -= delta

    def to_result(self) -> ConvictionResult:
        return ConvictionResult(
            score=self.score,
            strength=Strength.from_score(self.score),
            supporting_reasons=list(self.supporting),
            contradicting_reasons=list(self.contradicting),
        )


class ConvictionEvaluator:
    """Scores call and put signals from aggregate chain positioning."""

    def evaluate(
        self,
        signal_type: SignalType | str,
        inputs: ConvictionInputs,
        frame: pd.DataFrame,
    ) -> ConvictionResult:
        signal = SignalType(signal_type)
        flow = measure_writing_flow(inputs, frame)
        evidence = _Evidence()

        if signal is SignalType.CALL:
            self._score_call(inputs.pcr_oi, flow, evidence)
        else:
            self._score_put(inputs.pcr_oi, flow, evidence)

        return evidence.to_result()

    @staticmethod
    def _score_call(pcr: float, flow: WritingFlow, evidence: _Evidence) -> None:
        ratio = flow.oi_ratio

        if pcr > 1.1:
            evidence.support(f"PCR > 1.1 ({pcr:.2f})", 1)
        if ratio > 1.5:
            evidence.support(f"Strong Put Writing (Ratio: {format_ratio(ratio)})", 2)
        elif ratio > 1.0:
            evidence.support("Put Writing > Call Writing", 1)
        if flow.call_writers_covering:
            evidence.support(f"Call Writers Covering ({format_indian(abs(flow.ce_unwind))})", 2)

        if pcr < 0.8:
            evidence.contradict(f"PCR < 0.8 ({pcr:.2f})", 1)
        if 0 < ratio < 0.8:
            evidence.contradict("Call Writing > Put Writing", 1)
        if flow.put_writers_covering:
            evidence.contradict(f"Put Writers Covering ({format_indian(abs(flow.pe_unwind))})", 2)

    @staticmethod
    def _score_put(pcr: float, flow: WritingFlow, evidence: _Evidence) -> None:
        ratio = flow.oi_ratio

        if pcr < 0.8:
            evidence.support(f"PCR < 0.8 ({pcr:.2f})", 1)
        if 0 < ratio < 0.7:
            evidence.support(f"Strong Call Writing (Ratio: {format_ratio(ratio)})", 2)
        elif 0 < ratio < 1.0:
            evidence.support("Call Writing > Put Writing", 1)
        if flow.put_writers_covering:
            evidence.support(f"Put Writers Covering ({format_indian(abs(flow.pe_unwind))})", 2)

        if pcr > 1.1:
            evidence.contradict(f"PCR > 1.1 ({pcr:.2f})", 1)
        if ratio > 1.2:
            evidence.contradict("Put Writing > Call Writing", 1)
        if flow.call_writers_covering:
            evidence.contradict(f"Call Writers Covering ({format_indian(abs(flow.ce_unwind))})", 2)


__all__ = ["ConvictionEvaluator", "format_indian", "format_ratio"]
