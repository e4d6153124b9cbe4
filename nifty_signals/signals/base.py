"""Inputs and derived open-interest flow metrics for conviction scoring."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import pandas as pd

# Net OI reduction (contracts) beyond which writers are considered to be covering.
UNWIND_THRESHOLD = -10_000


def round_half_up(value: float, places: int = 2) -> float:
    """Round ``value`` with ties away from zero, e.g. ``1.125 -> 1.13``."""

    step = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(step, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class ConvictionInputs:
    """Aggregate chain values a conviction score depends on."""

    pcr_oi: float
    total_pe_change: int
    total_ce_change: int
    spot: float


@dataclass(frozen=True)
class WritingFlow:
    """How put and call writers repositioned since the prior session.

    ``ce_unwind`` sums the negative call OI changes at or below spot and
    ``pe_unwind`` the negative put OI changes at or above spot; both are zero
    or negative.
    """

    oi_ratio: float
    ce_unwind: int
    pe_unwind: int

    @property
    def call_writers_covering(self) -> bool:
        return self.ce_unwind < UNWIND_THRESHOLD

    @property
    def put_writers_covering(self) -> bool:
        return self.pe_unwind < UNWIND_THRESHOLD


def measure_writing_flow(inputs: ConvictionInputs, frame: pd.DataFrame) -> WritingFlow:
    if inputs.total_ce_change > 0:
        oi_ratio = round_half_up(inputs.total_pe_change / inputs.total_ce_change)
    else:
        oi_ratio = 0.0

    strikes = frame["strike_price"]
    ce_change = frame["ce_change"]
    pe_change = frame["pe_change"]
    ce_unwind = ce_change[(strikes <= inputs.spot) & (ce_change < 0)].sum()
    pe_unwind = pe_change[(strikes >= inputs.spot) & (pe_change < 0)].sum()

    return WritingFlow(oi_ratio=float(oi_ratio), ce_unwind=int(ce_unwind), pe_unwind=int(pe_unwind))


__all__ = ["ConvictionInputs", "UNWIND_THRESHOLD", "WritingFlow", "measure_writing_flow", "round_half_up"]
