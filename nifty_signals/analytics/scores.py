"""Composite support/resistance scoring across an option chain."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd

from .ranking import percentile_ranks

SUPPORT_COLUMNS: Tuple[str, ...] = ("pe_open_interest", "pe_change", "pe_volume")
RESISTANCE_COLUMNS: Tuple[str, ...] = ("ce_open_interest", "ce_change", "ce_volume")


@dataclass(frozen=True)
class DirectionalLevels:
    """Strikes suggested for directional entries."""

    buy_call_level_simple: float
    buy_put_level_simple: float
    buy_call_level_scored: float
    buy_put_level_scored: float


@dataclass(frozen=True)
class AtmQuote:
    """Implied volatility and straddle price at the strike nearest spot."""

    strike: float
    implied_vol: float
    straddle_price: float


class ScoreAggregator:
    """Builds per-strike support/resistance scores from percentile ranks.

    A strike's support score is the sum of its put OI, put OI change and put
    volume ranks; its resistance score uses the call columns. Each score lies
    in ``(0, 3]``.
    """

    def score(self, frame: pd.DataFrame) -> pd.DataFrame:
        """Return a copy of ``frame`` with ``support_score`` and ``resistance_score``."""

        scored = frame.copy()
        scored["support_score"] = self._composite(frame, SUPPORT_COLUMNS)
        scored["resistance_score"] = self._composite(frame, RESISTANCE_COLUMNS)
        return scored

    @staticmethod
    def _composite(frame: pd.DataFrame, columns: Tuple[str, ...]) -> pd.Series:
        first, *rest = columns
        total = percentile_ranks(frame[first])
        for column in rest:
            total = total + percentile_ranks(frame[column])
        return total

    @staticmethod
    def find_max_index(frame: pd.DataFrame, column: str) -> int:
        """Position of the row with the largest ``column`` value (first wins ties)."""

        if frame.empty:
            raise ValueError("Cannot search an empty option chain")
        return int(np.argmax(frame[column].to_numpy()))

    def strike_at_max(self, frame: pd.DataFrame, column: str) -> float:
        return float(frame["strike_price"].iloc[self.find_max_index(frame, column)])

    def directional_levels(self, scored: pd.DataFrame) -> DirectionalLevels:
        return DirectionalLevels(
            buy_call_level_simple=self.strike_at_max(scored, "pe_change"),
            buy_put_level_simple=self.strike_at_max(scored, "ce_change"),
            buy_call_level_scored=self.strike_at_max(scored, "support_score"),
            buy_put_level_scored=self.strike_at_max(scored, "resistance_score"),
        )

    @staticmethod
    def select_atm_row(frame: pd.DataFrame, spot: float) -> pd.Series:
        """Row whose strike is nearest ``spot``; the lower strike wins an exact tie."""

        if frame.empty:
            raise ValueError("Cannot select an ATM strike from an empty option chain")
        distance = (frame["strike_price"] - spot).abs().to_numpy()
        return frame.iloc[int(np.argmin(distance))]

    def atm_quote(self, frame: pd.DataFrame, spot: float) -> AtmQuote:
        row = self.select_atm_row(frame, spot)
        return AtmQuote(
            strike=float(row["strike_price"]),
            implied_vol=(float(row["ce_implied_vol"]) + float(row["pe_implied_vol"])) / 2,
            straddle_price=float(row["ce_last_price"]) + float(row["pe_last_price"]),
        )


__all__ = [
    "AtmQuote",
    "DirectionalLevels",
    "RESISTANCE_COLUMNS",
    "SUPPORT_COLUMNS",
    "ScoreAggregator",
]
